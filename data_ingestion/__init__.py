"""
Data Ingestion Module for the Storm Forcing System.

This module provides loaders for the track and gridded data that drive the
storm models.
"""

from data_ingestion.loaders import (
    BestTrackLoader,
    GriddedFieldLoader,
    DataProvenance,
    StormDataError,
    standardize_gridded_dataset,
    GRIDDED_CONVENTIONS,
)

__all__ = [
    "BestTrackLoader",
    "GriddedFieldLoader",
    "DataProvenance",
    "StormDataError",
    "standardize_gridded_dataset",
    "GRIDDED_CONVENTIONS",
]
