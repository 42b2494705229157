"""
Storm Models for the Storm Forcing System.

This module provides the three storm representations and the factory that
selects one from the configuration.
"""

from storm_models.base import StormSource, NullStorm
from storm_models.parametric import ParametricStorm
from storm_models.gridded import GriddedStorm
from storm_models.vortex_profiles import HollandWindModel, RankineWindModel, VORTEX_MODELS
from storm_models.factory import build_storm_source

__all__ = [
    "StormSource",
    "NullStorm",
    "ParametricStorm",
    "GriddedStorm",
    "HollandWindModel",
    "RankineWindModel",
    "VORTEX_MODELS",
    "build_storm_source",
]
