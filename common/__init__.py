"""
Common utilities and infrastructure for the storm surge forcing system.

This package provides foundational components used across all modules:
- Physical constants with uncertainty bounds and "no storm" sentinels
- Unit registry for converting storm input data to SI
- Type definitions for track fixes and AMR patch geometry
- Logging infrastructure
"""

from common.constants import PhysicalConstants, UNDEFINED_LOCATION, UNDEFINED_DIRECTION
from common.units import ureg, Q_, convert_track_columns
from common.types import TrackEntry, PatchGeometry
from common.logging_config import get_logger, file_logging

__all__ = [
    "PhysicalConstants",
    "UNDEFINED_LOCATION",
    "UNDEFINED_DIRECTION",
    "ureg",
    "Q_",
    "convert_track_columns",
    "TrackEntry",
    "PatchGeometry",
    "get_logger",
    "file_logging",
]
