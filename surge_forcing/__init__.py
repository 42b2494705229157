"""
Surge Forcing Module.

This module connects the storm models to the adaptive mesh solver:
populating aux arrays, flagging cells for refinement, and recording the
storm track.
"""

from surge_forcing.forcing_field import StormForcingField
from surge_forcing.refinement import RefinementCriteria, refinement_level, flag_cells
from surge_forcing.track_logger import TrackLogger

__all__ = [
    "StormForcingField",
    "RefinementCriteria",
    "refinement_level",
    "flag_cells",
    "TrackLogger",
]
