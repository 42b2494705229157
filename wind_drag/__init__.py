"""
Wind Drag Module for the Storm Forcing System.

This module provides the drag laws that turn wind into surface stress.
"""

from wind_drag.drag_laws import (
    WindDragLaw,
    no_wind_drag,
    garret_wind_drag,
    powell_wind_drag,
    powell_sector_drags,
    wind_stress,
)

__all__ = [
    "WindDragLaw",
    "no_wind_drag",
    "garret_wind_drag",
    "powell_wind_drag",
    "powell_sector_drags",
    "wind_stress",
]
