"""
Geospatial Module for the Storm Forcing System.

All Earth-surface calculations (storm-to-cell distances, bearings and storm
translation) MUST originate from this module. No downstream module may
implement geometry calculations independently.
"""

from geospatial.distance_calculations import (
    GeodesicResult,
    geodesic_inverse,
    geodesic_inverse_batch,
    geodesic_distance_batch,
    compute_storm_motion,
)

__all__ = [
    "GeodesicResult",
    "geodesic_inverse",
    "geodesic_inverse_batch",
    "geodesic_distance_batch",
    "compute_storm_motion",
]
