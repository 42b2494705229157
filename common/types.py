"""
Type Definitions for the Storm Forcing System.

This module defines dataclasses that describe the data exchanged between the
storm models and the adaptive mesh solver. All values are in SI units with
positions in geographic degrees.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class TrackEntry:
    """A single best-track fix of a parametric storm.

    Attributes
    ----------
    time : float
        Simulation time of the fix in SECONDS.
    longitude : float
        Storm centre longitude in DEGREES.
    latitude : float
        Storm centre latitude in DEGREES.
    max_wind_speed : float
        Maximum sustained wind speed in M/S.
    radius_max_wind : float
        Radius of maximum winds in METERS.
    central_pressure : float
        Minimum central pressure in PASCALS.
    """
    time: float  # s
    longitude: float  # degrees
    latitude: float  # degrees
    max_wind_speed: float  # m/s
    radius_max_wind: float  # m
    central_pressure: float  # Pa

    @property
    def location(self) -> Tuple[float, float]:
        """Storm centre as (longitude, latitude) in degrees."""
        return self.longitude, self.latitude


@dataclass(frozen=True)
class PatchGeometry:
    """Geometry of a single AMR patch.

    The auxiliary array of the patch has shape
    ``(maux, mx + 2 * num_ghost, my + 2 * num_ghost)``, i.e. ghost cells are
    stored on both sides of each dimension.

    Attributes
    ----------
    xlower, ylower : float
        Lower-left corner of the interior cells in DEGREES.
    dx, dy : float
        Cell spacing in DEGREES.
    mx, my : int
        Number of interior cells in each direction.
    num_ghost : int
        Width of the ghost-cell halo.
    """
    xlower: float
    ylower: float
    dx: float
    dy: float
    mx: int
    my: int
    num_ghost: int = 2

    def __post_init__(self):
        """Validate patch dimensions."""
        if self.mx <= 0 or self.my <= 0:
            raise ValueError(f"Patch must have cells, got mx={self.mx}, my={self.my}")
        if self.dx <= 0 or self.dy <= 0:
            raise ValueError(f"Cell spacing must be positive, got dx={self.dx}, dy={self.dy}")
        if self.num_ghost < 0:
            raise ValueError(f"Ghost width must be non-negative, got {self.num_ghost}")

    @property
    def shape(self) -> Tuple[int, int]:
        """Number of cells including the ghost halo."""
        return self.mx + 2 * self.num_ghost, self.my + 2 * self.num_ghost

    def cell_centers(self) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Cell-centre coordinates of every cell, ghosts included.

        Returns
        -------
        Tuple[ndarray, ndarray]
            (x, y) arrays of shape ``self.shape`` with ``indexing='ij'``.
        """
        nx, ny = self.shape
        x = self.xlower + (np.arange(nx) - self.num_ghost + 0.5) * self.dx
        y = self.ylower + (np.arange(ny) - self.num_ghost + 0.5) * self.dy
        return np.meshgrid(x, y, indexing='ij')


# Type aliases for array types
AuxArray = NDArray[np.float64]  # Shape: (maux, mx + 2*mbc, my + 2*mbc)
