"""
Storm Source Interface.

A storm source answers three questions for the surge solver at any
simulation time: where the storm is, which way it is heading, and what wind
and pressure it imposes on a mesh patch.

There are exactly three representations:

- NullStorm: no storm; every query returns the "undefined" sentinels and
  patches are left untouched
- ParametricStorm: analytic vortex driven by a best track
- GriddedStorm: interpolated raster wind and pressure snapshots

Aux Channel Layout
------------------
``aux[wind_index - 1]`` and ``aux[wind_index]`` receive the eastward and
northward wind stress (Pa); ``aux[pressure_index - 1]`` receives the surface
pressure (Pa). The stress channels are left alone when wind forcing is off.
Channel indices in StormConfig are 1-based.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants, UNDEFINED_LOCATION, UNDEFINED_DIRECTION
from common.logging_config import get_logger
from common.types import AuxArray, PatchGeometry
from configuration.storm_config import StormConfig
from geospatial.distance_calculations import geodesic_inverse_batch
from wind_drag.drag_laws import wind_stress

logger = get_logger(__name__)

WindPressure = Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]


class StormSource(ABC):
    """Abstract base class for storm representations.

    Subclasses must not keep per-call scratch state: every query depends only
    on its arguments and the read-only storm data, so patches can be filled
    in any order.
    """

    def __init__(self, config: Optional[StormConfig] = None):
        """Initialize the storm source.

        Parameters
        ----------
        config : StormConfig, optional
            Shared configuration; required by sources that write fields.
        """
        self.config = config
        self._logger = get_logger(self.__class__.__name__)

    @property
    def is_defined(self) -> bool:
        """Whether the source represents an actual storm."""
        return True

    @abstractmethod
    def location(self, t: float) -> Tuple[float, float]:
        """Storm centre (longitude, latitude) in degrees at time t."""
        pass

    @abstractmethod
    def direction(self, t: float) -> float:
        """Storm heading in degrees clockwise from north at time t."""
        pass

    @abstractmethod
    def wind_and_pressure(
        self,
        lon: NDArray[np.float64],
        lat: NDArray[np.float64],
        t: float
    ) -> WindPressure:
        """Evaluate the 10 m wind and surface pressure at arbitrary points.

        Parameters
        ----------
        lon, lat : ndarray
            Point coordinates in degrees (same shape).
        t : float
            Simulation time in seconds.

        Returns
        -------
        Tuple[ndarray, ndarray, ndarray]
            (u, v, pressure) in m/s, m/s and Pa, shaped like `lon`.
        """
        pass

    def relative_bearing(
        self,
        lon: NDArray[np.float64],
        lat: NDArray[np.float64],
        t: float
    ) -> NDArray[np.float64]:
        """Bearing of each point from the storm centre, relative to the heading.

        Returns
        -------
        ndarray
            Degrees clockwise from the storm heading in [0, 360), or NaN where
            the storm location or heading is undefined.
        """
        center = self.location(t)
        heading = self.direction(t)
        if not (np.all(np.isfinite(center)) and np.isfinite(heading)):
            return np.full(np.shape(lon), np.nan)

        _, azimuth = geodesic_inverse_batch(center[0], center[1], lon, lat)
        return np.mod(azimuth - heading, 360.0)

    def populate_fields(self, aux: AuxArray, geometry: PatchGeometry, t: float) -> None:
        """Write wind stress and pressure into a patch's aux array in place.

        Every cell, ghosts included, is overwritten with values at time `t`;
        nothing is accumulated, so repeated calls are idempotent. The wind
        stress channels are only written when wind forcing is on.

        Parameters
        ----------
        aux : ndarray
            Aux array of shape (maux, *geometry.shape).
        geometry : PatchGeometry
            Patch description.
        t : float
            Simulation time in seconds.
        """
        if self.config is None:
            raise RuntimeError(f"{self.__class__.__name__} needs a StormConfig to populate fields")

        x, y = geometry.cell_centers()
        u, v, pressure = self.wind_and_pressure(x, y, t)

        if self.config.wind_forcing:
            theta = self.relative_bearing(x, y, t)
            drag = self.config.drag_law.coefficient(np.hypot(u, v), theta)
            tau_x, tau_y = wind_stress(u, v, drag)

            wind = self.config.wind_index - 1
            aux[wind] = tau_x
            aux[wind + 1] = tau_y

        if self.config.pressure_forcing:
            aux[self.config.pressure_index - 1] = pressure
        else:
            aux[self.config.pressure_index - 1] = PhysicalConstants.AMBIENT_PRESSURE.value


class NullStorm(StormSource):
    """Absence of a storm.

    Location and direction are the undefined sentinels, the wind is calm and
    `populate_fields` leaves the aux array exactly as it was.
    """

    @property
    def is_defined(self) -> bool:
        return False

    def location(self, t: float) -> Tuple[float, float]:
        return UNDEFINED_LOCATION

    def direction(self, t: float) -> float:
        return UNDEFINED_DIRECTION

    def wind_and_pressure(
        self,
        lon: NDArray[np.float64],
        lat: NDArray[np.float64],
        t: float
    ) -> WindPressure:
        shape = np.shape(lon)
        ambient = PhysicalConstants.AMBIENT_PRESSURE.value
        return np.zeros(shape), np.zeros(shape), np.full(shape, ambient)

    def populate_fields(self, aux: AuxArray, geometry: PatchGeometry, t: float) -> None:
        return None
