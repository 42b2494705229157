"""
Storm Forcing Field.

Call-site contract between the AMR engine and the storm source: every
active patch is checked against the configured aux layout before the storm
source overwrites its wind stress and pressure channels. The field also
supplies the per-cell storm distance and wind speed used while flagging
cells for refinement.

The class holds no per-call state; all results depend only on the patch,
the time, and the read-only storm data.
"""

import numpy as np
from numpy.typing import NDArray

from common.logging_config import get_logger
from common.types import AuxArray, PatchGeometry
from configuration.storm_config import StormConfig
from geospatial.distance_calculations import geodesic_distance_batch
from storm_models.base import StormSource
from surge_forcing.refinement import RefinementCriteria

logger = get_logger(__name__)


class StormForcingField:
    """Injects storm forcing into AMR patches.

    Examples
    --------
    >>> config = load_storm_config("surge.data")
    >>> forcing = StormForcingField(config, build_storm_source(config))
    >>> forcing.populate(aux, geometry, t=3600.0)
    """

    def __init__(self, config: StormConfig, source: StormSource):
        """Initialize the forcing field.

        Parameters
        ----------
        config : StormConfig
            Shared configuration.
        source : StormSource
            The loaded storm.
        """
        self.config = config
        self.source = source
        self.criteria = RefinementCriteria.from_config(config)
        self._logger = get_logger("StormForcingField")

    def _check_call(self, aux: AuxArray, geometry: PatchGeometry, t: float) -> None:
        """Validate that a patch and time can be filled."""
        if not np.isfinite(t):
            raise ValueError(f"Simulation time must be finite, got {t}")

        if aux.ndim != 3 or aux.shape[1:] != geometry.shape:
            raise ValueError(
                f"Aux array of shape {aux.shape} does not match patch cells {geometry.shape}"
            )

        maux = aux.shape[0]
        channels = (self.config.wind_index, self.config.wind_index + 1, self.config.pressure_index)
        if min(channels) < 1 or max(channels) > maux:
            raise ValueError(
                f"Aux channels {channels} (1-based) outside the {maux} available"
            )

    def populate(self, aux: AuxArray, geometry: PatchGeometry, t: float) -> None:
        """Fill a patch's wind stress and pressure channels at time t.

        Parameters
        ----------
        aux : ndarray
            Aux array of shape (maux, *geometry.shape), modified in place.
        geometry : PatchGeometry
            Patch description.
        t : float
            Simulation time in seconds.

        Raises
        ------
        ValueError
            If the patch does not match the configured layout or t is not finite.
        """
        self._check_call(aux, geometry, t)
        self.source.populate_fields(aux, geometry, t)

    def cell_distance(self, geometry: PatchGeometry, t: float) -> NDArray[np.float64]:
        """Distance in meters from the storm centre to every cell (inf if no storm)."""
        x, y = geometry.cell_centers()
        lon, lat = self.source.location(t)
        return geodesic_distance_batch(lon, lat, x, y)

    def cell_wind_speed(self, geometry: PatchGeometry, t: float) -> NDArray[np.float64]:
        """Storm wind speed in m/s at every cell."""
        x, y = geometry.cell_centers()
        u, v, _ = self.source.wind_and_pressure(x, y, t)
        return np.hypot(u, v)

    def flag_patch(self, geometry: PatchGeometry, level: int, t: float) -> NDArray[np.bool_]:
        """Cells of a patch at `level` that the storm wants refined.

        Returns
        -------
        ndarray of bool
            Shape ``geometry.shape``.
        """
        if not self.source.is_defined:
            return np.zeros(geometry.shape, dtype=bool)

        distance = self.cell_distance(geometry, t)
        wind_speed = self.cell_wind_speed(geometry, t)
        flags = self.criteria.flag(level, distance, wind_speed)

        self._logger.debug(f"Flagged {int(flags.sum())} cells at level {level}, t = {t:g}")
        return flags
