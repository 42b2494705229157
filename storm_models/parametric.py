"""
Parametric Storm Driven by a Best Track.

The storm state at any time is interpolated linearly between the two track
fixes that bracket it (clamped to the first/last fix outside the recorded
range), and the wind and pressure are evaluated from an analytic vortex
profile centred on the interpolated position.

Wind Direction
--------------
The profile wind blows tangentially: counter-clockwise in the northern
hemisphere and clockwise in the southern. The storm translation velocity is
added, scaled by V(r)/Vm so that it fades with the vortex.
"""

from dataclasses import astuple
from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants
from common.types import TrackEntry
from configuration.storm_config import StormConfig
from geospatial.distance_calculations import compute_storm_motion, geodesic_inverse_batch
from storm_models.base import StormSource, WindPressure
from storm_models.vortex_profiles import VORTEX_MODELS, HollandWindModel


class ParametricStorm(StormSource):
    """Analytic vortex following a best track.

    Attributes
    ----------
    track : list of TrackEntry
        Fixes ordered by strictly increasing time.
    model_type : int
        Key of VORTEX_MODELS.
    """

    def __init__(
        self,
        track: Sequence[TrackEntry],
        config: StormConfig = None,
        model_type: int = None
    ):
        """Initialize the parametric storm.

        Parameters
        ----------
        track : sequence of TrackEntry
            Track fixes; at least one, with strictly increasing times.
        config : StormConfig, optional
            Shared configuration (also supplies the model type).
        model_type : int, optional
            Overrides config.model_type; defaults to Holland (1980).
        """
        super().__init__(config)

        if model_type is None:
            model_type = config.model_type if config is not None else 1
        if model_type not in VORTEX_MODELS:
            raise ValueError(
                f"Unknown parametric model {model_type}; expected one of {sorted(VORTEX_MODELS)}"
            )
        self.model_type = model_type
        self._wind_model = VORTEX_MODELS[model_type]

        self.track: List[TrackEntry] = list(track)
        if not self.track:
            raise ValueError("A parametric storm needs at least one track entry")
        self._times = np.array([entry.time for entry in self.track])
        if np.any(np.diff(self._times) <= 0):
            raise ValueError("Track times must be strictly increasing")

        self._logger.info(
            f"Parametric storm ({self._wind_model.__name__}) with {len(self.track)} fixes "
            f"from t = {self._times[0]:g} to {self._times[-1]:g} s"
        )

    def _bracket(self, t: float) -> Tuple[int, float]:
        """Index of the segment containing t and the fraction along it.

        Times outside the track are clamped, so the fraction is in [0, 1].
        With a single fix the index is 0 and the fraction 0.
        """
        if len(self.track) == 1:
            return 0, 0.0

        index = int(np.searchsorted(self._times, t, side='right')) - 1
        index = min(max(index, 0), len(self.track) - 2)

        t0, t1 = self._times[index], self._times[index + 1]
        alpha = (t - t0) / (t1 - t0)
        return index, float(np.clip(alpha, 0.0, 1.0))

    def state_at(self, t: float) -> TrackEntry:
        """Interpolate the track to time t.

        Returns
        -------
        TrackEntry
            Interpolated fix with its time set to t.
        """
        index, alpha = self._bracket(t)
        start = self.track[index]
        if alpha == 0.0:
            return TrackEntry(t, *astuple(start)[1:])

        end = self.track[index + 1]
        values = [
            a + alpha * (b - a)
            for a, b in zip(astuple(start)[1:], astuple(end)[1:])
        ]
        return TrackEntry(t, *values)

    def location(self, t: float) -> Tuple[float, float]:
        return self.state_at(t).location

    def _motion(self, t: float) -> Tuple[float, float, float, float]:
        """Translation (speed, heading, u, v) of the segment containing t."""
        if len(self.track) == 1:
            return 0.0, 0.0, 0.0, 0.0

        index, _ = self._bracket(t)
        start, end = self.track[index], self.track[index + 1]
        return compute_storm_motion(start.location, end.location, end.time - start.time)

    def direction(self, t: float) -> float:
        return self._motion(t)[1]

    def wind_model_at(self, t: float) -> HollandWindModel:
        """Vortex profile for the storm state at time t."""
        state = self.state_at(t)
        return self._wind_model(
            central_pressure_Pa=state.central_pressure,
            max_wind_ms=state.max_wind_speed,
            radius_max_wind_m=state.radius_max_wind,
        )

    def wind_and_pressure(
        self,
        lon: NDArray[np.float64],
        lat: NDArray[np.float64],
        t: float
    ) -> WindPressure:
        state = self.state_at(t)
        model = self.wind_model_at(t)

        radius, azimuth = geodesic_inverse_batch(state.longitude, state.latitude, lon, lat)
        coriolis = PhysicalConstants.coriolis_parameter(np.radians(lat))

        speed = model.wind_at_radius(radius, coriolis)
        pressure = model.pressure_at_radius(radius)

        # Tangential flow: counter-clockwise in the northern hemisphere
        hemisphere = 1.0 if state.latitude >= 0.0 else -1.0
        az = np.radians(azimuth)
        u = -hemisphere * speed * np.cos(az)
        v = hemisphere * speed * np.sin(az)

        _, _, u_trans, v_trans = self._motion(t)
        if state.max_wind_speed > 0.0:
            fade = speed / state.max_wind_speed
            u = u + fade * u_trans
            v = v + fade * v_trans

        return u, v, pressure

