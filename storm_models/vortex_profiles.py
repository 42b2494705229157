"""
Parametric Vortex Profiles for Tropical Cyclones.

This module provides the radial wind and pressure profiles evaluated by the
parametric storm.

Wind Field Models
-----------------
- Holland (1980): gradient wind from an exponential pressure profile
- Modified Rankine: solid-body core with a power-law decay outside Rm

Both share the Holland pressure profile, so switching the wind model leaves
the pressure forcing unchanged.

References
----------
- Holland, G.J. (1980). An analytic model of the wind and pressure profiles
  in hurricanes. Mon. Wea. Rev., 108, 1212-1218.
- Depperman, C.E. (1947). Notes on the origin and structure of Philippine
  typhoons. Bull. Amer. Meteor. Soc., 28, 399-404.
"""

from typing import Dict, Type
import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants
from common.logging_config import get_logger

logger = get_logger(__name__)


class HollandWindModel:
    """Holland (1980) parametric wind profile model.

    Model Equation
    --------------
    V(r) = sqrt((Rm/r)^B × exp(1 - (Rm/r)^B) × Vm² + (rf/2)²) - r|f|/2

    P(r) = Pc + ΔP × exp(-(Rm/r)^B)

    where:
    - B = ρ e Vm² / ΔP, the Holland shape parameter, clipped to [1, 2.5]
    - r: Radius from storm center
    - Rm: Radius of maximum winds
    - Vm: Maximum sustained wind
    - ΔP = P∞ - Pc: Pressure deficit
    - f: Coriolis parameter

    Assumptions
    -----------
    - Axisymmetric wind field
    - Gradient wind balance
    """

    B_MIN = 1.0
    B_MAX = 2.5

    def __init__(
        self,
        central_pressure_Pa: float,
        max_wind_ms: float,
        radius_max_wind_m: float,
        ambient_pressure_Pa: float = PhysicalConstants.AMBIENT_PRESSURE.value
    ):
        """Initialize the wind model.

        Parameters
        ----------
        central_pressure_Pa : float
            Central pressure in Pascals.
        max_wind_ms : float
            Maximum sustained wind in m/s.
        radius_max_wind_m : float
            Radius of maximum winds in meters.
        ambient_pressure_Pa : float
            Ambient (environmental) pressure in Pascals.
        """
        self.Pc = central_pressure_Pa
        self.P_inf = ambient_pressure_Pa
        self.Vm = max_wind_ms
        self.Rm = radius_max_wind_m
        self.rho = PhysicalConstants.AIR_DENSITY.value

        # Pressure deficit
        self.delta_P = max(self.P_inf - self.Pc, 0.0)

        self.B = self._holland_B()

    def _holland_B(self) -> float:
        """Shape parameter from the wind-pressure relationship."""
        if self.delta_P <= 0.0:
            return self.B_MIN
        B = self.rho * np.e * self.Vm ** 2 / self.delta_P
        return float(np.clip(B, self.B_MIN, self.B_MAX))

    def _scaled_radius(self, radius_m: NDArray[np.float64]) -> NDArray[np.float64]:
        """(Rm / r)^B, with the centre mapped to infinity."""
        r = np.asarray(radius_m, dtype=np.float64)
        with np.errstate(divide='ignore'):
            return np.where(r > 0.0, (self.Rm / np.where(r > 0.0, r, 1.0)) ** self.B, np.inf)

    def wind_at_radius(
        self,
        radius_m: NDArray[np.float64],
        coriolis: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Calculate gradient wind speed at the given radii.

        Parameters
        ----------
        radius_m : ndarray
            Radius from storm center in meters.
        coriolis : ndarray
            Coriolis parameter at each point in s⁻¹.

        Returns
        -------
        ndarray
            Wind speed in m/s (zero at the centre).
        """
        r = np.asarray(radius_m, dtype=np.float64)
        f = np.abs(coriolis)
        scaled = self._scaled_radius(r)

        with np.errstate(invalid='ignore', over='ignore'):
            core = np.where(np.isfinite(scaled), scaled * np.exp(1.0 - scaled), 0.0)
        V = np.sqrt(core * self.Vm ** 2 + (r * f / 2) ** 2) - r * f / 2

        return np.maximum(V, 0.0)

    def pressure_at_radius(self, radius_m: NDArray[np.float64]) -> NDArray[np.float64]:
        """Calculate surface pressure at the given radii in Pascals."""
        scaled = self._scaled_radius(radius_m)
        return self.Pc + self.delta_P * np.exp(-scaled)


class RankineWindModel(HollandWindModel):
    """Modified Rankine vortex.

    Model Equation
    --------------
    V(r) = Vm × r / Rm             for r < Rm
    V(r) = Vm × (Rm / r)^α         for r ≥ Rm

    with the decay exponent α = 0.5. Pressure follows the Holland profile.
    """

    DECAY_EXPONENT = 0.5

    def wind_at_radius(
        self,
        radius_m: NDArray[np.float64],
        coriolis: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        r = np.asarray(radius_m, dtype=np.float64)
        inner = self.Vm * r / self.Rm
        with np.errstate(divide='ignore'):
            outer = self.Vm * (self.Rm / np.where(r > 0.0, r, self.Rm)) ** self.DECAY_EXPONENT
        return np.where(r < self.Rm, inner, outer)


# Parametric sub-models, keyed by the configured model_type
VORTEX_MODELS: Dict[int, Type[HollandWindModel]] = {
    1: HollandWindModel,
    2: RankineWindModel,
}
