"""
Physical Constants for Storm Surge Forcing.

Every constant the forcing fields depend on lives here, in SI units, together
with the reference it was taken from. The "no storm" sentinels returned by an
undefined storm source are defined alongside them.

References
----------
- Earth rotation: IERS Conventions (2010)
- Air density and ambient pressure: Holland, G.J. (1980), Mon. Wea. Rev.
- Drag cap: Garratt, J.R. (1977), Mon. Wea. Rev.
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """Value of a physical constant with its provenance.

    Attributes
    ----------
    value : float
        Nominal value in `unit`.
    uncertainty : float
        One-sigma uncertainty, 0 for defined values.
    unit : str
        SI unit.
    source : str
        Where the value comes from.
    description : str
        What the constant is used for.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class PhysicalConstants:
    """Registry of the constants used by the vortex profiles and drag laws."""

    # Earth rotation

    EARTH_ANGULAR_VELOCITY: Final[Constant] = Constant(
        value=7.2921150e-5,
        uncertainty=1e-14,
        unit="rad/s",
        source="IERS Conventions (2010)",
        description="Sidereal rotation rate used for the Coriolis parameter"
    )

    # Atmosphere

    AIR_DENSITY: Final[Constant] = Constant(
        value=1.15,
        uncertainty=0.05,
        unit="kg/m³",
        source="Holland (1980)",
        description="Surface air density used in the gradient wind balance"
    )

    AMBIENT_PRESSURE: Final[Constant] = Constant(
        value=101300.0,
        uncertainty=500.0,
        unit="Pa",
        source="Holland (1980)",
        description="Environmental pressure far from the storm centre"
    )

    # Surface drag

    WIND_DRAG_LIMIT: Final[Constant] = Constant(
        value=2.0e-3,
        uncertainty=0.0,
        unit="1",
        source="Garratt (1977)",
        description="Upper bound of the Garratt wind drag coefficient"
    )

    @staticmethod
    def coriolis_parameter(latitude_rad):
        """Coriolis parameter f = 2Ω sin(φ) in s⁻¹ for latitudes in radians."""
        omega = PhysicalConstants.EARTH_ANGULAR_VELOCITY.value
        return 2.0 * omega * np.sin(latitude_rad)


# Sentinels for "no storm"; consumers treat them as infinitely far away
UNDEFINED_LOCATION: Final = (np.inf, np.inf)
UNDEFINED_DIRECTION: Final = np.inf
