"""
Wind Drag Laws for Surface Stress.

This module maps 10 m wind speed (and, for the Powell law, the bearing of a
point relative to the storm heading) to a dimensionless drag coefficient.
The wind stress on the water column is then

    τ = ρ_air × C_d(|U|, θ) × |U| × U

Available Laws
--------------
- None: disables wind stress (C_d = 0)
- Garret: linear in wind speed, capped at 2e-3
- Powell: sector-based coefficients for the left, right and rear of the
  storm, blended by bearing. The band and sector boundaries encode an
  empirical curve fit and must not be tuned.

All functions are vectorized over numpy arrays and never return NaN:
non-finite or negative speeds give a zero coefficient, and a non-finite
bearing (undefined storm direction) is treated as 0 degrees.

References
----------
- Garratt, J.R. (1977). Review of drag coefficients over oceans and
  continents. Mon. Wea. Rev., 105, 915-929.
- Powell, M.D. (2006). Final Report to the NOAA Joint Hurricane Testbed
  (JHT) Program. 26 pp.
"""

from enum import IntEnum
from typing import Tuple, Union
import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants

ArrayLike = Union[float, NDArray[np.float64]]

# Powell speed band upper edges in m/s
POWELL_SPEED_BREAKPOINTS = (15.708, 18.7, 25.0, 30.0, 35.0, 45.0)

# Powell sector boundaries in degrees clockwise from the storm heading
POWELL_SECTOR_BOUNDARIES = (0.0, 85.0, 195.0, 310.0, 360.0)


def _sanitize(
    wind_speed: ArrayLike,
    theta: ArrayLike
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.bool_]]:
    """Broadcast inputs and mask out degenerate values."""
    speed, theta = np.broadcast_arrays(
        np.asarray(wind_speed, dtype=np.float64),
        np.asarray(theta, dtype=np.float64),
    )
    valid = np.isfinite(speed) & (speed >= 0.0)
    speed = np.where(valid, speed, 0.0)
    theta = np.where(np.isfinite(theta), np.mod(theta, 360.0), 0.0)
    return speed, theta, valid


def no_wind_drag(wind_speed: ArrayLike, theta: ArrayLike) -> NDArray[np.float64]:
    """Dummy drag law used to turn off wind stress."""
    speed, _, _ = _sanitize(wind_speed, theta)
    return np.zeros_like(speed)


def garret_wind_drag(wind_speed: ArrayLike, theta: ArrayLike) -> NDArray[np.float64]:
    """Garratt (1977) drag law, limited to WIND_DRAG_LIMIT.

    The bearing is accepted for interface compatibility and ignored.
    """
    speed, _, valid = _sanitize(wind_speed, theta)
    limit = PhysicalConstants.WIND_DRAG_LIMIT.value
    drag = np.minimum(limit, (0.75 + 0.067 * speed) * 1e-3)
    return np.where(valid, drag, 0.0)


def powell_sector_drags(
    wind_speed: ArrayLike
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Compute the Powell (2006) left, right and rear drag coefficients.

    Parameters
    ----------
    wind_speed : float or ndarray
        Wind speed in m/s (assumed finite and non-negative).

    Returns
    -------
    Tuple[ndarray, ndarray, ndarray]
        (left, right, rear) coefficients.

    Notes
    -----
    Band formulas (s = speed):

    ============  ==========================  ==========================  ==========================
    band          left                        right                       rear
    ============  ==========================  ==========================  ==========================
    ≤ 15.708      7.5e-4 + 6.6845e-5 s        = left                      = left
    ≤ 18.7        1.8e-3                      7.5e-4 + 6.6845e-5 s        = right
    ≤ 25          1.8e-3                      2.0e-3                      = right
    ≤ 30          1.8e-3 + 5.4e-4 (s - 25)    2.0e-3                      = right
    ≤ 35          4.5e-3 - 2.33333e-4 (s-30)  2.0e-3                      = right
    ≤ 45          4.5e-3 - 2.33333e-4 (s-30)  2.0e-3 + 1e-4 (s - 35)      2.0e-3 - 1e-4 (s - 35)
    > 45          1.0e-3                      3.0e-3                      = left
    ============  ==========================  ==========================  ==========================
    """
    s = np.asarray(wind_speed, dtype=np.float64)
    b1, b2, b3, b4, b5, b6 = POWELL_SPEED_BREAKPOINTS

    bands = [
        s <= b1,
        s <= b2,
        s <= b3,
        s <= b4,
        s <= b5,
        s <= b6,
    ]

    linear_low = 7.5e-4 + 6.6845e-5 * s
    left_descent = 4.5e-3 - 2.33333e-4 * (s - 30.0)

    left = np.select(bands, [
        linear_low,
        1.8e-3,
        1.8e-3,
        1.8e-3 + 5.4e-4 * (s - 25.0),
        left_descent,
        left_descent,
    ], default=1.0e-3)

    right = np.select(bands, [
        linear_low,
        linear_low,
        2.0e-3,
        2.0e-3,
        2.0e-3,
        2.0e-3 + 1.0e-4 * (s - 35.0),
    ], default=3.0e-3)

    rear = np.select(bands, [
        linear_low,
        linear_low,
        2.0e-3,
        2.0e-3,
        2.0e-3,
        2.0e-3 - 1.0e-4 * (s - 35.0),
    ], default=1.0e-3)

    return left, right, rear


def powell_wind_drag(wind_speed: ArrayLike, theta: ArrayLike) -> NDArray[np.float64]:
    """Powell (2006) sector-blended drag coefficient.

    Parameters
    ----------
    wind_speed : float or ndarray
        Wind speed in m/s.
    theta : float or ndarray
        Bearing of the point relative to the storm heading, in degrees
        clockwise.

    Returns
    -------
    ndarray
        Drag coefficient.

    Notes
    -----
    Sectors and blend weights (θ taken modulo 360):

    - (310, 360]: left → right, w = (θ - 310) / 135
    - [0, 85]:    left → right, w = (θ + 50) / 135
    - (85, 195]:  right → rear, w = (θ - 85) / 110
    - (195, 310]: rear → left,  w = (θ - 195) / 115

    The first two rows are one sector wrapping through north.
    """
    speed, theta, valid = _sanitize(wind_speed, theta)
    left, right, rear = powell_sector_drags(speed)

    sectors = [
        theta > 310.0,
        theta <= 85.0,
        theta <= 195.0,
    ]

    weight = np.select(sectors, [
        (theta - 310.0) / 135.0,
        (theta + 50.0) / 135.0,
        (theta - 85.0) / 110.0,
    ], default=(theta - 195.0) / 115.0)

    drag_1 = np.select(sectors, [left, left, right], default=rear)
    drag_2 = np.select(sectors, [right, right, rear], default=left)

    drag = drag_1 * (1.0 - weight) + drag_2 * weight
    return np.where(valid, drag, 0.0)


class WindDragLaw(IntEnum):
    """Closed set of wind drag laws, keyed by their configuration code."""

    NONE = 0
    GARRET = 1
    POWELL = 2

    def coefficient(self, wind_speed: ArrayLike, theta: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the drag coefficient for this law.

        Parameters
        ----------
        wind_speed : float or ndarray
            Wind speed in m/s.
        theta : float or ndarray
            Bearing relative to the storm heading in degrees.

        Returns
        -------
        ndarray
            Dimensionless drag coefficient.
        """
        return _DRAG_FUNCTIONS[self](wind_speed, theta)


_DRAG_FUNCTIONS = {
    WindDragLaw.NONE: no_wind_drag,
    WindDragLaw.GARRET: garret_wind_drag,
    WindDragLaw.POWELL: powell_wind_drag,
}


def wind_stress(
    u_wind: NDArray[np.float64],
    v_wind: NDArray[np.float64],
    drag_coefficient: NDArray[np.float64]
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Compute surface wind stress from 10 m wind.

    Parameters
    ----------
    u_wind, v_wind : ndarray
        Eastward and northward wind in m/s.
    drag_coefficient : ndarray
        Dimensionless drag coefficient.

    Returns
    -------
    Tuple[ndarray, ndarray]
        (tau_x, tau_y) in Pa.
    """
    rho_air = PhysicalConstants.AIR_DENSITY.value
    wind_speed = np.hypot(u_wind, v_wind)
    tau = rho_air * drag_coefficient * wind_speed
    return tau * u_wind, tau * v_wind
