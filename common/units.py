"""
Unit Registry and Conversions for Storm Input Data.

This module provides a centralized unit system using the `pint` library so
that storm tracks published in operational units (knots, nautical miles,
millibars, hours) are converted to SI exactly once, at ingest.

Example Usage
-------------
>>> from common.units import ureg, Q_
>>> speed = Q_(100, 'knot')
>>> speed.to('m/s')
<Quantity(51.4444444, 'meter / second')>
"""

from typing import Sequence, Union

import numpy as np
import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


# Standard unit definitions for the track columns
STANDARD_UNITS = {
    "time": "second",
    "longitude": "degree",
    "latitude": "degree",
    "max_wind_speed": "meter/second",
    "radius_max_wind": "meter",
    "central_pressure": "pascal",
}

TRACK_COLUMNS = tuple(STANDARD_UNITS)


def to_standard_units(
    values: Union[float, np.ndarray],
    unit: str,
    quantity_name: str
) -> np.ndarray:
    """Convert values given in `unit` to the standard unit of a quantity.

    Parameters
    ----------
    values : float or ndarray
        Bare magnitudes.
    unit : str
        The unit of the magnitudes (e.g., 'knot', 'nmi', 'mbar', 'hour').
    quantity_name : str
        Key of STANDARD_UNITS.

    Returns
    -------
    ndarray
        Magnitudes in the standard unit.

    Raises
    ------
    ValueError
        If the unit is unknown or has the wrong dimensionality.
    """
    target = STANDARD_UNITS[quantity_name]
    try:
        return np.asarray(Q_(np.asarray(values, dtype=np.float64), unit).to(target).magnitude)
    except (pint.errors.UndefinedUnitError, pint.DimensionalityError) as e:
        raise ValueError(
            f"Cannot convert {quantity_name} from '{unit}' to '{target}'"
        ) from e


def convert_track_columns(data: np.ndarray, units: Sequence[str]) -> np.ndarray:
    """Convert the columns of a track table to standard units.

    Parameters
    ----------
    data : ndarray
        Array of shape (N, 6) ordered as TRACK_COLUMNS.
    units : sequence of str
        One unit string per column.

    Returns
    -------
    ndarray
        Converted copy of `data`.
    """
    if len(units) != len(TRACK_COLUMNS):
        raise ValueError(
            f"Expected {len(TRACK_COLUMNS)} column units, got {len(units)}"
        )
    converted = np.empty_like(data, dtype=np.float64)
    for col, (name, unit) in enumerate(zip(TRACK_COLUMNS, units)):
        converted[:, col] = to_standard_units(data[:, col], unit, name)
    return converted
