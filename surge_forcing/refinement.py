"""
Storm-Driven Refinement Criteria.

Breakpoint m (1-based, ordered from coarsest to finest) belongs to level m:
a cell on a grid at level m is flagged for refinement when

- its distance to the storm centre is below the m-th ``radius_refine`` entry, or
- the local wind speed exceeds the m-th ``wind_refine`` entry.

Levels beyond the listed breakpoints are never flagged by that axis.
Disabled axes carry an infinite sentinel (``-inf`` radius, ``+inf`` wind)
and never trigger; an undefined storm gives an infinite distance and never
triggers either.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from configuration.storm_config import StormConfig

ArrayLike = Union[float, NDArray[np.float64]]


def _as_arrays(distance: ArrayLike, wind_speed: ArrayLike):
    return np.broadcast_arrays(
        np.asarray(distance, dtype=np.float64),
        np.asarray(wind_speed, dtype=np.float64),
    )


def _breakpoint_met(
    m: int,
    distance: NDArray[np.float64],
    wind_speed: NDArray[np.float64],
    wind_refine: Sequence[float],
    radius_refine: Sequence[float]
) -> NDArray[np.bool_]:
    """Cells meeting breakpoint m (1-based) on either axis."""
    met = np.zeros(distance.shape, dtype=bool)
    # NaN compares False, so degenerate inputs never trigger
    if m <= len(radius_refine):
        met |= distance < radius_refine[m - 1]
    if m <= len(wind_refine):
        met |= wind_speed > wind_refine[m - 1]
    return met


def flag_cells(
    level: int,
    distance: ArrayLike,
    wind_speed: ArrayLike,
    wind_refine: Sequence[float],
    radius_refine: Sequence[float]
) -> NDArray[np.bool_]:
    """Flag cells on a grid at `level` that should be refined further.

    Parameters
    ----------
    level : int
        1-based level of the grid being flagged.
    distance : float or ndarray
        Distance from the storm centre in meters.
    wind_speed : float or ndarray
        Local wind speed in m/s.
    wind_refine, radius_refine : sequence of float
        Breakpoints, one per level, coarsest first.

    Returns
    -------
    ndarray of bool
        True where breakpoint `level` is met.
    """
    if level < 1:
        raise ValueError(f"Refinement levels start at 1, got {level}")
    distance, wind_speed = _as_arrays(distance, wind_speed)
    return _breakpoint_met(level, distance, wind_speed, wind_refine, radius_refine)


def refinement_level(
    distance: ArrayLike,
    wind_speed: ArrayLike,
    wind_refine: Sequence[float],
    radius_refine: Sequence[float]
) -> NDArray[np.int_]:
    """Level each cell ends up at when refined from level 1.

    A cell keeps being refined while the breakpoint of its current level is
    met, so the result is 1 plus the number of consecutive breakpoints met
    starting from the coarsest.

    Returns
    -------
    ndarray of int
        Suggested level (1 = no storm-driven refinement).
    """
    distance, wind_speed = _as_arrays(distance, wind_speed)
    level = np.ones(distance.shape, dtype=int)
    refining = np.ones(distance.shape, dtype=bool)

    for m in range(1, max(len(wind_refine), len(radius_refine)) + 1):
        refining &= _breakpoint_met(m, distance, wind_speed, wind_refine, radius_refine)
        if not refining.any():
            break
        level += refining

    return level


@dataclass(frozen=True)
class RefinementCriteria:
    """Refinement thresholds bound to the flagging functions.

    Attributes
    ----------
    wind_refine : tuple of float
        Wind speed breakpoints in m/s, or (+inf,) when disabled.
    radius_refine : tuple of float
        Distance breakpoints in m, or (-inf,) when disabled.
    """
    wind_refine: Tuple[float, ...] = (np.inf,)
    radius_refine: Tuple[float, ...] = (-np.inf,)

    def __post_init__(self):
        if len(self.wind_refine) == 0 or len(self.radius_refine) == 0:
            raise ValueError("Refinement thresholds need at least one entry")

    @classmethod
    def from_config(cls, config: StormConfig) -> 'RefinementCriteria':
        return cls(wind_refine=config.wind_refine, radius_refine=config.radius_refine)

    @property
    def max_level(self) -> int:
        """Finest level these thresholds can ask for."""
        levels = [1]
        if np.all(np.isfinite(self.wind_refine)):
            levels.append(len(self.wind_refine) + 1)
        if np.all(np.isfinite(self.radius_refine)):
            levels.append(len(self.radius_refine) + 1)
        return max(levels)

    def level(self, distance: ArrayLike, wind_speed: ArrayLike) -> NDArray[np.int_]:
        return refinement_level(distance, wind_speed, self.wind_refine, self.radius_refine)

    def flag(self, level: int, distance: ArrayLike, wind_speed: ArrayLike) -> NDArray[np.bool_]:
        return flag_cells(level, distance, wind_speed, self.wind_refine, self.radius_refine)
