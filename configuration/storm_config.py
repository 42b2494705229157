"""
Storm Surge Configuration.

This module reads the storm forcing configuration resource and builds the
immutable `StormConfig` shared by every other component.

File Format
-----------
A plain text file in fixed field order. Lines starting with ``#`` and blank
lines are skipped; every other line holds one value, optionally followed by
``=: description``::

    T          =: wind_forcing
    2          =: drag_law
    T          =: pressure_forcing
    4          =: wind_index
    6          =: pressure_index
    20.0 40.0  =: wind_refine
    F          =: R_refine
    1          =: storm_type
    1          =: model_type
    'track.txt' =: storm_file
    0.0d0      =: landfall
    F          =: display_landfall_time

A threshold line starting with ``F`` disables that refinement axis.
"""

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from common.logging_config import get_logger, file_logging
from wind_drag.drag_laws import WindDragLaw

logger = get_logger(__name__)

_TRUE_TOKENS = {"t", "true", ".true."}
_FALSE_TOKENS = {"f", "false", ".false."}

# Disabled refinement axes; wind never exceeds +inf, distance never below -inf
WIND_REFINE_DISABLED = (np.inf,)
RADIUS_REFINE_DISABLED = (-np.inf,)


class FatalConfigError(SystemExit):
    """Unrecoverable configuration problem.

    Subclasses SystemExit so that, left uncaught, it terminates the process
    with the message on stderr.
    """

    def __init__(self, message: str):
        logger.error(message)
        super().__init__(f"*** ERROR *** {message}")
        self.message = message


class StormType(IntEnum):
    """Storm representations, keyed by their configuration code."""

    NULL = 0
    PARAMETRIC = 1
    GRIDDED = 2


@dataclass(frozen=True)
class StormConfig:
    """Immutable storm forcing configuration.

    Attributes
    ----------
    wind_forcing : bool
        Whether wind stress is applied.
    drag_law : WindDragLaw
        Drag law; always NONE when wind forcing is off.
    pressure_forcing : bool
        Whether the pressure gradient is applied.
    wind_index : int
        1-based aux channel of the x wind stress; y follows at wind_index + 1.
    pressure_index : int
        1-based aux channel of the surface pressure.
    wind_refine : tuple of float
        Wind speed breakpoints in m/s, coarsest to finest, or (+inf,).
    radius_refine : tuple of float
        Distance breakpoints in m, coarsest to finest, or (-inf,).
    storm_type : StormType
        Which storm representation to build.
    model_type : int
        Sub-model code interpreted by the storm representation.
    storm_file : Path
        Path to the storm data.
    landfall : float
        Landfall time in seconds; only offsets displayed times.
    display_landfall_time : bool
        Display times in days relative to landfall.
    """
    wind_forcing: bool
    drag_law: WindDragLaw
    pressure_forcing: bool
    wind_index: int
    pressure_index: int
    wind_refine: Tuple[float, ...]
    radius_refine: Tuple[float, ...]
    storm_type: StormType
    model_type: int
    storm_file: Path
    landfall: float = 0.0
    display_landfall_time: bool = False

    def display_time(self, t: float) -> float:
        """Convert a simulation time to the displayed time.

        Returns days relative to landfall when display_landfall_time is set,
        otherwise `t` unchanged.
        """
        if self.display_landfall_time:
            return (t - self.landfall) / 86400.0
        return t

    def summary_lines(self) -> List[str]:
        """Human-readable echo of the parsed configuration."""
        return [
            f"Wind Nesting = {' '.join(str(v) for v in self.wind_refine)}",
            f"R Nesting = {' '.join(str(v) for v in self.radius_refine)}",
            "",
            f"Wind Forcing = {self.wind_forcing}, Drag Law = {self.drag_law.name}",
            f"Pressure Forcing = {self.pressure_forcing}",
            f"Aux Indices: wind = {self.wind_index}, pressure = {self.pressure_index}",
            f"Storm Type = {self.storm_type.name} ({int(self.storm_type)})",
            f"Model Type = {self.model_type}",
            f"  file = {self.storm_file}",
            f"Landfall = {self.landfall} (display relative: {self.display_landfall_time})",
        ]


# =============================================================================
# Line tokenizing
# =============================================================================

def _strip_description(line: str) -> str:
    """Remove a trailing ``=: description`` annotation."""
    return line.split("=:", 1)[0].strip()


def count_values(line: str) -> int:
    """Count the whitespace or comma separated values on a line."""
    return len(_strip_description(line).replace(",", " ").split())


def parse_values(line: str) -> Tuple[float, ...]:
    """Parse all numeric values on a line, accepting Fortran ``d`` exponents."""
    tokens = _strip_description(line).replace(",", " ").split()
    return tuple(_parse_float(token) for token in tokens)


def _parse_float(token: str) -> float:
    try:
        return float(token.lower().replace("d", "e"))
    except ValueError:
        raise FatalConfigError(f"Invalid numeric value '{token}'.") from None


def _parse_int(token: str, field: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise FatalConfigError(f"Invalid integer '{token}' for {field}.") from None


def _parse_bool(token: str, field: str) -> bool:
    value = token.strip().strip("'\"").lower()
    if value in _TRUE_TOKENS:
        return True
    if value in _FALSE_TOKENS:
        return False
    raise FatalConfigError(f"Invalid logical '{token}' for {field}.")


def _parse_thresholds(line: str, field: str, disabled: Tuple[float, ...]) -> Tuple[float, ...]:
    value = _strip_description(line)
    if value[:1] == "F":
        return disabled

    if count_values(value) == 0:
        raise FatalConfigError(f"No thresholds given for {field}.")
    thresholds = parse_values(value)
    if any(not np.isfinite(v) or v <= 0 for v in thresholds):
        raise FatalConfigError(f"Thresholds for {field} must be positive, got {thresholds}.")
    return thresholds


# =============================================================================
# Loader
# =============================================================================

class ConfigLoader:
    """One-time reader of the storm configuration resource.

    The first call to `load` parses the file and logs a summary; every later
    call returns the same `StormConfig` without touching the file again.

    Examples
    --------
    >>> loader = ConfigLoader("surge.data", log_path="fort.surge")
    >>> config = loader.load()
    >>> config is loader.load()
    True
    """

    NUM_FIELDS = 12

    def __init__(
        self,
        path: Union[str, Path] = "surge.data",
        log_path: Optional[Union[str, Path]] = None
    ):
        """Initialize the loader.

        Parameters
        ----------
        path : str or Path
            Configuration resource.
        log_path : str or Path, optional
            Where to write the one-time summary, in addition to the log.
        """
        self.path = Path(path)
        self.log_path = Path(log_path) if log_path is not None else None
        self._config: Optional[StormConfig] = None
        self._logger = get_logger("ConfigLoader")

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    def load(self) -> StormConfig:
        """Parse the configuration resource once and return the result.

        Returns
        -------
        StormConfig
            The immutable configuration.

        Raises
        ------
        FatalConfigError
            If the resource is unreadable or any field is invalid.
        """
        if self._config is not None:
            return self._config

        config = self._parse(self._read_lines())
        self._write_summary(config)
        self._config = config
        return config

    def _read_lines(self) -> List[str]:
        try:
            with open(self.path, "r") as f:
                raw = f.readlines()
        except OSError as e:
            raise FatalConfigError(f"Cannot read configuration {self.path}: {e}") from e

        lines = [
            line.rstrip("\n") for line in raw
            if line.strip() and not line.lstrip().startswith("#")
        ]
        if len(lines) < self.NUM_FIELDS:
            raise FatalConfigError(
                f"Configuration {self.path} has {len(lines)} fields, "
                f"expected {self.NUM_FIELDS}."
            )
        return lines

    def _parse(self, lines: List[str]) -> StormConfig:
        fields = iter(lines)

        def value() -> str:
            return _strip_description(next(fields))

        # Forcing terms
        wind_forcing = _parse_bool(value(), "wind_forcing")
        drag_code = _parse_int(value(), "drag_law")
        if not wind_forcing:
            drag_code = WindDragLaw.NONE
        try:
            drag_law = WindDragLaw(drag_code)
        except ValueError:
            raise FatalConfigError(f"Invalid wind drag law {drag_code}.") from None
        pressure_forcing = _parse_bool(value(), "pressure_forcing")

        # Aux channel layout
        wind_index = _parse_int(value(), "wind_index")
        pressure_index = _parse_int(value(), "pressure_index")

        # AMR parameters
        wind_refine = _parse_thresholds(next(fields), "wind_refine", WIND_REFINE_DISABLED)
        radius_refine = _parse_thresholds(next(fields), "R_refine", RADIUS_REFINE_DISABLED)

        # Storm setup
        storm_code = _parse_int(value(), "storm_type")
        try:
            storm_type = StormType(storm_code)
        except ValueError:
            raise FatalConfigError(f"Invalid storm type {storm_code} provided.") from None
        model_type = _parse_int(value(), "model_type")
        storm_file = Path(value().strip("'\""))
        if not storm_file.is_absolute():
            storm_file = self.path.parent / storm_file

        # Time output formatting
        landfall = _parse_float(value())
        display_landfall_time = _parse_bool(value(), "display_landfall_time")

        return StormConfig(
            wind_forcing=wind_forcing,
            drag_law=drag_law,
            pressure_forcing=pressure_forcing,
            wind_index=wind_index,
            pressure_index=pressure_index,
            wind_refine=wind_refine,
            radius_refine=radius_refine,
            storm_type=storm_type,
            model_type=model_type,
            storm_file=storm_file,
            landfall=landfall,
            display_landfall_time=display_landfall_time,
        )

    def _write_summary(self, config: StormConfig) -> None:
        if self.log_path is None:
            for line in config.summary_lines():
                self._logger.info(line)
            return

        with file_logging(self._logger, self.log_path):
            for line in config.summary_lines():
                self._logger.info(line)


def load_storm_config(
    path: Union[str, Path] = "surge.data",
    log_path: Optional[Union[str, Path]] = None
) -> StormConfig:
    """Convenience function to read a configuration resource.

    Parameters
    ----------
    path : str or Path
        Configuration resource.
    log_path : str or Path, optional
        Summary output file.

    Returns
    -------
    StormConfig
        Parsed configuration.
    """
    return ConfigLoader(path, log_path).load()
