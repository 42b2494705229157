"""
Storm Track Diagnostics.

Appends the storm position and heading to a plain-text track file, one line
per call::

      0.0000000000000000e+00 -8.0000000000000000e+01  2.5000000000000000e+01  3.1500000000000000e+02

Columns are time (s), longitude, latitude (degrees) and heading (degrees
clockwise from north), each 26 characters wide. The file is opened, written,
flushed and closed within every call, so an interrupted run never leaves a
half-written earlier line and the file is never held open between steps.
"""

from pathlib import Path
from typing import Optional, Union

from common.logging_config import get_logger
from configuration.storm_config import StormConfig
from storm_models.base import StormSource

logger = get_logger(__name__)

FIELD_FORMAT = "{:26.16e}"
LINE_FORMAT = FIELD_FORMAT * 4 + "\n"


class TrackLogger:
    """Append-only recorder of the storm track."""

    def __init__(
        self,
        source: StormSource,
        path: Union[str, Path] = "fort.track",
        config: Optional[StormConfig] = None
    ):
        """Initialize the track logger.

        Parameters
        ----------
        source : StormSource
            The active storm.
        path : str or Path
            Track output file; created on first record.
        config : StormConfig, optional
            Used only to display times relative to landfall.
        """
        self.source = source
        self.path = Path(path)
        self.config = config
        self._logger = get_logger("TrackLogger")

    def format_line(self, t: float) -> str:
        """Track line for time t."""
        lon, lat = self.source.location(t)
        theta = self.source.direction(t)
        return LINE_FORMAT.format(t, lon, lat, theta)

    def record(self, t: float) -> None:
        """Append the storm position and heading at time t."""
        line = self.format_line(t)

        with open(self.path, "a") as f:
            f.write(line)
            f.flush()

        display = self.config.display_time(t) if self.config is not None else t
        self._logger.debug(f"Recorded storm track at t = {display:g}")
