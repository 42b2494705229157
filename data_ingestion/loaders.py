"""
Data Loaders for Storm Forcing Inputs.

This module provides standardized interfaces for loading the data that
drives the storm models. Each loader checks the structure of its input,
preserves provenance, and converts to SI units on ingest.

Inputs
------
1. Best tracks for parametric storms (plain text columns)
2. Gridded wind and pressure fields (NetCDF, ERA5 or WRF naming)

Conventions
-----------
- Structural checks only; physical plausibility is the provider's concern
- Rasters are returned as xarray Datasets with fixed variable names
- Unit conversion through the shared pint registry
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import xarray as xr

from common.logging_config import get_logger
from common.types import TrackEntry
from common.units import convert_track_columns, to_standard_units, TRACK_COLUMNS

logger = get_logger(__name__)


class StormDataError(ValueError):
    """Storm input data is unreadable or structurally invalid."""


@dataclass
class DataProvenance:
    """Where a storm input came from and what it covers.

    Attributes
    ----------
    source : str
        Data source identifier (e.g., "best_track", "ERA5").
    path : Path
        File the data was read from.
    load_time : datetime
        When the data was read.
    num_records : int
        Number of track fixes or raster snapshots.
    temporal_coverage : Tuple[float, float]
        First and last time in seconds.
    """
    source: str
    path: Path
    load_time: datetime
    num_records: int
    temporal_coverage: Tuple[float, float]


class BaseDataLoader(ABC):
    """Abstract base class for storm data loaders.

    Subclasses read one file, validate its structure and record where the
    data came from. Errors surface as StormDataError.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the loader.

        Parameters
        ----------
        path : str or Path
            File to read.
        """
        self.path = Path(path)
        self._provenance: Optional[DataProvenance] = None
        self._logger = get_logger(self.__class__.__name__)

    @property
    @abstractmethod
    def data_type(self) -> str:
        """Identifier for this data type."""
        pass

    @abstractmethod
    def load(self) -> Any:
        """Load and validate the data."""
        pass

    def get_provenance(self) -> DataProvenance:
        """Provenance of the last successful load."""
        if self._provenance is None:
            raise RuntimeError(f"{self.data_type} data has not been loaded yet")
        return self._provenance

    def _record_provenance(self, source: str, times: np.ndarray) -> None:
        self._provenance = DataProvenance(
            source=source,
            path=self.path,
            load_time=datetime.now(),
            num_records=len(times),
            temporal_coverage=(float(times[0]), float(times[-1])),
        )
        self._logger.info(
            f"Loaded {len(times)} {self.data_type} records from {self.path} "
            f"covering t = {times[0]:g} to {times[-1]:g} s"
        )


def _check_increasing(times: np.ndarray, what: str) -> None:
    if len(times) == 0:
        raise StormDataError(f"No {what} found")
    if not np.all(np.isfinite(times)):
        raise StormDataError(f"Non-finite {what} times")
    if np.any(np.diff(times) <= 0):
        raise StormDataError(f"{what} times must be strictly increasing")


class BestTrackLoader(BaseDataLoader):
    """Loader for parametric storm tracks.

    Format
    ------
    Whitespace separated columns, one fix per line::

        # units: hour degree degree knot nmi mbar
        # time  lon    lat   max_wind  rmw   central_pressure
        0.0    -80.0  25.0  100.0     20.0  950.0

    Lines starting with ``#`` are comments. The optional ``# units:`` header
    gives one unit per column; without it the columns are taken to be in
    seconds, degrees, m/s, meters and pascals.

    Output
    ------
    List of TrackEntry objects ordered by time.
    """

    UNITS_PREFIX = "# units:"

    @property
    def data_type(self) -> str:
        return "best_track"

    def load(self) -> List[TrackEntry]:
        """Load the track.

        Returns
        -------
        List[TrackEntry]
            Track fixes in SI units.

        Raises
        ------
        StormDataError
            If the file is unreadable, has the wrong number of columns, or
            the times are not strictly increasing.
        """
        try:
            with open(self.path, "r") as f:
                lines = f.readlines()
        except OSError as e:
            raise StormDataError(f"Cannot read track file {self.path}: {e}") from e

        units = self._parse_units(lines)
        rows = [
            line.split() for line in lines
            if line.strip() and not line.lstrip().startswith("#")
        ]

        try:
            data = np.array(rows, dtype=np.float64)
        except ValueError as e:
            raise StormDataError(f"Malformed track file {self.path}: {e}") from e

        if data.ndim != 2 or data.shape[0] == 0 or data.shape[1] != len(TRACK_COLUMNS):
            raise StormDataError(
                f"Track file {self.path} must have {len(TRACK_COLUMNS)} columns "
                f"({', '.join(TRACK_COLUMNS)}) and at least one row"
            )

        if units is not None:
            try:
                data = convert_track_columns(data, units)
            except ValueError as e:
                raise StormDataError(f"Bad units in track file {self.path}: {e}") from e

        _check_increasing(data[:, 0], "track")
        self._record_provenance("best_track", data[:, 0])

        return [TrackEntry(*(float(v) for v in row)) for row in data]

    def _parse_units(self, lines: Sequence[str]) -> Optional[List[str]]:
        for line in lines:
            if line.strip().lower().startswith(self.UNITS_PREFIX):
                units = line.strip()[len(self.UNITS_PREFIX):].split()
                if len(units) != len(TRACK_COLUMNS):
                    raise StormDataError(
                        f"Units header must list {len(TRACK_COLUMNS)} units, got {units}"
                    )
                return units
        return None


# Variable naming conventions of the gridded products, keyed by model_type
GRIDDED_CONVENTIONS: Dict[int, Dict[str, str]] = {
    1: {"source": "ERA5", "u10": "u10", "v10": "v10", "pressure": "msl"},
    2: {"source": "WRF", "u10": "U10", "v10": "V10", "pressure": "PSFC"},
}

_COORDINATE_ALIASES = {
    "lat": "latitude",
    "lon": "longitude",
    "Time": "time",
}


def _wrap_longitudes(ds: xr.Dataset) -> xr.Dataset:
    """Move a 0..360 longitude axis to [-180, 180), dropping a repeated seam."""
    lon = np.asarray(ds["longitude"].values, dtype=np.float64)
    if lon.size == 0 or lon.max() <= 180.0:
        return ds
    wrapped = np.mod(lon + 180.0, 360.0) - 180.0
    _, first = np.unique(wrapped, return_index=True)
    keep = np.sort(first)
    return ds.isel(longitude=keep).assign_coords(longitude=wrapped[keep])


def standardize_gridded_dataset(ds: xr.Dataset, model_type: int = 1) -> xr.Dataset:
    """Rename and validate a gridded wind/pressure dataset.

    Parameters
    ----------
    ds : xr.Dataset
        Raw dataset with a time coordinate in seconds (or a pint-readable
        ``units`` attribute such as "hour") and 1D latitude/longitude
        coordinates in degrees. Longitudes given as 0..360 are moved to
        [-180, 180) to match the mesh.
    model_type : int
        Key of GRIDDED_CONVENTIONS.

    Returns
    -------
    xr.Dataset
        Dataset with variables u10, v10, pressure on dims
        (time, latitude, longitude), sorted ascending along every dim.

    Raises
    ------
    StormDataError
        If the convention is unknown, the structure is invalid, or the time
        axis is a calendar axis ("hours since ...").

    Notes
    -----
    Raw ``wrfout`` files carry 2D ``XLAT``/``XLONG`` arrays on the model
    projection and are rejected; WRF output must first be regridded to 1D
    latitude/longitude coordinates with times in seconds from the start of
    the simulation.
    """
    if model_type not in GRIDDED_CONVENTIONS:
        raise StormDataError(
            f"Unknown gridded data convention {model_type}; "
            f"expected one of {sorted(GRIDDED_CONVENTIONS)}"
        )
    convention = GRIDDED_CONVENTIONS[model_type]

    names = set(ds.variables) | set(ds.dims)
    renames = {k: v for k, v in _COORDINATE_ALIASES.items() if k in names}
    ds = ds.rename(renames)

    if ("XLAT" in ds or "XLONG" in ds) and not {"latitude", "longitude"} <= set(ds.coords):
        raise StormDataError(
            "WRF output on its native projection (2D XLAT/XLONG) is not supported; "
            "regrid it to 1D latitude/longitude coordinates first"
        )

    missing = [convention[k] for k in ("u10", "v10", "pressure") if convention[k] not in ds]
    missing += [c for c in ("time", "latitude", "longitude") if c not in ds.coords]
    if missing:
        raise StormDataError(f"Gridded data is missing {missing}")

    dims = ("time", "latitude", "longitude")
    out = xr.Dataset(
        {
            name: ds[convention[name]].transpose(*dims).astype(np.float64)
            for name in ("u10", "v10", "pressure")
        },
        attrs={"source": convention["source"]},
    )

    times = np.asarray(out["time"].values)
    if not np.issubdtype(times.dtype, np.number):
        raise StormDataError("Gridded time coordinate must be numeric seconds")
    time_units = ds["time"].attrs.get("units")
    if time_units and " since " in time_units:
        raise StormDataError(
            f"Gridded time units '{time_units}' are calendar dates; "
            "times must be seconds relative to the simulation start"
        )
    if time_units:
        try:
            times = to_standard_units(times, time_units, "time")
        except ValueError as e:
            raise StormDataError(str(e)) from e
    out = out.assign_coords(time=times.astype(np.float64))

    out = _wrap_longitudes(out)
    out = out.sortby("latitude").sortby("longitude")
    _check_increasing(out["time"].values, "gridded snapshot")
    if out.sizes["latitude"] < 2 or out.sizes["longitude"] < 2:
        raise StormDataError("Gridded data needs at least 2 points along each axis")

    return out


class GriddedFieldLoader(BaseDataLoader):
    """Loader for gridded wind and pressure fields.

    Supports:
    - ERA5 single levels (u10, v10, msl)
    - WRF surface output (U10, V10, PSFC)

    Notes
    -----
    Times are read without decoding; they must be simulation seconds or
    carry a plain unit attribute such as "hour". Calendar units
    ("hours since ...") are rejected. WRF files must already be on 1D
    latitude/longitude coordinates.
    """

    def __init__(self, path: Union[str, Path], model_type: int = 1):
        super().__init__(path)
        self.model_type = model_type

    @property
    def data_type(self) -> str:
        return "gridded"

    def load(self) -> xr.Dataset:
        """Load the gridded fields into memory.

        Returns
        -------
        xr.Dataset
            Standardized dataset (see `standardize_gridded_dataset`).
        """
        try:
            with xr.open_dataset(self.path, decode_times=False) as raw:
                ds = standardize_gridded_dataset(raw, self.model_type).load()
        except StormDataError:
            raise
        except (OSError, ValueError) as e:
            raise StormDataError(f"Cannot read gridded data {self.path}: {e}") from e

        self._record_provenance(ds.attrs["source"], ds["time"].values)
        return ds
