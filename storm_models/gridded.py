"""
Gridded Storm from Raster Wind and Pressure Snapshots.

Fields are interpolated linearly in time between the bracketing snapshots
(clamped outside the recorded range) and then bilinearly onto arbitrary
points. Points outside the raster extent see calm wind and ambient pressure.

The storm centre is estimated as the pressure minimum of the
time-interpolated raster; the heading is the azimuth between the centres of
the bracketing snapshots.
"""

from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray
import xarray as xr

from common.constants import PhysicalConstants
from configuration.storm_config import StormConfig
from data_ingestion.loaders import standardize_gridded_dataset
from geospatial.distance_calculations import compute_storm_motion
from storm_models.base import StormSource, WindPressure


class GriddedStorm(StormSource):
    """Storm represented by a time series of raster snapshots.

    Attributes
    ----------
    snapshots : xr.Dataset
        Variables u10, v10 (m/s) and pressure (Pa) on dims
        (time, latitude, longitude), ascending along every dim.
    """

    def __init__(self, snapshots: xr.Dataset, config: StormConfig = None):
        """Initialize the gridded storm.

        Parameters
        ----------
        snapshots : xr.Dataset
            Standardized dataset (see `standardize_gridded_dataset`).
        config : StormConfig, optional
            Shared configuration.
        """
        super().__init__(config)
        self.snapshots = snapshots
        self._times = np.asarray(snapshots["time"].values, dtype=np.float64)
        self._centers: List[Tuple[float, float]] = [
            _pressure_minimum(snapshots["pressure"].isel(time=i))
            for i in range(len(self._times))
        ]

        self._logger.info(
            f"Gridded storm ({snapshots.attrs.get('source', 'unknown')}) with "
            f"{len(self._times)} snapshots on a "
            f"{snapshots.sizes['latitude']}x{snapshots.sizes['longitude']} raster"
        )

    @classmethod
    def from_raw_dataset(
        cls,
        ds: xr.Dataset,
        config: StormConfig = None,
        model_type: int = 1
    ) -> 'GriddedStorm':
        """Build a storm from a dataset in one of the supported conventions."""
        return cls(standardize_gridded_dataset(ds, model_type), config)

    def _bracket(self, t: float) -> int:
        index = int(np.searchsorted(self._times, t, side='right')) - 1
        return min(max(index, 0), max(len(self._times) - 2, 0))

    def fields_at(self, t: float) -> xr.Dataset:
        """Raster snapshot linearly interpolated to time t (clamped)."""
        if len(self._times) == 1:
            return self.snapshots.isel(time=0)
        t_clamped = float(np.clip(t, self._times[0], self._times[-1]))
        return self.snapshots.interp(time=t_clamped)

    def location(self, t: float) -> Tuple[float, float]:
        return _pressure_minimum(self.fields_at(t)["pressure"])

    def direction(self, t: float) -> float:
        if len(self._times) == 1:
            return 0.0
        index = self._bracket(t)
        _, heading, _, _ = compute_storm_motion(
            self._centers[index],
            self._centers[index + 1],
            self._times[index + 1] - self._times[index],
        )
        return heading

    def wind_and_pressure(
        self,
        lon: NDArray[np.float64],
        lat: NDArray[np.float64],
        t: float
    ) -> WindPressure:
        shape = np.shape(lon)
        points_lon = xr.DataArray(np.ravel(lon), dims="points")
        points_lat = xr.DataArray(np.ravel(lat), dims="points")

        sampled = self.fields_at(t).interp(longitude=points_lon, latitude=points_lat)

        u = np.nan_to_num(sampled["u10"].values, nan=0.0).reshape(shape)
        v = np.nan_to_num(sampled["v10"].values, nan=0.0).reshape(shape)
        pressure = np.nan_to_num(
            sampled["pressure"].values,
            nan=PhysicalConstants.AMBIENT_PRESSURE.value
        ).reshape(shape)

        return u, v, pressure


def _pressure_minimum(pressure: xr.DataArray) -> Tuple[float, float]:
    """Location (longitude, latitude) of the minimum of a 2D pressure raster."""
    values = pressure.transpose("latitude", "longitude").values
    i, j = np.unravel_index(np.nanargmin(values), values.shape)
    return float(pressure["longitude"].values[j]), float(pressure["latitude"].values[i])
