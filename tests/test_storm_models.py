import numpy as np
import unittest
import xarray as xr
from pathlib import Path
from common.constants import PhysicalConstants, UNDEFINED_LOCATION, UNDEFINED_DIRECTION
from common.types import PatchGeometry, TrackEntry
from configuration.storm_config import StormConfig, StormType
from data_ingestion.loaders import StormDataError
from storm_models import (
    GriddedStorm, HollandWindModel, NullStorm, ParametricStorm, RankineWindModel,
)
from wind_drag.drag_laws import WindDragLaw

AMBIENT = PhysicalConstants.AMBIENT_PRESSURE.value


def make_config(drag_law=WindDragLaw.GARRET, pressure_forcing=True, storm_type=StormType.PARAMETRIC,
                wind_forcing=True):
    return StormConfig(
        wind_forcing=wind_forcing,
        drag_law=drag_law,
        pressure_forcing=pressure_forcing,
        wind_index=2,
        pressure_index=4,
        wind_refine=(np.inf,),
        radius_refine=(-np.inf,),
        storm_type=storm_type,
        model_type=1,
        storm_file=Path("track.txt"),
    )


def make_track(points, times=None):
    times = times if times is not None else [10.0 * i for i in range(len(points))]
    return [TrackEntry(t, lon, lat, 50.0, 30e3, 95000.0) for t, (lon, lat) in zip(times, points)]


def make_era5(centers, times=(0.0, 3600.0)):
    lat = np.arange(10.0, 31.0)
    lon = np.arange(-90.0, -69.0)
    lon2d, lat2d = np.meshgrid(lon, lat)
    msl = np.stack([
        AMBIENT - 5000.0 * np.exp(-((lon2d - cx) ** 2 + (lat2d - cy) ** 2) / 4.0)
        for cx, cy in centers
    ])
    shape = msl.shape
    return xr.Dataset(
        {
            "u10": (("time", "latitude", "longitude"), np.full(shape, 5.0)),
            "v10": (("time", "latitude", "longitude"), np.zeros(shape)),
            "msl": (("time", "latitude", "longitude"), msl),
        },
        coords={"time": list(times), "latitude": lat, "longitude": lon},
    )


class TestNullStorm(unittest.TestCase):

    def test_sentinels(self):
        storm = NullStorm(make_config(storm_type=StormType.NULL))
        for t in (-1e6, 0.0, 3600.0, 1e9):
            self.assertEqual(storm.location(t), UNDEFINED_LOCATION)
            self.assertEqual(storm.direction(t), UNDEFINED_DIRECTION)
        self.assertFalse(storm.is_defined)

    def test_populate_leaves_aux_untouched(self):
        storm = NullStorm(make_config(storm_type=StormType.NULL))
        geometry = PatchGeometry(-80.0, 20.0, 0.25, 0.25, 6, 4)
        aux = np.random.default_rng(0).normal(size=(4,) + geometry.shape)
        before = aux.tobytes()
        storm.populate_fields(aux, geometry, 100.0)
        self.assertEqual(aux.tobytes(), before)


class TestVortexProfiles(unittest.TestCase):

    def test_holland_limits(self):
        model = HollandWindModel(95000.0, 50.0, 30e3)
        self.assertEqual(float(model.pressure_at_radius(0.0)), 95000.0)
        self.assertEqual(float(model.wind_at_radius(0.0, 5e-5)), 0.0)
        self.assertAlmostEqual(float(model.pressure_at_radius(1e9)), AMBIENT, delta=1.0)
        self.assertAlmostEqual(float(model.wind_at_radius(30e3, 0.0)), 50.0)

    def test_holland_shape_parameter_clipped(self):
        self.assertEqual(HollandWindModel(100000.0, 80.0, 30e3).B, HollandWindModel.B_MAX)
        self.assertEqual(HollandWindModel(AMBIENT, 10.0, 30e3).B, HollandWindModel.B_MIN)

    def test_rankine(self):
        model = RankineWindModel(95000.0, 40.0, 20e3)
        r = np.array([0.0, 10e3, 20e3, 80e3])
        np.testing.assert_allclose(model.wind_at_radius(r, 0.0), [0.0, 20.0, 40.0, 20.0])


class TestParametricStorm(unittest.TestCase):

    def test_location_interpolated(self):
        storm = ParametricStorm(make_track([(0.0, 0.0), (10.0, 10.0)], times=[0.0, 10.0]))
        lon, lat = storm.location(5.0)
        self.assertAlmostEqual(lon, 5.0)
        self.assertAlmostEqual(lat, 5.0)

    def test_location_clamped(self):
        storm = ParametricStorm(make_track([(0.0, 0.0), (10.0, 10.0)], times=[0.0, 10.0]))
        self.assertEqual(storm.location(-100.0), (0.0, 0.0))
        self.assertEqual(storm.location(100.0), (10.0, 10.0))

    def test_direction(self):
        north = ParametricStorm(make_track([(0.0, 0.0), (0.0, 1.0)]))
        east = ParametricStorm(make_track([(0.0, 0.0), (1.0, 0.0)]))
        heading = north.direction(5.0)
        self.assertLess(min(heading, 360.0 - heading), 1e-6)
        self.assertAlmostEqual(east.direction(5.0), 90.0, places=6)

    def test_single_fix_is_stationary(self):
        storm = ParametricStorm(make_track([(-80.0, 25.0)]))
        self.assertEqual(storm.direction(0.0), 0.0)
        self.assertEqual(storm.location(1e6), (-80.0, 25.0))

    def test_invalid_track(self):
        with self.assertRaises(ValueError):
            ParametricStorm([])
        with self.assertRaises(ValueError):
            ParametricStorm(make_track([(0.0, 0.0), (1.0, 1.0)], times=[10.0, 10.0]))
        with self.assertRaises(ValueError):
            ParametricStorm(make_track([(0.0, 0.0)]), model_type=9)

    def test_cyclonic_rotation(self):
        storm = ParametricStorm(make_track([(-80.0, 20.0)]))
        u, v, _ = storm.wind_and_pressure(np.array([-79.7, -80.0]), np.array([20.0, 20.3]), 0.0)
        # east of the centre the wind blows north, north of it the wind blows west
        self.assertGreater(v[0], 0.0)
        self.assertLess(u[1], 0.0)
        self.assertLess(abs(u[0]), 0.1 * v[0])

        southern = ParametricStorm(make_track([(-80.0, -20.0)]))
        _, v, _ = southern.wind_and_pressure(np.array([-79.7]), np.array([-20.0]), 0.0)
        self.assertLess(v[0], 0.0)

    def test_populate_fields(self):
        track = make_track([(-80.0, 20.0), (-79.0, 21.0)], times=[0.0, 21600.0])
        storm = ParametricStorm(track, make_config())
        geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)
        aux = np.full((4,) + geometry.shape, -1.0)
        storm.populate_fields(aux, geometry, 5.0)

        np.testing.assert_array_equal(aux[0], -1.0)
        self.assertTrue(np.all(np.isfinite(aux[1:])))
        self.assertTrue(np.any(aux[1] != 0.0))
        self.assertTrue(np.all(aux[3] < AMBIENT))

        first = aux.copy()
        storm.populate_fields(aux, geometry, 5.0)
        np.testing.assert_array_equal(aux, first)

    def test_pressure_forcing_off(self):
        storm = ParametricStorm(make_track([(-80.0, 20.0)]), make_config(pressure_forcing=False))
        geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)
        aux = np.zeros((4,) + geometry.shape)
        storm.populate_fields(aux, geometry, 0.0)
        np.testing.assert_array_equal(aux[3], AMBIENT)

    def test_no_drag_gives_no_stress(self):
        storm = ParametricStorm(make_track([(-80.0, 20.0)]), make_config(drag_law=WindDragLaw.NONE))
        geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)
        aux = np.ones((4,) + geometry.shape)
        storm.populate_fields(aux, geometry, 0.0)
        np.testing.assert_array_equal(aux[1:3], 0.0)

    def test_wind_forcing_off_keeps_stress_channels(self):
        config = make_config(drag_law=WindDragLaw.NONE, wind_forcing=False)
        storm = ParametricStorm(make_track([(-80.0, 20.0)]), config)
        geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)
        aux = np.full((4,) + geometry.shape, 7.0)
        storm.populate_fields(aux, geometry, 0.0)
        np.testing.assert_array_equal(aux[1:3], 7.0)
        np.testing.assert_array_equal(aux[0], 7.0)
        self.assertTrue(np.all(aux[3] < AMBIENT))

    def test_populate_needs_config(self):
        storm = ParametricStorm(make_track([(-80.0, 20.0)]))
        geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)
        with self.assertRaises(RuntimeError):
            storm.populate_fields(np.zeros((4,) + geometry.shape), geometry, 0.0)


class TestGriddedStorm(unittest.TestCase):

    def setUp(self):
        self.storm = GriddedStorm.from_raw_dataset(
            make_era5([(-80.0, 20.0), (-79.0, 20.0)]), make_config(storm_type=StormType.GRIDDED)
        )

    def test_location_is_pressure_minimum(self):
        self.assertEqual(self.storm.location(0.0), (-80.0, 20.0))
        self.assertEqual(self.storm.location(3600.0), (-79.0, 20.0))
        self.assertEqual(self.storm.location(1e6), (-79.0, 20.0))

    def test_direction(self):
        self.assertAlmostEqual(self.storm.direction(1800.0), 90.0, delta=1.0)

    def test_single_snapshot(self):
        storm = GriddedStorm.from_raw_dataset(make_era5([(-80.0, 20.0)], times=(0.0,)))
        self.assertEqual(storm.direction(100.0), 0.0)
        self.assertEqual(storm.location(100.0), (-80.0, 20.0))

    def test_time_interpolation(self):
        fields = self.storm.fields_at(1800.0)
        first = self.storm.snapshots["pressure"].isel(time=0)
        last = self.storm.snapshots["pressure"].isel(time=1)
        np.testing.assert_allclose(fields["pressure"].values, 0.5 * (first.values + last.values))

    def test_outside_raster_is_calm(self):
        u, v, p = self.storm.wind_and_pressure(np.array([-85.5, 0.0]), np.array([15.5, 0.0]), 0.0)
        self.assertAlmostEqual(u[0], 5.0)
        self.assertEqual(u[1], 0.0)
        self.assertEqual(v[1], 0.0)
        self.assertEqual(p[1], AMBIENT)

    def test_populate_fields_shape(self):
        geometry = PatchGeometry(-82.0, 18.0, 0.5, 0.5, 6, 6)
        aux = np.zeros((4,) + geometry.shape)
        self.storm.populate_fields(aux, geometry, 600.0)
        self.assertTrue(np.all(aux[1] > 0.0))
        self.assertTrue(np.all(aux[3] < AMBIENT))

    def test_wrf_naming(self):
        ds = make_era5([(-80.0, 20.0), (-79.0, 20.0)])
        ds = ds.rename({"u10": "U10", "v10": "V10", "msl": "PSFC", "latitude": "lat", "longitude": "lon"})
        storm = GriddedStorm.from_raw_dataset(ds, model_type=2)
        self.assertEqual(storm.snapshots.attrs["source"], "WRF")
        self.assertEqual(storm.location(0.0), (-80.0, 20.0))

    def test_missing_variable(self):
        ds = make_era5([(-80.0, 20.0)], times=(0.0,)).drop_vars("msl")
        with self.assertRaises(StormDataError):
            GriddedStorm.from_raw_dataset(ds)


if __name__ == '__main__':
    unittest.main()
