import numpy as np
import unittest
from pathlib import Path
from common.types import PatchGeometry, TrackEntry
from configuration.storm_config import StormConfig, StormType
from storm_models import NullStorm, ParametricStorm
from surge_forcing import StormForcingField
from wind_drag.drag_laws import WindDragLaw


def make_config(storm_type=StormType.PARAMETRIC, radius_refine=(2e5, 5e4)):
    return StormConfig(
        wind_forcing=True,
        drag_law=WindDragLaw.POWELL,
        pressure_forcing=True,
        wind_index=3,
        pressure_index=5,
        wind_refine=(np.inf,),
        radius_refine=radius_refine,
        storm_type=storm_type,
        model_type=1,
        storm_file=Path("track.txt"),
    )


def make_storm(config):
    track = [
        TrackEntry(0.0, -80.0, 20.0, 50.0, 30e3, 95000.0),
        TrackEntry(21600.0, -81.0, 21.0, 55.0, 30e3, 94000.0),
    ]
    return ParametricStorm(track, config)


class TestStormForcingField(unittest.TestCase):

    def setUp(self):
        self.config = make_config()
        self.forcing = StormForcingField(self.config, make_storm(self.config))
        self.geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)

    def test_populate(self):
        aux = np.zeros((5,) + self.geometry.shape)
        self.forcing.populate(aux, self.geometry, 0.0)
        self.assertTrue(np.all(aux[0:2] == 0.0))
        self.assertTrue(np.any(aux[2] != 0.0))
        self.assertTrue(np.all(aux[4] > 90000.0))

    def test_populate_is_idempotent(self):
        aux = np.zeros((5,) + self.geometry.shape)
        self.forcing.populate(aux, self.geometry, 1800.0)
        first = aux.copy()
        self.forcing.populate(aux, self.geometry, 1800.0)
        np.testing.assert_array_equal(aux, first)

    def test_rejects_wrong_shape(self):
        aux = np.zeros((5, 3, 3))
        with self.assertRaises(ValueError):
            self.forcing.populate(aux, self.geometry, 0.0)

    def test_rejects_missing_channels(self):
        aux = np.zeros((4,) + self.geometry.shape)
        with self.assertRaises(ValueError):
            self.forcing.populate(aux, self.geometry, 0.0)

    def test_rejects_non_finite_time(self):
        aux = np.zeros((5,) + self.geometry.shape)
        with self.assertRaises(ValueError):
            self.forcing.populate(aux, self.geometry, np.nan)

    def test_cell_distance(self):
        geometry = PatchGeometry(-80.25, 19.75, 0.5, 0.5, 1, 1, num_ghost=0)
        distance = self.forcing.cell_distance(geometry, 0.0)
        self.assertEqual(distance.shape, (1, 1))
        self.assertAlmostEqual(float(distance[0, 0]), 0.0, places=3)

    def test_cell_wind_speed(self):
        speed = self.forcing.cell_wind_speed(self.geometry, 0.0)
        self.assertEqual(speed.shape, self.geometry.shape)
        self.assertTrue(np.all(speed >= 0.0))
        self.assertGreater(speed.max(), 30.0)

    def test_flag_patch(self):
        flags = self.forcing.flag_patch(self.geometry, 1, 0.0)
        self.assertEqual(flags.shape, self.geometry.shape)
        self.assertTrue(flags.any())
        self.assertFalse(flags.all())
        self.assertFalse(self.forcing.flag_patch(self.geometry, 3, 0.0).any())


class TestNullForcing(unittest.TestCase):

    def setUp(self):
        config = make_config(storm_type=StormType.NULL)
        self.forcing = StormForcingField(config, NullStorm(config))
        self.geometry = PatchGeometry(-81.0, 19.0, 0.5, 0.5, 4, 4)

    def test_populate_untouched(self):
        aux = np.arange(5 * 8 * 8, dtype=np.float64).reshape(5, 8, 8)
        before = aux.tobytes()
        self.forcing.populate(aux, self.geometry, 0.0)
        self.assertEqual(aux.tobytes(), before)

    def test_never_flags(self):
        self.assertFalse(self.forcing.flag_patch(self.geometry, 1, 0.0).any())
        self.assertTrue(np.all(np.isinf(self.forcing.cell_distance(self.geometry, 0.0))))


if __name__ == '__main__':
    unittest.main()
