import numpy as np
import tempfile
import unittest
from pathlib import Path
from common.types import TrackEntry
from storm_models import NullStorm, ParametricStorm
from surge_forcing import TrackLogger

FIELD_WIDTH = 26


def split_fields(line):
    return [float(line[i:i + FIELD_WIDTH]) for i in range(0, 4 * FIELD_WIDTH, FIELD_WIDTH)]


class TestTrackLogger(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "fort.track"
        track = [
            TrackEntry(0.0, 0.0, 0.0, 40.0, 30e3, 96000.0),
            TrackEntry(10.0, 10.0, 10.0, 40.0, 30e3, 96000.0),
        ]
        self.storm = ParametricStorm(track)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_record_appends_fixed_width_lines(self):
        logger = TrackLogger(self.storm, self.path)
        logger.record(0.0)
        logger.record(5.0)

        lines = self.path.read_text().splitlines()
        self.assertEqual(len(lines), 2)
        for line in lines:
            self.assertEqual(len(line), 4 * FIELD_WIDTH)

        t, lon, lat, bearing = split_fields(lines[1])
        self.assertEqual(t, 5.0)
        self.assertAlmostEqual(lon, 5.0)
        self.assertAlmostEqual(lat, 5.0)
        self.assertAlmostEqual(bearing, self.storm.direction(5.0))

    def test_existing_lines_preserved(self):
        self.path.write_text("previous run\n")
        TrackLogger(self.storm, self.path).record(10.0)
        lines = self.path.read_text().splitlines()
        self.assertEqual(lines[0], "previous run")
        self.assertEqual(len(lines), 2)

    def test_null_storm(self):
        TrackLogger(NullStorm(), self.path).record(3600.0)
        line = self.path.read_text().splitlines()[0]
        self.assertEqual(len(line), 4 * FIELD_WIDTH)
        t, lon, lat, bearing = split_fields(line)
        self.assertEqual(t, 3600.0)
        self.assertTrue(np.isinf(lon) and np.isinf(lat) and np.isinf(bearing))


if __name__ == '__main__':
    unittest.main()
