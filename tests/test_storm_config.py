import numpy as np
import tempfile
import unittest
from pathlib import Path
from configuration.storm_config import (
    ConfigLoader, FatalConfigError, StormType, load_storm_config, count_values, parse_values,
)
from wind_drag.drag_laws import WindDragLaw


def config_text(wind_forcing="T", drag_law="2", wind_refine="20.0 40.0 60.0",
                radius_refine="F", storm_type="1"):
    return "\n".join([
        "# Storm forcing parameters",
        "",
        f"{wind_forcing}   =: wind_forcing",
        f"{drag_law}   =: drag_law",
        "T   =: pressure_forcing",
        "5   =: wind_index",
        "7   =: pressure_index",
        f"{wind_refine}   =: wind_refine",
        f"{radius_refine}   =: R_refine",
        f"{storm_type}   =: storm_type",
        "1   =: model_type",
        "'track.txt'   =: storm_file",
        "3.6d3   =: landfall",
        "T   =: display_landfall_time",
    ]) + "\n"


class TestStormConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, text):
        path = self.dir / "surge.data"
        path.write_text(text)
        return path

    def test_round_trip(self):
        config = load_storm_config(self.write(config_text()))
        self.assertTrue(config.wind_forcing)
        self.assertIs(config.drag_law, WindDragLaw.POWELL)
        self.assertTrue(config.pressure_forcing)
        self.assertEqual(config.wind_index, 5)
        self.assertEqual(config.pressure_index, 7)
        self.assertEqual(config.wind_refine, (20.0, 40.0, 60.0))
        self.assertEqual(config.radius_refine, (-np.inf,))
        self.assertIs(config.storm_type, StormType.PARAMETRIC)
        self.assertEqual(config.model_type, 1)
        self.assertEqual(config.storm_file, self.dir / "track.txt")
        self.assertEqual(config.landfall, 3600.0)
        self.assertTrue(config.display_landfall_time)

    def test_wind_off_forces_no_drag(self):
        config = load_storm_config(self.write(config_text(wind_forcing="F", drag_law="2")))
        self.assertFalse(config.wind_forcing)
        self.assertIs(config.drag_law, WindDragLaw.NONE)

    def test_disabled_wind_refine(self):
        config = load_storm_config(self.write(config_text(wind_refine="F")))
        self.assertEqual(len(config.wind_refine), 1)
        self.assertEqual(config.wind_refine[0], np.inf)

    def test_radius_refine_values(self):
        config = load_storm_config(self.write(config_text(radius_refine="2.0d5, 5.0d4")))
        self.assertEqual(config.radius_refine, (2.0e5, 5.0e4))

    def test_invalid_drag_law(self):
        with self.assertRaises(FatalConfigError) as cm:
            load_storm_config(self.write(config_text(drag_law="5")))
        self.assertIsInstance(cm.exception, SystemExit)
        self.assertIn("drag law", cm.exception.message)

    def test_invalid_storm_type(self):
        with self.assertRaises(FatalConfigError):
            load_storm_config(self.write(config_text(storm_type="3")))

    def test_non_positive_threshold(self):
        with self.assertRaises(FatalConfigError):
            load_storm_config(self.write(config_text(wind_refine="20.0 -1.0")))

    def test_missing_resource(self):
        with self.assertRaises(FatalConfigError):
            load_storm_config(self.dir / "missing.data")

    def test_truncated_resource(self):
        with self.assertRaises(FatalConfigError):
            load_storm_config(self.write("T\n2\nT\n"))

    def test_loaded_once(self):
        path = self.write(config_text())
        loader = ConfigLoader(path)
        self.assertFalse(loader.is_loaded)
        config = loader.load()
        path.unlink()
        self.assertIs(loader.load(), config)
        self.assertTrue(loader.is_loaded)

    def test_summary_written(self):
        log_path = self.dir / "fort.surge"
        load_storm_config(self.write(config_text()), log_path=log_path)
        summary = log_path.read_text()
        self.assertIn("Wind Nesting = 20.0 40.0 60.0", summary)
        self.assertIn("Storm Type = PARAMETRIC", summary)

    def test_display_time(self):
        config = load_storm_config(self.write(config_text()))
        self.assertAlmostEqual(config.display_time(3600.0 + 86400.0), 1.0)
        self.assertAlmostEqual(config.display_time(0.0), -3600.0 / 86400.0)


class TestTokenizing(unittest.TestCase):

    def test_count_values(self):
        self.assertEqual(count_values("1.0, 2.0 3.0 =: wind_refine"), 3)
        self.assertEqual(count_values("  =: empty"), 0)

    def test_parse_values(self):
        self.assertEqual(parse_values("1d3 2.5 =: values"), (1000.0, 2.5))


if __name__ == '__main__':
    unittest.main()
