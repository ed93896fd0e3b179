import unittest
from datetime import datetime

from common.types import ALTITUDE_REFERENCE_MSL, WindProfile, WindSample
from csv_export.csv_formatter import (
    AltitudeUnit,
    CsvExportConfig,
    DirectionUnit,
    ReferenceFrame,
    Separator,
    SpeedUnit,
    default_csv_filename,
    export_samples,
    format_profile_csv,
)
from profile_fusion.fusion_engine import fuse_wind_profile


def fused_profile():
    return WindProfile(
        samples=[WindSample(0.0, 10.0, 350.0), WindSample(1000.0, 20.0, 10.0)],
        ground_elevation=1000.0,
    )


def sea_level_profile():
    return WindProfile(
        source_model="RAP",
        samples=[
            WindSample(500.0, 4.0, 80.0),
            WindSample(800.0, 6.0, 100.0),
            WindSample(1500.0, 10.0, 120.0),
        ],
        ground_elevation=1000.0,
        altitude_reference=ALTITUDE_REFERENCE_MSL,
    )


class TestFormatProfileCsv(unittest.TestCase):
    def test_defaults(self):
        text = format_profile_csv(fused_profile())
        self.assertEqual(
            text,
            "alt,speed,dir,stddev\n"
            "304.80,5.14,350.00,0.00\n"
            "609.60,10.29,10.00,0.00\n"
        )

    def test_agl_feet_knots(self):
        config = CsvExportConfig(
            separator=Separator.SEMICOLON,
            altitude_unit=AltitudeUnit.FEET,
            speed_unit=SpeedUnit.KNOTS,
            reference_frame=ReferenceFrame.AGL,
            decimals=1,
        )
        self.assertEqual(
            format_profile_csv(fused_profile(), config),
            "alt;speed;dir;stddev\n0.0;10.0;350.0;0.0\n1000.0;20.0;10.0;0.0\n"
        )

    def test_custom_names_and_tab(self):
        config = CsvExportConfig(
            separator=Separator.TAB,
            altitude_name="altitude",
            speed_name="wind",
            direction_name="heading",
            stddev_name="sigma",
        )
        header = format_profile_csv(fused_profile(), config).splitlines()[0]
        self.assertEqual(header, "altitude\twind\theading\tsigma")

    def test_direction_units(self):
        profile = WindProfile(samples=[WindSample(0.0, 5.0, 180.0)])
        radians = format_profile_csv(profile, CsvExportConfig(direction_unit=DirectionUnit.RADIANS))
        arcminutes = format_profile_csv(profile, CsvExportConfig(direction_unit=DirectionUnit.ARCMINUTES))
        self.assertEqual(radians.splitlines()[1].split(",")[2], "3.14")
        self.assertEqual(arcminutes.splitlines()[1].split(",")[2], "10800.00")

    def test_idempotent(self):
        config = CsvExportConfig(reference_frame=ReferenceFrame.AGL, stddev=1.0)
        profile = sea_level_profile()
        self.assertEqual(format_profile_csv(profile, config), format_profile_csv(profile, config))

    def test_empty_profile_has_header_only(self):
        self.assertEqual(format_profile_csv(WindProfile()), "alt,speed,dir,stddev\n")


class TestStandardDeviation(unittest.TestCase):
    def stddev_column(self, config):
        text = format_profile_csv(fused_profile(), config)
        return text.splitlines()[1].split(",")[3]

    def test_clamped_to_unit_maximum(self):
        expected = [
            (SpeedUnit.METERS_PER_SECOND, 5.0, "2.00"),
            (SpeedUnit.KILOMETERS_PER_HOUR, 10.0, "7.20"),
            (SpeedUnit.FEET_PER_SECOND, 10.0, "6.56"),
            (SpeedUnit.MILES_PER_HOUR, 10.0, "4.47"),
            (SpeedUnit.KNOTS, 10.0, "3.89"),
            (SpeedUnit.KNOTS, 3.0, "3.00"),
        ]
        for unit, stddev, column in expected:
            with self.subTest(unit=unit, stddev=stddev):
                config = CsvExportConfig(speed_unit=unit, stddev=stddev, stddev_unit=unit)
                self.assertEqual(self.stddev_column(config), column)

    def test_converted_to_speed_unit(self):
        config = CsvExportConfig(
            speed_unit=SpeedUnit.KILOMETERS_PER_HOUR,
            stddev=1.0,
            stddev_unit=SpeedUnit.METERS_PER_SECOND,
        )
        self.assertEqual(self.stddev_column(config), "3.60")


class TestExportSamples(unittest.TestCase):
    def test_msl_frame(self):
        msl = export_samples(fused_profile(), ReferenceFrame.MSL)
        self.assertEqual([s.altitude for s in msl], [1000.0, 2000.0])

        msl = export_samples(sea_level_profile(), ReferenceFrame.MSL)
        self.assertEqual([s.altitude for s in msl], [500.0, 800.0, 1500.0])

    def test_agl_frame_synthesizes_ground_sample(self):
        agl = export_samples(sea_level_profile(), ReferenceFrame.AGL)

        self.assertEqual(len(agl), 2)
        ground = agl[0]
        self.assertEqual(ground.altitude, 0.0)
        self.assertAlmostEqual(ground.speed, 6.0 + 4.0 * 2.0 / 7.0)
        self.assertAlmostEqual(ground.direction, 100.0 + 20.0 * 2.0 / 7.0)
        self.assertEqual((agl[1].altitude, agl[1].speed), (500.0, 10.0))

    def test_agl_ground_interpolation_spans_north(self):
        profile = WindProfile(
            samples=[WindSample(900.0, 4.0, 350.0), WindSample(1100.0, 8.0, 10.0)],
            ground_elevation=1000.0,
            altitude_reference=ALTITUDE_REFERENCE_MSL,
        )
        ground = export_samples(profile, ReferenceFrame.AGL)[0]
        self.assertAlmostEqual(ground.direction, 0.0)
        self.assertAlmostEqual(ground.speed, 6.0)

    def test_agl_ground_sample_matches_fused_ground_wind(self):
        below = WindSample(-25.0, 14.0, 100.0)
        above = WindSample(75.0, 10.0, 80.0)
        fused = fuse_wind_profile([], [below, above], ground_elevation=1000.0)

        profile = WindProfile(
            samples=[WindSample(975.0, 14.0, 100.0), WindSample(1075.0, 10.0, 80.0)],
            ground_elevation=1000.0,
            altitude_reference=ALTITUDE_REFERENCE_MSL,
        )
        ground = export_samples(profile, ReferenceFrame.AGL)[0]

        self.assertEqual(ground.altitude, 0.0)
        self.assertAlmostEqual(ground.speed, 11.0)
        self.assertAlmostEqual(ground.direction, 85.0)
        self.assertAlmostEqual(ground.speed, fused.samples[0].speed)
        self.assertAlmostEqual(ground.direction, fused.samples[0].direction)

    def test_agl_frame_drops_sample_without_higher_sample(self):
        profile = WindProfile(
            samples=[WindSample(500.0, 4.0, 80.0)],
            ground_elevation=1000.0,
            altitude_reference=ALTITUDE_REFERENCE_MSL,
        )
        self.assertEqual(export_samples(profile, ReferenceFrame.AGL), [])


class TestCsvExportConfig(unittest.TestCase):
    def test_empty_mapping_gives_defaults(self):
        self.assertEqual(CsvExportConfig.from_mapping({}), CsvExportConfig())

    def test_parses_names_values_and_indices(self):
        config = CsvExportConfig.from_mapping({
            "separator": 1,
            "altitude_name": "height",
            "altitude_unit": "ft",
            "speed_unit": 4,
            "direction_unit": "radians",
            "reference_frame": "agl",
            "stddev": "1.5",
            "stddev_unit": "knots",
            "decimals": "3",
        })

        self.assertEqual(config.separator, Separator.SEMICOLON)
        self.assertEqual(config.altitude_name, "height")
        self.assertEqual(config.altitude_unit, AltitudeUnit.FEET)
        self.assertEqual(config.speed_unit, SpeedUnit.KNOTS)
        self.assertEqual(config.direction_unit, DirectionUnit.RADIANS)
        self.assertEqual(config.reference_frame, ReferenceFrame.AGL)
        self.assertEqual(config.stddev, 1.5)
        self.assertEqual(config.stddev_unit, SpeedUnit.KNOTS)
        self.assertEqual(config.decimals, 3)

    def test_separator_characters(self):
        self.assertEqual(CsvExportConfig.from_mapping({"separator": "\t"}).separator, Separator.TAB)
        self.assertEqual(CsvExportConfig.from_mapping({"separator": " "}).separator, Separator.SPACE)
        self.assertEqual(CsvExportConfig.from_mapping({"separator": "tab"}).separator, Separator.TAB)

    def test_invalid_values_fall_back_to_defaults(self):
        with self.assertLogs("csv_export.csv_formatter", level="DEBUG") as logs:
            config = CsvExportConfig.from_mapping({
                "separator": True,
                "speed_name": "   ",
                "altitude_unit": "furlongs",
                "speed_unit": "7",
                "stddev": "-1",
                "decimals": 42,
            })

        self.assertEqual(config, CsvExportConfig())
        self.assertEqual(len(logs.output), 6)
        self.assertTrue(any("altitude_unit" in line for line in logs.output))


class TestDefaultFilename(unittest.TestCase):
    def test_filename(self):
        self.assertEqual(default_csv_filename(datetime(2024, 6, 1, 9)), "wind_2024-06-01T09.csv")


if __name__ == '__main__':
    unittest.main()
