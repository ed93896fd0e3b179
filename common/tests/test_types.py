import math
import unittest

from common.logging_config import DataQualityLog
from common.types import (
    DescentData,
    GeoLocation,
    LaunchPathPoint,
    LaunchSimulationData,
    WeathercockWindData,
    WindProfile,
    WindSample,
)


class TestGeoLocation(unittest.TestCase):
    def test_valid_coordinates(self):
        site = GeoLocation(30.6168, -97.506)
        self.assertEqual(site.latitude, 30.6168)
        self.assertEqual(site.longitude, -97.506)

    def test_range_limits_are_inclusive(self):
        GeoLocation(90.0, 180.0)
        GeoLocation(-90.0, -180.0)

    def test_invalid_coordinates_rejected(self):
        for lat, lon in [(90.1, 0.0), (-90.1, 0.0), (0.0, 180.5), (0.0, -181.0),
                         (math.nan, 0.0), (0.0, math.inf), ("north", 0.0), (None, 0.0)]:
            with self.subTest(lat=lat, lon=lon):
                with self.assertRaises(ValueError):
                    GeoLocation(lat, lon)

    def test_move_to_validates_before_overwriting(self):
        site = GeoLocation(10.0, 20.0)
        with self.assertRaises(ValueError):
            site.move_to(95.0, 20.0)
        self.assertEqual((site.latitude, site.longitude), (10.0, 20.0))

        site.move_to(11.0, 21.0)
        self.assertEqual((site.latitude, site.longitude), (11.0, 21.0))

    def test_copy_is_independent(self):
        site = GeoLocation(10.0, 20.0)
        other = site.copy()
        other.move_to(0.0, 0.0)
        self.assertEqual(site.latitude, 10.0)


class TestWindSample(unittest.TestCase):
    def test_values_become_floats(self):
        sample = WindSample(100, 8, 80)
        self.assertIsInstance(sample.altitude, float)
        self.assertEqual(sample.speed, 8.0)

    def test_non_finite_rejected(self):
        with self.assertRaises(ValueError):
            WindSample(100.0, math.nan, 80.0)
        with self.assertRaises(ValueError):
            WindSample(math.inf, 8.0, 80.0)


class TestWindProfile(unittest.TestCase):
    def test_empty_profile(self):
        profile = WindProfile()
        self.assertTrue(profile.is_empty)
        self.assertIsNone(profile.max_altitude)
        self.assertFalse(profile.is_ground_anchored)

    def test_ground_anchored(self):
        profile = WindProfile(samples=[
            WindSample(0.0, 5.0, 90.0),
            WindSample(100.0, 6.0, 95.0),
            WindSample(100.0, 6.0, 95.0),
            WindSample(900.0, 9.0, 120.0),
        ])
        self.assertTrue(profile.is_ground_anchored)
        self.assertEqual(profile.max_altitude, 900.0)
        self.assertEqual(list(profile.altitudes), [0.0, 100.0, 100.0, 900.0])


class TestValueTypes(unittest.TestCase):
    def test_descent_data_rejects_nan(self):
        with self.assertRaises(ValueError):
            DescentData(1000.0, math.nan, 5.0, 90.0)

    def test_weathercock_data(self):
        data = WeathercockWindData(10, 150, 3000)
        self.assertEqual(data.upwind_distance, 150.0)
        with self.assertRaises(ValueError):
            WeathercockWindData(10, "far", 3000)

    def test_launch_path_point_copies_location(self):
        site = GeoLocation(10.0, 20.0)
        point = LaunchPathPoint(500.0, site)
        site.move_to(0.0, 0.0)
        self.assertEqual(point.location.latitude, 10.0)

    def test_launch_path_point_requires_location(self):
        with self.assertRaises(ValueError):
            LaunchPathPoint(500.0, None)


class TestLaunchSimulationData(unittest.TestCase):
    def setUp(self):
        self.simulation = LaunchSimulationData(
            elevation=600.0, hour=15, ground_wind_speed=6.0,
            ground_wind_direction=200.0, model_name="RAP"
        )

    def test_negative_elevation_stored_as_zero(self):
        simulation = LaunchSimulationData(-20.0, 0, 0.0, 0.0)
        self.assertEqual(simulation.elevation, 0.0)

    def test_empty_path(self):
        self.assertIsNone(self.simulation.get_launch_location())
        self.assertIsNone(self.simulation.get_apogee_location())
        self.assertIsNone(self.simulation.get_landing_location())
        self.assertEqual(self.simulation.get_apogee(), 0)

    def test_path_accessors(self):
        launch = GeoLocation(30.0, -97.0)
        apogee = GeoLocation(30.001, -97.0)
        landing = GeoLocation(30.01, -97.01)

        self.assertTrue(self.simulation.add_launch_path_point(0.0, launch))
        self.assertTrue(self.simulation.add_launch_path_point(1200.4, apogee))
        self.assertTrue(self.simulation.add_launch_path_point(5000.6, apogee))
        self.assertTrue(self.simulation.add_launch_path_point(0.0, landing))
        self.assertFalse(self.simulation.add_launch_path_point(10.0, None))
        self.assertFalse(self.simulation.add_launch_path_point(math.nan, landing))

        self.assertEqual(len(self.simulation.launch_path), 4)
        self.assertEqual(self.simulation.get_launch_location(), launch)
        self.assertEqual(self.simulation.get_apogee_location(), apogee)
        self.assertEqual(self.simulation.get_landing_location(), landing)
        self.assertEqual(self.simulation.get_apogee(), 5001)

    def test_launch_time_labels(self):
        expected = {0: "12AM", 9: "9AM", 12: "12PM", 15: "3PM", 23: "11PM"}
        for hour, label in expected.items():
            with self.subTest(hour=hour):
                simulation = LaunchSimulationData(0.0, hour, 0.0, 0.0)
                self.assertEqual(simulation.get_launch_time(), label)

    def test_model_name(self):
        self.assertEqual(self.simulation.get_wind_model_name(), "RAP")


class TestDataQualityLog(unittest.TestCase):
    def test_records_and_summarizes(self):
        quality = DataQualityLog()
        self.assertTrue(quality.is_complete)

        quality.record_skip("wind_speed_10m", 0, "value is null")
        quality.record_skip("wind_speed_10m", 3, "array too short for hour index")
        quality.record_skip("geopotential_height_500hPa", 3, "value is null")

        self.assertFalse(quality.is_complete)
        self.assertEqual(quality.skip_count, 3)
        self.assertEqual(len(quality.skips_for_hour(3)), 2)
        self.assertEqual(quality.summary(), {
            "total_skipped": 3,
            "skipped_by_field": {"wind_speed_10m": 2, "geopotential_height_500hPa": 1},
        })

    def test_logs_are_independent(self):
        first = DataQualityLog()
        second = DataQualityLog()
        first.record_skip("hourly", None, "field missing from forecast")
        self.assertEqual(second.skip_count, 0)


if __name__ == '__main__':
    unittest.main()
