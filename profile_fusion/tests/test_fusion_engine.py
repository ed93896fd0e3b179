import unittest
from datetime import datetime

from common.types import WindSample
from profile_fusion.fusion_engine import ProfileFusionEngine, fuse_wind_profile


def as_tuples(profile):
    return [(s.altitude, s.speed, s.direction) for s in profile.samples]


class TestFusionAboveGround(unittest.TestCase):
    def setUp(self):
        self.engine = ProfileFusionEngine()
        self.pressure = [WindSample(500.0, 10.0, 90.0), WindSample(1500.0, 15.0, 100.0)]

    def test_surface_samples_fill_the_gap(self):
        profile = self.engine.fuse([WindSample(100.0, 8.0, 80.0)], self.pressure)

        self.assertEqual(as_tuples(profile), [
            (0.0, 8.0, 80.0),
            (100.0, 8.0, 80.0),
            (500.0, 10.0, 90.0),
            (1500.0, 15.0, 100.0),
        ])
        self.assertEqual(profile.ground_wind_speed, 8.0)
        self.assertEqual(profile.ground_wind_direction, 80.0)
        self.assertTrue(profile.is_ground_anchored)

    def test_surface_samples_above_lowest_level_ignored(self):
        altitude = [
            WindSample(590.0, 11.0, 95.0),
            WindSample(33.0, 7.0, 70.0),
            WindSample(262.0, 8.0, 75.0),
        ]
        profile = self.engine.fuse(altitude, self.pressure)

        self.assertEqual([s.altitude for s in profile.samples], [0.0, 33.0, 262.0, 500.0, 1500.0])
        self.assertEqual(profile.samples[0].speed, 7.0)

    def test_ground_copied_from_lowest_level(self):
        profile = self.engine.fuse([], self.pressure)
        self.assertEqual(as_tuples(profile)[0], (0.0, 10.0, 90.0))
        self.assertEqual(len(profile.samples), 3)

    def test_pressure_samples_sorted(self):
        profile = self.engine.fuse([], list(reversed(self.pressure)))
        self.assertEqual([s.altitude for s in profile.samples], [0.0, 500.0, 1500.0])


class TestFusionBelowGround(unittest.TestCase):
    def setUp(self):
        self.engine = ProfileFusionEngine()

    def test_ground_wind_spans_north(self):
        pressure = [WindSample(-50.0, 10.0, 350.0), WindSample(50.0, 14.0, 10.0)]
        profile = self.engine.fuse([WindSample(30.0, 1.0, 180.0)], pressure)

        ground = profile.samples[0]
        self.assertEqual(ground.altitude, 0.0)
        self.assertAlmostEqual(ground.speed, 12.0)
        self.assertTrue(ground.direction < 5.0 or ground.direction > 355.0)
        self.assertEqual(as_tuples(profile)[1:], [(50.0, 14.0, 10.0)])

    def test_levels_under_ground_dropped(self):
        pressure = [
            WindSample(-900.0, 3.0, 40.0),
            WindSample(-100.0, 4.0, 60.0),
            WindSample(300.0, 8.0, 100.0),
            WindSample(2000.0, 20.0, 120.0),
        ]
        profile = self.engine.fuse([], pressure)

        self.assertEqual([s.altitude for s in profile.samples], [0.0, 300.0, 2000.0])
        self.assertAlmostEqual(profile.samples[0].speed, 5.0)
        self.assertAlmostEqual(profile.samples[0].direction, 70.0)

    def test_level_exactly_at_ground(self):
        pressure = [WindSample(0.0, 6.0, 200.0), WindSample(400.0, 10.0, 220.0)]
        profile = self.engine.fuse([], pressure)
        self.assertEqual(as_tuples(profile), [(0.0, 6.0, 200.0), (400.0, 10.0, 220.0)])

    def test_no_level_above_ground(self):
        pressure = [WindSample(-300.0, 6.0, 200.0), WindSample(-20.0, 10.0, 220.0)]
        with self.assertLogs("ProfileFusionEngine", level="WARNING"):
            profile = self.engine.fuse([], pressure)
        self.assertTrue(profile.is_empty)


class TestFusionMetadata(unittest.TestCase):
    def test_empty_without_pressure_levels(self):
        profile = fuse_wind_profile([WindSample(30.0, 5.0, 90.0)], [])
        self.assertTrue(profile.is_empty)

    def test_profile_metadata(self):
        valid_time = datetime(2024, 6, 1, 15)
        profile = fuse_wind_profile(
            [], [WindSample(500.0, 10.0, 90.0)],
            ground_elevation=650.0, source_model="GFS", valid_time=valid_time
        )
        self.assertEqual(profile.source_model, "GFS")
        self.assertEqual(profile.ground_elevation, 650.0)
        self.assertEqual(profile.valid_time, valid_time)
        self.assertEqual(profile.altitude_reference, "AGL")


if __name__ == '__main__':
    unittest.main()
