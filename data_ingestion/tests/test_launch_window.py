import unittest
from datetime import datetime, timedelta, timezone

from data_ingestion.launch_window import LaunchTimeWindow, check_forecast_range

NOW = datetime(2024, 6, 1, 7, 30, tzinfo=timezone.utc)


class TestLaunchTimeWindow(unittest.TestCase):
    def test_from_strings(self):
        window = LaunchTimeWindow.from_strings(
            "2024-06-01", "09:30", 17, now=NOW, tz=timezone.utc
        )

        self.assertEqual(window.start, datetime(2024, 6, 1, 9, tzinfo=timezone.utc))
        self.assertEqual(window.end, datetime(2024, 6, 1, 17, tzinfo=timezone.utc))
        self.assertEqual(window.start_hour, 9)
        self.assertEqual(window.end_hour, 17)
        self.assertEqual(window.hour_count, 9)
        # 1.5 and 9.5 hours ahead, rounded up
        self.assertEqual(window.start_hour_offset, 2)
        self.assertEqual(window.end_hour_offset, 10)

    def test_single_hour_window(self):
        window = LaunchTimeWindow.from_strings("2024-06-01", "12", "12", now=NOW, tz=timezone.utc)
        self.assertEqual(window.hour_count, 1)

    def test_naive_now_uses_window_timezone(self):
        window = LaunchTimeWindow.from_strings(
            "2024-06-01", "10", "11", now=datetime(2024, 6, 1, 9), tz=timezone.utc
        )
        self.assertEqual(window.start_hour_offset, 1)

    def test_iso_strings_are_utc(self):
        central = timezone(timedelta(hours=-5))
        window = LaunchTimeWindow.from_strings("2024-06-01", "09", "20", now=NOW, tz=central)
        self.assertEqual(window.start_iso(), "2024-06-01T14:00")
        self.assertEqual(window.end_iso(), "2024-06-02T01:00")

    def test_invalid_inputs(self):
        cases = [
            ("2024-13-01", "09", "10"),
            ("June 1st", "09", "10"),
            ("2024-06-01", "9", "10"),
            ("2024-06-01", "xx", "10"),
            ("2024-06-01", "09", "24"),
            ("2024-06-01", True, "10"),
            ("2024-06-01", "15", "10"),
        ]
        for launch_date, start, end in cases:
            with self.subTest(date=launch_date, start=start, end=end):
                with self.assertRaises(ValueError):
                    LaunchTimeWindow.from_strings(launch_date, start, end, now=NOW, tz=timezone.utc)

    def test_window_must_stay_on_one_day(self):
        start = datetime(2024, 6, 1, 22, tzinfo=timezone.utc)
        with self.assertRaises(ValueError):
            LaunchTimeWindow(start, start + timedelta(hours=3), 0, 3)


class TestForecastRange(unittest.TestCase):
    def window(self, now):
        return LaunchTimeWindow.from_strings("2024-06-01", "09", "12", now=now, tz=timezone.utc)

    def test_in_range(self):
        self.assertIsNone(check_forecast_range(self.window(NOW)))
        self.assertIsNone(check_forecast_range(self.window(NOW + timedelta(days=8))))

    def test_too_old(self):
        message = check_forecast_range(self.window(NOW + timedelta(days=10)))
        self.assertIn("older than 9 days", message)

    def test_too_far_ahead(self):
        message = check_forecast_range(self.window(NOW - timedelta(days=16)))
        self.assertIn("15 days", message)


if __name__ == '__main__':
    unittest.main()
