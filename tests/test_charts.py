import datetime
import os
import sys
import unittest
import warnings

from altair.utils.deprecation import AltairDeprecationWarning

warnings.simplefilter("ignore", AltairDeprecationWarning)

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from charts import daily_volume_chart, monthly_volume_chart
from formatting import format_volume, format_workout_date
from models import MonthlyVolume, VolumeDataPoint


class ChartsTest(unittest.TestCase):
    def test_daily_chart(self) -> None:
        self.assertIsNone(daily_volume_chart([]))
        chart = daily_volume_chart(
            [
                VolumeDataPoint(date=datetime.date(2024, 1, 1), volume=1000),
                VolumeDataPoint(date=datetime.date(2024, 1, 2), volume=550),
            ]
        )
        spec = chart.to_dict()
        self.assertEqual(spec["mark"]["type"], "line")
        self.assertEqual(spec["encoding"]["y"]["field"], "volume")

    def test_monthly_chart(self) -> None:
        zero = [MonthlyVolume(month="2024-01", volume=0), MonthlyVolume(month="2024-02", volume=0)]
        self.assertIsNone(monthly_volume_chart(zero))
        chart = monthly_volume_chart(
            [MonthlyVolume(month="2024-01", volume=1550), MonthlyVolume(month="2024-02", volume=0)]
        )
        spec = chart.to_dict()
        self.assertEqual(spec["mark"]["type"], "bar")
        self.assertEqual(spec["encoding"]["x"]["sort"], ["Jan 2024", "Feb 2024"])


class FormattingTest(unittest.TestCase):
    def test_format_volume(self) -> None:
        self.assertEqual(format_volume(1550), "1,550 lbs")
        self.assertEqual(format_volume(102.5), "102.50 lbs")
        self.assertEqual(format_volume(220.462, "kg"), "100 kg")

    def test_format_workout_date(self) -> None:
        self.assertEqual(format_workout_date("2024-01-01"), "Monday, January 1, 2024")


if __name__ == "__main__":
    unittest.main()
