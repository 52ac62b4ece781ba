import datetime
import os
import sys
import unittest
from unittest import mock

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import DayOfWeek, Workout
from workout_form import WorkoutForm
from workout_service import WorkoutService


class WorkoutServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = mock.Mock()
        self.service = WorkoutService(self.client)

    def test_list_month_newest_first(self) -> None:
        self.client.get_workouts_by_date_range.return_value = [
            Workout(date=datetime.date(2024, 2, 3)),
            Workout(date=datetime.date(2024, 2, 20)),
        ]
        workouts = self.service.list_month("2024-02")
        self.client.get_workouts_by_date_range.assert_called_once_with(
            datetime.date(2024, 2, 1), datetime.date(2024, 2, 29)
        )
        self.assertEqual([w.date.day for w in workouts], [20, 3])

    def test_save_rejects_invalid_form(self) -> None:
        with self.assertRaises(ValueError):
            self.service.save(WorkoutForm("2024-01-01"))
        self.client.create_workout.assert_not_called()

    def test_save_valid_form(self) -> None:
        form = WorkoutForm("2024-01-01")
        form.add_exercise("bench")
        self.client.create_workout.return_value = Workout(id="w1", date=datetime.date(2024, 1, 1))
        self.assertEqual(self.service.save(form).id, "w1")

    def test_copy_and_previous(self) -> None:
        self.service.copy_to("w1", "2024-01-08")
        self.client.copy_workout.assert_called_once_with("w1", datetime.date(2024, 1, 8))
        self.service.previous_for(WorkoutForm("2024-01-08"))
        self.client.get_previous_by_day_of_week.assert_called_once_with(
            DayOfWeek.MONDAY, datetime.date(2024, 1, 8)
        )

    def test_update_requires_stored_valid_workout(self) -> None:
        with self.assertRaises(ValueError):
            self.service.update(WorkoutForm("2024-01-01"))
        stored = Workout.model_validate(
            {"id": "w1", "date": "2024-01-01", "exercises": [{"exerciseId": "bench", "sets": []}]}
        )
        form = WorkoutForm.from_workout(stored)
        with self.assertRaises(ValueError):
            self.service.update(form)
        form.add_set(0, 5, 100)
        self.client.update_workout.return_value = stored
        self.service.update(form)
        self.client.update_workout.assert_called_once_with("w1", form.workout)

    def test_by_day_newest_first(self) -> None:
        self.client.get_workouts_by_day.return_value = [
            Workout(date=datetime.date(2024, 1, 1)),
            Workout(date=datetime.date(2024, 1, 15)),
        ]
        workouts = self.service.by_day(DayOfWeek.MONDAY)
        self.assertEqual([w.date.day for w in workouts], [15, 1])


if __name__ == "__main__":
    unittest.main()
