import os
import sys
import unittest
from unittest import mock

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from library import ExerciseLibrary, filter_exercises, search_exercises
from models import Exercise


def _exercises() -> list:
    return [
        Exercise(id="1", name="Bench Press", muscle_group="CHEST", description="Barbell press"),
        Exercise(id="2", name="Squat", muscle_group="LEGS", description="Back squat"),
        Exercise(id="3", name="Plank", muscle_group="CORE", description="Hold position", requires_weight=False),
        Exercise(id="4", name="Incline Press", muscle_group="CHEST", description=""),
    ]


class ExerciseFilterTest(unittest.TestCase):
    def test_filter_by_group_and_query(self) -> None:
        items = _exercises()
        self.assertEqual(len(filter_exercises(items)), 4)
        self.assertEqual([e.id for e in filter_exercises(items, "CHEST")], ["1", "4"])
        self.assertEqual([e.id for e in filter_exercises(items, "CHEST", "incline")], ["4"])
        self.assertEqual([e.id for e in filter_exercises(items, "ALL", "squat")], ["2"])
        self.assertEqual([e.id for e in filter_exercises(items, "ALL", "HOLD")], ["3"])

    def test_search_includes_muscle_group(self) -> None:
        items = _exercises()
        self.assertEqual([e.id for e in search_exercises(items, "core")], ["3"])
        self.assertEqual([e.id for e in search_exercises(items, "press")], ["1", "4"])
        self.assertEqual(len(search_exercises(items, "")), 4)


class ExerciseLibraryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = mock.Mock()
        self.client.get_exercises.return_value = _exercises()
        self.library = ExerciseLibrary(self.client)

    def test_create_refetches(self) -> None:
        result = self.library.create(" Curl ", "ARMS", "Dumbbell curl")
        self.client.create_exercise.assert_called_once_with("Curl", "ARMS", "Dumbbell curl", True)
        self.assertEqual(len(result), 4)

    def test_create_rejects_invalid(self) -> None:
        with self.assertRaises(ValueError):
            self.library.create("", "ARMS")
        self.client.create_exercise.assert_not_called()

    def test_initialize_defaults(self) -> None:
        self.assertEqual(len(self.library.initialize_defaults()), 4)
        self.client.initialize_exercises.assert_called_once()

    def test_by_muscle_group(self) -> None:
        self.library.by_muscle_group("LEGS")
        self.client.get_exercises_by_muscle_group.assert_called_once_with("LEGS")


if __name__ == "__main__":
    unittest.main()
