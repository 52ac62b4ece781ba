from __future__ import annotations

import datetime
import uuid
from typing import Dict, List, Optional

from algorithms import CalendarTools, VolumeAggregator
from models import DayOfWeek, ExerciseSet, Workout, WorkoutExercise

DEFAULT_REPS = 8
DEFAULT_WEIGHT = 0.0


def _new_key() -> str:
    return uuid.uuid4().hex[:12]


class WorkoutForm:
    """Draft state of a workout being logged.

    Every exercise entry and every set carries a key that stays the same
    while other rows are added or removed. Widgets bound to a row use it
    so a removal never hands one row's input to its neighbour.
    """

    def __init__(self, date: datetime.date | str | None = None) -> None:
        day = CalendarTools.parse_date(date) if date else datetime.date.today()
        self.workout = Workout(date=day)
        self.entry_keys: List[str] = []
        self.set_keys: List[List[str]] = []

    @classmethod
    def from_workout(cls, workout: Workout) -> "WorkoutForm":
        form = cls(workout.date)
        form.workout = workout.model_copy(deep=True)
        form._rekey()
        return form

    def _rekey(self) -> None:
        self.entry_keys = [_new_key() for _ in self.workout.exercises]
        self.set_keys = [[_new_key() for _ in ex.sets] for ex in self.workout.exercises]

    @property
    def date(self) -> datetime.date:
        return self.workout.date

    @property
    def day_of_week(self) -> DayOfWeek:
        return self.workout.day_of_week

    @property
    def exercises(self) -> List[WorkoutExercise]:
        return self.workout.exercises

    def set_date(self, value: datetime.date | str) -> None:
        self.workout.date = CalendarTools.parse_date(value)

    def add_exercise(self, exercise_id: str = "", name: Optional[str] = None) -> int:
        self.workout.exercises.append(
            WorkoutExercise(
                exercise_id=exercise_id,
                name=name,
                sets=[ExerciseSet(reps=DEFAULT_REPS, weight=DEFAULT_WEIGHT)],
            )
        )
        self.entry_keys.append(_new_key())
        self.set_keys.append([_new_key()])
        return len(self.workout.exercises) - 1

    def remove_exercise(self, index: int) -> None:
        del self.workout.exercises[index]
        del self.entry_keys[index]
        del self.set_keys[index]

    def update_exercise(self, index: int, exercise_id: str, name: Optional[str] = None) -> None:
        """Point entry ``index`` at another exercise, keeping its sets."""
        entry = self.workout.exercises[index]
        entry.exercise_id = exercise_id
        entry.name = name

    def load_exercises(self, workout: Workout) -> None:
        """Replace the draft's exercises with a copy of ``workout``'s."""
        self.workout.exercises = [ex.model_copy(deep=True) for ex in workout.exercises]
        self._rekey()

    def add_set(self, index: int, reps: Optional[int] = None, weight: Optional[float] = None) -> None:
        """Append a set, repeating the previous one when no values are given."""
        sets = self.workout.exercises[index].sets
        if reps is None and weight is None and sets:
            last = sets[-1]
            reps, weight = last.reps, last.weight
        sets.append(
            ExerciseSet(
                reps=DEFAULT_REPS if reps is None else reps,
                weight=DEFAULT_WEIGHT if weight is None else weight,
            )
        )
        self.set_keys[index].append(_new_key())

    def remove_set(self, index: int, set_index: int) -> None:
        del self.workout.exercises[index].sets[set_index]
        del self.set_keys[index][set_index]

    def update_set(
        self,
        index: int,
        set_index: int,
        reps: Optional[int] = None,
        weight: Optional[float] = None,
    ) -> None:
        item = self.workout.exercises[index].sets[set_index]
        if reps is not None:
            item.reps = reps
        if weight is not None:
            item.weight = weight

    def errors(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if not self.workout.exercises:
            errors["exercises"] = "Add at least one exercise"
        for i, ex in enumerate(self.workout.exercises):
            if not ex.exercise_id:
                errors[f"exercises.{i}.exerciseId"] = "Select an exercise"
            if not ex.sets:
                errors[f"exercises.{i}.sets"] = "Add at least one set"
            for j, s in enumerate(ex.sets):
                if not s.reps or s.reps <= 0:
                    errors[f"exercises.{i}.sets.{j}.reps"] = "Reps must be positive"
        return errors

    def is_valid(self) -> bool:
        return self.workout.date is not None and not self.errors()

    @property
    def total_volume(self) -> float:
        return VolumeAggregator.workout_volume(self.workout)

    @property
    def total_sets(self) -> int:
        return VolumeAggregator.total_sets([self.workout])

    def exercise_volume(self, index: int) -> float:
        return VolumeAggregator.exercise_volume(self.workout.exercises[index])

    def to_payload(self) -> dict:
        payload = self.workout.to_wire()
        payload.pop("id", None)
        for ex in payload.get("exercises", []):
            ex.pop("name", None)
        return payload
