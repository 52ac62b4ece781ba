import datetime
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Sequence

from models import (
    DayOfWeek,
    ExerciseSet,
    MonthlyVolume,
    VolumeDataPoint,
    WeekBounds,
    Workout,
    WorkoutExercise,
)
from .calendar_tools import CalendarTools, DateLike


class VolumeAggregator:
    """Derive training volume metrics from already fetched workouts.

    Volume of a set is ``reps * weight``; exercise, workout and collection
    volumes are plain sums, so ordering never changes a total. Every method
    is pure and treats missing reps or weight as 0 so that drafts with
    half-typed sets can be summarised.
    """

    @staticmethod
    def set_volume(exercise_set: ExerciseSet) -> float:
        reps = exercise_set.reps or 0
        weight = exercise_set.weight or 0.0
        return reps * weight

    @staticmethod
    def exercise_volume(workout_exercise: WorkoutExercise) -> float:
        """Return the summed volume of all sets of one exercise entry."""
        vol = 0.0
        for s in workout_exercise.sets or []:
            vol += VolumeAggregator.set_volume(s)
        return vol

    @staticmethod
    def workout_volume(workout: Workout) -> float:
        vol = 0.0
        for ex in workout.exercises or []:
            vol += VolumeAggregator.exercise_volume(ex)
        return vol

    @staticmethod
    def total_volume(workouts: Iterable[Workout]) -> float:
        """Return the volume of every set across ``workouts``; 0 when empty."""
        return sum((VolumeAggregator.workout_volume(w) for w in workouts), 0.0)

    @staticmethod
    def total_sets(workouts: Iterable[Workout]) -> int:
        count = 0
        for w in workouts:
            for ex in w.exercises or []:
                count += len(ex.sets or [])
        return count

    @staticmethod
    def filter_by_exercise(
        workouts: Iterable[Workout], exercise_id: str
    ) -> List[WorkoutExercise]:
        """Flatten entries for ``exercise_id``, keeping workout then entry order."""
        return [
            ex
            for w in workouts
            for ex in w.exercises or []
            if ex.exercise_id == exercise_id
        ]

    @staticmethod
    def exercise_volume_in(workouts: Iterable[Workout], exercise_id: str) -> float:
        return sum(
            (
                VolumeAggregator.exercise_volume(ex)
                for ex in VolumeAggregator.filter_by_exercise(workouts, exercise_id)
            ),
            0.0,
        )

    @staticmethod
    def build_daily_series(
        workouts_by_date: Mapping[datetime.date, Sequence[Workout]],
        exercise_id: str,
        date_range: Iterable[DateLike],
    ) -> List[VolumeDataPoint]:
        """Return one point per trained day of ``date_range``.

        Workouts sharing a date are summed. Days where the exercise has no
        volume are left out; callers needing a dense series fill gaps.
        """
        points: list[VolumeDataPoint] = []
        for value in date_range:
            day = CalendarTools.parse_date(value)
            vol = VolumeAggregator.exercise_volume_in(
                workouts_by_date.get(day, ()), exercise_id
            )
            if vol == 0:
                continue
            points.append(VolumeDataPoint(date=day, volume=vol))
        return points

    @staticmethod
    def build_monthly_series(
        workouts_by_month: Mapping[str, Sequence[Workout]],
        exercise_id: str,
        months: Sequence[str],
        most_recent_first: bool = False,
    ) -> List[MonthlyVolume]:
        """Return exactly one entry per requested month, zero months included.

        Output follows ``months``. With ``most_recent_first`` the keys are
        read as newest first and the result is flipped to oldest first.
        """
        rows = [
            MonthlyVolume(
                month=key,
                volume=VolumeAggregator.exercise_volume_in(
                    workouts_by_month.get(key, ()), exercise_id
                ),
            )
            for key in months
        ]
        if most_recent_first:
            rows.reverse()
        return rows

    @staticmethod
    def weekly_bounds(
        reference: DateLike, week_starts_on: DayOfWeek = DayOfWeek.MONDAY
    ) -> WeekBounds:
        return CalendarTools.weekly_bounds(reference, week_starts_on)

    @staticmethod
    def group_by_date(workouts: Iterable[Workout]) -> Dict[datetime.date, List[Workout]]:
        buckets: Dict[datetime.date, List[Workout]] = OrderedDict()
        for w in workouts:
            buckets.setdefault(w.date, []).append(w)
        return buckets

    @staticmethod
    def group_by_month(workouts: Iterable[Workout]) -> Dict[str, List[Workout]]:
        buckets: Dict[str, List[Workout]] = OrderedDict()
        for w in workouts:
            buckets.setdefault(CalendarTools.month_key(w.date), []).append(w)
        return buckets
