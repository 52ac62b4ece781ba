from __future__ import annotations

import datetime
import logging
from typing import List, Optional

from algorithms import CalendarTools
from client import MomentumClient
from models import DayOfWeek, Workout
from workout_form import WorkoutForm

logger = logging.getLogger(__name__)


class WorkoutService:
    """Create, browse, copy and delete logged workouts."""

    def __init__(self, client: MomentumClient) -> None:
        self.client = client

    def list_month(self, month_key: str) -> List[Workout]:
        start, end = CalendarTools.month_bounds(month_key)
        workouts = self.client.get_workouts_by_date_range(start, end)
        return sorted(workouts, key=lambda w: w.date, reverse=True)

    def get(self, workout_id: str) -> Workout:
        return self.client.get_workout(workout_id)

    def save(self, form: WorkoutForm) -> Workout:
        if not form.is_valid():
            raise ValueError("Please fill in all required fields")
        saved = self.client.create_workout(form.workout)
        logger.info("Saved workout %s for %s", saved.id, saved.date)
        return saved

    def update(self, form: WorkoutForm) -> Workout:
        """Save an edited workout; the form must come from a stored one."""
        if not form.workout.id:
            raise ValueError("workout has no id")
        if not form.is_valid():
            raise ValueError("Please fill in all required fields")
        updated = self.client.update_workout(form.workout.id, form.workout)
        logger.info("Updated workout %s", updated.id)
        return updated

    def copy_to(self, workout_id: str, target_date: datetime.date | str) -> Workout:
        return self.client.copy_workout(workout_id, CalendarTools.parse_date(target_date))

    def by_day(self, day: DayOfWeek | str) -> List[Workout]:
        """Workouts logged on weekday ``day``, newest first."""
        return sorted(self.client.get_workouts_by_day(day), key=lambda w: w.date, reverse=True)

    def delete(self, workout_id: str) -> None:
        self.client.delete_workout(workout_id)
        logger.info("Deleted workout %s", workout_id)

    def previous_for(self, form: WorkoutForm) -> Optional[Workout]:
        """Last workout on the same weekday before the form's date."""
        return self.client.get_previous_by_day_of_week(form.day_of_week, form.date)
