from __future__ import annotations

import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from algorithms import CalendarTools, VolumeAggregator
from client import MomentumClient
from errors import APIError
from models import (
    DayOfWeek,
    Exercise,
    MonthlyVolume,
    VolumeDataPoint,
    Workout,
)

logger = logging.getLogger(__name__)


class ProgressService:
    """Fetch workouts and turn them into progress metrics.

    Each series is built from a single date-range query bucketed on the
    client. A failed fetch is logged and treated as "no workouts", so the
    affected days read as zero volume instead of surfacing an error.
    """

    def __init__(
        self,
        client: MomentumClient,
        week_starts_on: DayOfWeek = DayOfWeek.MONDAY,
        max_workers: int = 8,
    ) -> None:
        self.client = client
        self.week_starts_on = week_starts_on
        self.max_workers = max_workers

    def _fetch_range(self, start: datetime.date, end: datetime.date) -> List[Workout]:
        try:
            return self.client.get_workouts_by_date_range(start, end)
        except APIError as exc:
            logger.warning(
                "Workouts %s..%s unavailable, counting as zero volume: %s",
                start,
                end,
                exc.message,
            )
            return []

    def weekly_summary(self, reference: Optional[datetime.date] = None) -> Dict[str, object]:
        """Return volume, set and workout counts for the week of ``reference``."""
        bounds = CalendarTools.weekly_bounds(
            reference or datetime.date.today(), self.week_starts_on
        )
        workouts = self._fetch_range(bounds.start, bounds.end)
        return {
            "start": bounds.start,
            "end": bounds.end,
            "workouts": workouts,
            "workout_count": len(workouts),
            "volume": VolumeAggregator.total_volume(workouts),
            "sets": VolumeAggregator.total_sets(workouts),
        }

    def daily_series(
        self,
        exercise_id: str,
        end: Optional[datetime.date] = None,
        days: int = 30,
    ) -> List[VolumeDataPoint]:
        dates = CalendarTools.trailing_days(end or datetime.date.today(), days)
        if not dates:
            return []
        workouts = self._fetch_range(dates[0], dates[-1])
        return VolumeAggregator.build_daily_series(
            VolumeAggregator.group_by_date(workouts), exercise_id, dates
        )

    def monthly_series(
        self,
        exercise_id: str,
        months: int = 3,
        reference: Optional[datetime.date] = None,
    ) -> List[MonthlyVolume]:
        """Volume per month for the last ``months`` months, oldest first."""
        keys = CalendarTools.recent_month_keys(reference or datetime.date.today(), months)
        if not keys:
            return []
        start, _ = CalendarTools.month_bounds(keys[-1])
        _, end = CalendarTools.month_bounds(keys[0])
        workouts = self._fetch_range(start, end)
        return VolumeAggregator.build_monthly_series(
            VolumeAggregator.group_by_month(workouts),
            exercise_id,
            keys,
            most_recent_first=True,
        )

    def _volume_or_zero(self, exercise_id: str, day: datetime.date) -> float:
        try:
            return self.client.get_volume(exercise_id, day)
        except APIError as exc:
            logger.warning("Volume for %s on %s unavailable: %s", exercise_id, day, exc.message)
            return 0.0

    def daily_series_per_day(
        self, exercise_id: str, dates: Iterable[datetime.date]
    ) -> List[VolumeDataPoint]:
        """Build the daily series with one volume request per day.

        Requests run concurrently and all are awaited. For backends that
        only expose the per-day volume endpoint.
        """
        days = sorted(CalendarTools.parse_date(d) for d in dates)
        if not days:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            volumes = list(pool.map(lambda d: self._volume_or_zero(exercise_id, d), days))
        return [
            VolumeDataPoint(date=d, volume=v) for d, v in zip(days, volumes) if v
        ]

    def exercise_progress(
        self, exercise_id: str, days: int = 30, end: Optional[datetime.date] = None
    ) -> Dict[str, object]:
        """Exercise record, its series over ``days`` days ending ``end`` and the last point."""
        exercise: Exercise = self.client.get_exercise(exercise_id)
        series = self.daily_series(exercise_id, end=end, days=max(days - 1, 0))
        return {
            "exercise": exercise,
            "series": series,
            "last": series[-1] if series else None,
        }
