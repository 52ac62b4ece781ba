import calendar
import datetime
from typing import List, Tuple, Union

from models import DayOfWeek, WeekBounds

DateLike = Union[datetime.date, datetime.datetime, str]


class CalendarTools:
    """Date helpers for week, month and day-range windows."""

    @staticmethod
    def parse_date(value: DateLike) -> datetime.date:
        """Return ``value`` as a ``date``; ISO strings may carry a time part."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        return datetime.date.fromisoformat(str(value)[:10])

    @staticmethod
    def weekly_bounds(
        reference: DateLike,
        week_starts_on: Union[DayOfWeek, int] = DayOfWeek.MONDAY,
    ) -> WeekBounds:
        """Return the inclusive 7-day week containing ``reference``."""
        day = CalendarTools.parse_date(reference)
        if isinstance(week_starts_on, DayOfWeek):
            first = week_starts_on.position
        else:
            first = int(week_starts_on) % 7
        offset = (day.weekday() - first) % 7
        start = day - datetime.timedelta(days=offset)
        return WeekBounds(start=start, end=start + datetime.timedelta(days=6))

    @staticmethod
    def month_key(value: DateLike) -> str:
        day = CalendarTools.parse_date(value)
        return f"{day.year:04d}-{day.month:02d}"

    @staticmethod
    def _split_key(key: str) -> Tuple[int, int]:
        year, month = key.split("-")[:2]
        return int(year), int(month)

    @staticmethod
    def month_bounds(key: str) -> Tuple[datetime.date, datetime.date]:
        """Return the first and last day of the month ``YYYY-MM``."""
        year, month = CalendarTools._split_key(key)
        last = calendar.monthrange(year, month)[1]
        return datetime.date(year, month, 1), datetime.date(year, month, last)

    @staticmethod
    def month_label(key: str) -> str:
        year, month = CalendarTools._split_key(key)
        return f"{calendar.month_abbr[month]} {year}"

    @staticmethod
    def recent_month_keys(reference: DateLike, count: int) -> List[str]:
        """Return ``count`` month keys ending at ``reference``, newest first."""
        day = CalendarTools.parse_date(reference)
        keys: list[str] = []
        for i in range(max(count, 0)):
            index = day.year * 12 + (day.month - 1) - i
            keys.append(f"{index // 12:04d}-{index % 12 + 1:02d}")
        return keys

    @staticmethod
    def day_range(start: DateLike, end: DateLike) -> List[datetime.date]:
        """Ascending list of every day from ``start`` to ``end`` inclusive."""
        first = CalendarTools.parse_date(start)
        last = CalendarTools.parse_date(end)
        days = (last - first).days
        return [first + datetime.timedelta(days=i) for i in range(days + 1)]

    @staticmethod
    def trailing_days(end: DateLike, days: int) -> List[datetime.date]:
        """Window from ``days`` days before ``end`` up to ``end``."""
        last = CalendarTools.parse_date(end)
        return CalendarTools.day_range(last - datetime.timedelta(days=days), last)
