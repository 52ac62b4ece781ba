from __future__ import annotations

import datetime

from algorithms import CalendarTools

KG_TO_LB = 2.20462


def lb_to_kg(lb: float) -> float:
    return round(lb / KG_TO_LB, 2)


def format_volume(volume: float, unit: str = "lb") -> str:
    """Render a volume stored in pounds, e.g. ``1,550 lbs``."""
    if unit == "kg":
        value = lb_to_kg(volume)
        suffix = "kg"
    else:
        value = volume
        suffix = "lbs"
    if float(value).is_integer():
        return f"{int(value):,} {suffix}"
    return f"{value:,.2f} {suffix}"


def format_workout_date(value: datetime.date | str) -> str:
    day = CalendarTools.parse_date(value)
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_short_date(value: datetime.date | str) -> str:
    day = CalendarTools.parse_date(value)
    return f"{day:%b} {day.day}"
