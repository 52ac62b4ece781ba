from __future__ import annotations

import datetime
import logging
import re
from typing import Iterable, List

from client import MomentumClient
from models import Exercise, ExerciseSet, Template, Workout, WorkoutExercise
from algorithms import CalendarTools

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_REPS = 8
_LEADING_INT = re.compile(r"\s*(\d+)")


def parse_reps_range(value: str | None) -> int:
    """Return the lower bound of a reps range such as ``"8-12"``."""
    match = _LEADING_INT.match(value or "")
    if not match or int(match.group(1)) < 1:
        return DEFAULT_TEMPLATE_REPS
    return int(match.group(1))


def workout_from_template(
    template: Template,
    target_date: datetime.date | str,
    library: Iterable[Exercise] = (),
    day_index: int = 0,
) -> Workout:
    """Draft a workout from one template day.

    Template exercises are matched to library exercises by name, ignoring
    case; unmatched entries keep an empty exercise id for the user to pick.
    """
    if not template.days:
        raise ValueError("template has no days")
    if not 0 <= day_index < len(template.days):
        raise ValueError("invalid template day")
    by_name = {e.name.strip().lower(): e for e in library}
    entries = []
    for tex in template.days[day_index].exercises:
        match = by_name.get(tex.name.strip().lower())
        reps = parse_reps_range(tex.recommended_reps_range)
        entries.append(
            WorkoutExercise(
                exercise_id=match.id if match else "",
                name=tex.name,
                sets=[ExerciseSet(reps=reps, weight=0.0) for _ in range(max(tex.recommended_sets, 0))],
            )
        )
    return Workout(date=CalendarTools.parse_date(target_date), exercises=entries)


class TemplateService:
    """Browse, copy and edit workout templates."""

    def __init__(self, client: MomentumClient) -> None:
        self.client = client

    def system(self) -> List[Template]:
        return self.client.get_system_templates()

    def custom(self) -> List[Template]:
        return self.client.get_custom_templates()

    def copy(self, template: Template) -> List[Template]:
        """Copy ``template`` into the user's collection and return it refreshed."""
        if not template.id:
            raise ValueError("template has no id")
        self.client.copy_template(template.id)
        logger.info("Copied template %s", template.name)
        return self.custom()

    def delete(self, template_id: str) -> None:
        self.client.delete_template(template_id)
        logger.info("Deleted template %s", template_id)
