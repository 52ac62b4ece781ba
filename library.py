from __future__ import annotations

import logging
from typing import Iterable, List

from client import MomentumClient
from models import Exercise, MuscleGroup
from validation import exercise_errors

logger = logging.getLogger(__name__)

ALL_GROUPS = "ALL"


def filter_exercises(
    exercises: Iterable[Exercise], muscle_group: str = ALL_GROUPS, query: str = ""
) -> List[Exercise]:
    """Filter by muscle group tab, then by name or description substring."""
    result = list(exercises)
    if muscle_group and muscle_group != ALL_GROUPS:
        group = MuscleGroup(muscle_group)
        result = [e for e in result if e.muscle_group == group]
    if query:
        q = query.lower()
        result = [
            e for e in result if q in e.name.lower() or q in (e.description or "").lower()
        ]
    return result


def search_exercises(exercises: Iterable[Exercise], query: str) -> List[Exercise]:
    """Match ``query`` against name, muscle group or description."""
    if not query:
        return list(exercises)
    q = query.lower()
    return [
        e
        for e in exercises
        if q in e.name.lower()
        or q in e.muscle_group.value.lower()
        or q in (e.description or "").lower()
    ]


class ExerciseLibrary:
    """Exercise catalogue backed by the API."""

    def __init__(self, client: MomentumClient) -> None:
        self.client = client

    def all(self) -> List[Exercise]:
        return self.client.get_exercises()

    def by_muscle_group(self, muscle_group: str) -> List[Exercise]:
        return self.client.get_exercises_by_muscle_group(muscle_group)

    def create(
        self,
        name: str,
        muscle_group: str,
        description: str = "",
        requires_weight: bool = True,
    ) -> List[Exercise]:
        errors = exercise_errors(name, muscle_group)
        if errors:
            raise ValueError("; ".join(errors.values()))
        self.client.create_exercise(name.strip(), muscle_group, description, requires_weight)
        logger.info("Created exercise %s", name)
        return self.all()

    def initialize_defaults(self) -> List[Exercise]:
        self.client.initialize_exercises()
        logger.info("Default exercises initialized")
        return self.all()
