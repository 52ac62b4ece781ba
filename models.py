from __future__ import annotations

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class MuscleGroup(str, Enum):
    CHEST = "CHEST"
    BACK = "BACK"
    SHOULDERS = "SHOULDERS"
    ARMS = "ARMS"
    LEGS = "LEGS"
    CORE = "CORE"
    FULL_BODY = "FULL_BODY"
    CARDIO = "CARDIO"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def for_date(cls, day: datetime.date) -> "DayOfWeek":
        return list(cls)[day.weekday()]

    @property
    def position(self) -> int:
        """Position in the week, Monday being 0 like ``date.weekday()``."""
        return list(DayOfWeek).index(self)


class TemplateType(str, Enum):
    SYSTEM = "SYSTEM"
    CUSTOM = "CUSTOM"


class WireModel(BaseModel):
    """Base for records exchanged with the API in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class User(WireModel):
    id: str
    username: str
    email: str
    weight: Optional[float] = None
    height: Optional[float] = None


class AuthResponse(WireModel):
    token: str
    user: User


class Exercise(WireModel):
    id: str
    name: str
    muscle_group: MuscleGroup = MuscleGroup.OTHER
    description: str = ""
    requires_weight: bool = True
    user_id: Optional[str] = None


class ExerciseSet(WireModel):
    """A single set. Fields stay ``None`` until entered on a form."""

    reps: Optional[int] = None
    weight: Optional[float] = None


class WorkoutExercise(WireModel):
    exercise_id: str = ""
    name: Optional[str] = None
    sets: List[ExerciseSet] = Field(default_factory=list)


class Workout(WireModel):
    id: Optional[str] = None
    date: datetime.date
    user_id: Optional[str] = None
    exercises: List[WorkoutExercise] = Field(default_factory=list)

    @computed_field(alias="dayOfWeek")
    @property
    def day_of_week(self) -> DayOfWeek:
        """Always derived from ``date``; a ``dayOfWeek`` on input is ignored."""
        return DayOfWeek.for_date(self.date)


class TemplateExercise(WireModel):
    name: str
    muscle_group: MuscleGroup = MuscleGroup.OTHER
    description: str = ""
    requires_weight: bool = True
    recommended_sets: int = 3
    recommended_reps_range: str = "8-12"


class TemplateDay(WireModel):
    name: str
    exercises: List[TemplateExercise] = Field(default_factory=list)


class Template(WireModel):
    id: Optional[str] = None
    name: str
    description: str = ""
    type: Optional[TemplateType] = None
    user_id: Optional[str] = None
    days: List[TemplateDay] = Field(default_factory=list)


class VolumeDataPoint(WireModel):
    date: datetime.date
    volume: float


class MonthlyVolume(WireModel):
    month: str
    volume: float


class WeekBounds(WireModel):
    start: datetime.date
    end: datetime.date

    def contains(self, day: datetime.date) -> bool:
        return self.start <= day <= self.end
