"""Habit and log records persisted as JSON in the key-value store."""

from __future__ import annotations

from datetime import date as calendar_date
from enum import Enum
from typing import Dict, List, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    TypeAdapter,
    field_validator,
)

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class HabitType(str, Enum):
    BOOLEAN = "boolean"
    COUNT = "count"
    DURATION = "duration"


class Habit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    type: HabitType
    goal: Union[PositiveInt, PositiveFloat]
    unit: str
    color: str


class Log(BaseModel):
    """One day's recorded value for one habit.

    ``date`` stays a zero-padded ISO string so lexical comparison matches
    chronological order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    habit_id: str = Field(alias="habitId")
    date: str = Field(pattern=ISO_DATE_PATTERN)
    value: Union[NonNegativeInt, NonNegativeFloat]

    @field_validator("date")
    @classmethod
    def _real_calendar_day(cls, value: str) -> str:
        # the pattern alone lets through days like 2024-02-30
        calendar_date.fromisoformat(value)
        return value


HabitList = TypeAdapter(List[Habit])
LogList = TypeAdapter(List[Log])

DEFAULT_ICON = "🎯"
DEFAULT_COLOR = "blue"

# (goal, unit) applied when a habit is created without explicit values
TYPE_DEFAULTS: Dict[HabitType, Tuple[int, str]] = {
    HabitType.BOOLEAN: (1, "done"),
    HabitType.COUNT: (10, "times"),
    HabitType.DURATION: (10, "mins"),
}

PRESET_HABITS: List[Habit] = [
    Habit(id="1", name="Swimming", icon="🏊", type=HabitType.DURATION, goal=45, unit="mins", color="blue"),
    Habit(id="2", name="Reading", icon="📚", type=HabitType.COUNT, goal=20, unit="pages", color="yellow"),
    Habit(id="3", name="Water", icon="💧", type=HabitType.COUNT, goal=8, unit="cups", color="cyan"),
    Habit(id="4", name="Sleep", icon="😴", type=HabitType.DURATION, goal=8, unit="hours", color="indigo"),
    Habit(id="5", name="Running", icon="🏃", type=HabitType.DURATION, goal=30, unit="mins", color="red"),
]


def dump_habits(habits: List[Habit]) -> list:
    return HabitList.dump_python(habits, mode="json")


def dump_logs(logs: List[Log]) -> list:
    return LogList.dump_python(logs, mode="json", by_alias=True)
