"""Habit DTOs and schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    field_validator,
)

from flagtracker.domains.habits.models.habit_models import HabitType


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: HabitType = HabitType.COUNT
    icon: Optional[str] = Field(default=None, max_length=16)
    goal: Optional[Union[PositiveInt, PositiveFloat]] = None
    unit: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("goal", mode="before")
    @classmethod
    def zero_goal_means_default(cls, value):
        # a blank or zero goal falls back to the per-type default
        if value in ("", None):
            return None
        try:
            return None if float(value) == 0 else value
        except (TypeError, ValueError):
            return value


class LogUpdate(BaseModel):
    value: Union[NonNegativeInt, NonNegativeFloat]


class HabitProgressResponse(BaseModel):
    id: str
    name: str
    icon: str
    type: HabitType
    goal: float
    unit: str
    color: str
    value: float
    completed: bool
    progress: float
    step: int


class DashboardResponse(BaseModel):
    date: str
    completion: int
    completed_count: int
    total: int
    habits: List[HabitProgressResponse]


class TrendPoint(BaseModel):
    date: str
    label: str
    rate: int


class DistributionItem(BaseModel):
    habit_id: str
    name: str
    minutes: float
    color: str


class StreakItem(BaseModel):
    habit_id: str
    name: str
    icon: str
    longest: int


class AnalyticsResponse(BaseModel):
    range: str
    start: str
    end: str
    average: int
    trend: List[TrendPoint]
    distribution: List[DistributionItem]
    streaks: List[StreakItem]
