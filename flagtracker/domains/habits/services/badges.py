"""Achievement badges evaluated from the full habit/log history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List

from flagtracker.domains.habits.models.habit_models import Habit, HabitType, Log

SECONDS_PER_DAY = 86400

STREAK_3_STEPS = 2
STREAK_7_STEPS = 6
DURATION_THRESHOLD = 120
COUNT_THRESHOLD = 50


class BadgeKind(str, Enum):
    STREAK_3 = "streak_3"
    STREAK_7 = "streak_7"
    VOLUME_DURATION = "volume_duration"
    VOLUME_COUNT = "volume_count"


@dataclass(frozen=True)
class BadgeDefinition:
    kind: BadgeKind
    name: str
    description: str
    icon: str

    @property
    def id(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class BadgeStatus:
    badge: BadgeDefinition
    unlocked: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.badge.id,
            "name": self.badge.name,
            "description": self.badge.description,
            "icon": self.badge.icon,
            "unlocked": self.unlocked,
        }


BADGES: List[BadgeDefinition] = [
    BadgeDefinition(BadgeKind.STREAK_3, "Rising Star", "Any habit completed 3 days in a row", "🌱"),
    BadgeDefinition(BadgeKind.STREAK_7, "Habit Master", "Any habit completed 7 days in a row", "🔥"),
    BadgeDefinition(BadgeKind.VOLUME_DURATION, "Endurance", "At least 120 minutes logged in total", "🏃"),
    BadgeDefinition(BadgeKind.VOLUME_COUNT, "Bookworm", "At least 50 counted repetitions in total", "📚"),
]


def day_gap(earlier: str, later: str) -> int:
    """Whole days between two ISO dates, rounded rather than floored."""
    delta = datetime.fromisoformat(later) - datetime.fromisoformat(earlier)
    return round(delta.total_seconds() / SECONDS_PER_DAY)


def _qualifying_dates(habit: Habit, logs: Iterable[Log]) -> List[str]:
    return sorted(log.date for log in logs if log.habit_id == habit.id and log.value >= habit.goal)


def has_streak(habits: List[Habit], logs: List[Log], steps: int) -> bool:
    """True once any habit chains ``steps`` consecutive one-day gaps."""
    for habit in habits:
        dates = _qualifying_dates(habit, logs)
        streak = 0
        for current, following in zip(dates, dates[1:]):
            if day_gap(current, following) == 1:
                streak += 1
                if streak >= steps:
                    return True
            else:
                streak = 0
    return False


def longest_streak(habit: Habit, logs: List[Log]) -> int:
    dates = _qualifying_dates(habit, logs)
    if not dates:
        return 0
    best = run = 1
    for current, following in zip(dates, dates[1:]):
        run = run + 1 if day_gap(current, following) == 1 else 1
        best = max(best, run)
    return best


def total_for_type(habits: List[Habit], logs: List[Log], habit_type: HabitType):
    habit_ids = {habit.id for habit in habits if habit.type == habit_type}
    return sum(log.value for log in logs if log.habit_id in habit_ids)


def is_unlocked(kind: BadgeKind, habits: List[Habit], logs: List[Log]) -> bool:
    if kind == BadgeKind.STREAK_3:
        return has_streak(habits, logs, STREAK_3_STEPS)
    if kind == BadgeKind.STREAK_7:
        return has_streak(habits, logs, STREAK_7_STEPS)
    if kind == BadgeKind.VOLUME_DURATION:
        return total_for_type(habits, logs, HabitType.DURATION) >= DURATION_THRESHOLD
    if kind == BadgeKind.VOLUME_COUNT:
        return total_for_type(habits, logs, HabitType.COUNT) >= COUNT_THRESHOLD
    raise ValueError(f"unknown badge: {kind}")


def evaluate_badges(habits: List[Habit], logs: List[Log]) -> List[BadgeStatus]:
    return [BadgeStatus(badge, is_unlocked(badge.kind, habits, logs)) for badge in BADGES]
