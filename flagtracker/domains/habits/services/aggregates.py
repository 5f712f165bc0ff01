"""Per-day rollups over the log collection."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from flagtracker.domains.habits.models.habit_models import Habit, HabitType, Log


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, unlike ``round``."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def todays_logs(logs: Iterable[Log], today: date) -> List[Log]:
    today_str = today.isoformat()
    return [log for log in logs if log.date == today_str]


def value_for(habit: Habit, today_logs: Iterable[Log]):
    log = next((log for log in today_logs if log.habit_id == habit.id), None)
    return log.value if log else 0


def is_complete(habit: Habit, value) -> bool:
    return value >= habit.goal


def progress_percent(habit: Habit, value) -> float:
    return min(value / habit.goal * 100, 100)


def completion_percentage(habits: List[Habit], today_logs: List[Log]) -> int:
    """Share of today's goals met, 0-100.

    Non-boolean habits earn partial credit for partial progress; a boolean
    habit counts only once complete.
    """
    if not habits:
        return 0
    completed = 0.0
    all_complete = True
    for habit in habits:
        value = value_for(habit, today_logs)
        if is_complete(habit, value):
            completed += 1
            continue
        all_complete = False
        if value > 0 and habit.type != HabitType.BOOLEAN:
            completed += min(value / habit.goal, 1)
    percent = round_half_up(completed / len(habits) * 100)
    # near-complete partial credit must not round up to a full day
    return percent if all_complete else min(percent, 99)


def check_in_step(habit: Habit) -> int:
    return 5 if habit.type == HabitType.DURATION else 1
