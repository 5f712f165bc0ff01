"""Time-bucketed series for the analytics view."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Dict, List, Tuple

from flagtracker.domains.habits.models.habit_models import Habit, HabitType, Log
from flagtracker.domains.habits.services.aggregates import round_half_up

RANGES = ("week", "month")


def window_bounds(range_name: str, today: date) -> Tuple[date, date]:
    """Monday-Sunday week or calendar month containing ``today``."""
    if range_name == "week":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if range_name == "month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    raise ValueError(f"unknown range: {range_name}")


def days_between(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def _label(day: date, range_name: str) -> str:
    return day.strftime("%a") if range_name == "week" else str(day.day)


def completion_trend(
    habits: List[Habit],
    logs: List[Log],
    start: date,
    end: date,
    range_name: str = "week",
) -> List[Dict[str, object]]:
    values: Dict[Tuple[str, str], object] = {}
    for log in logs:
        values.setdefault((log.habit_id, log.date), log.value)
    points = []
    for day in days_between(start, end):
        day_str = day.isoformat()
        completed = sum(
            1 for habit in habits if values.get((habit.id, day_str), 0) >= habit.goal
        )
        rate = round_half_up(completed / len(habits) * 100) if habits else 0
        points.append({"date": day_str, "label": _label(day, range_name), "rate": rate})
    return points


def average_rate(trend: List[Dict[str, object]]) -> int:
    if not trend:
        return 0
    return round_half_up(sum(point["rate"] for point in trend) / len(trend))


def duration_distribution(
    habits: List[Habit],
    logs: List[Log],
    start: date,
    end: date,
) -> List[Dict[str, object]]:
    start_str, end_str = start.isoformat(), end.isoformat()
    items = []
    for habit in habits:
        if habit.type != HabitType.DURATION:
            continue
        total = sum(
            log.value
            for log in logs
            if log.habit_id == habit.id and start_str <= log.date <= end_str
        )
        if total > 0:
            items.append(
                {"habit_id": habit.id, "name": habit.name, "minutes": total, "color": habit.color}
            )
    return items
