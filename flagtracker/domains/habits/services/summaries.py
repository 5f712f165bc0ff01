"""View models shared by the pages, the JSON API and the CLI."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from flagtracker.domains.habits.models.habit_models import Habit, Log
from flagtracker.domains.habits.services.aggregates import (
    check_in_step,
    completion_percentage,
    is_complete,
    progress_percent,
    todays_logs,
    value_for,
)
from flagtracker.domains.habits.services.badges import evaluate_badges, longest_streak
from flagtracker.domains.habits.services.trends import (
    RANGES,
    average_rate,
    completion_trend,
    duration_distribution,
    window_bounds,
)


def normalize_range(range_name: Optional[str], default: str = "week") -> str:
    value = (range_name or "").strip().lower()
    return value if value in RANGES else default


def dashboard_summary(habits: List[Habit], logs: List[Log], today: date) -> Dict[str, object]:
    today_items = todays_logs(logs, today)
    rows = []
    for habit in habits:
        value = value_for(habit, today_items)
        rows.append(
            {
                "id": habit.id,
                "name": habit.name,
                "icon": habit.icon,
                "type": habit.type.value,
                "goal": habit.goal,
                "unit": habit.unit,
                "color": habit.color,
                "value": value,
                "completed": is_complete(habit, value),
                "progress": progress_percent(habit, value),
                "step": check_in_step(habit),
            }
        )
    return {
        "date": today.isoformat(),
        "completion": completion_percentage(habits, today_items),
        "completed_count": sum(1 for row in rows if row["completed"]),
        "total": len(habits),
        "habits": rows,
    }


def analytics_summary(
    habits: List[Habit], logs: List[Log], today: date, range_name: str = "week"
) -> Dict[str, object]:
    start, end = window_bounds(range_name, today)
    trend = completion_trend(habits, logs, start, end, range_name)
    return {
        "range": range_name,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "average": average_rate(trend),
        "trend": trend,
        "distribution": duration_distribution(habits, logs, start, end),
        "streaks": [
            {
                "habit_id": habit.id,
                "name": habit.name,
                "icon": habit.icon,
                "longest": longest_streak(habit, logs),
            }
            for habit in habits
        ],
    }


def badge_summary(habits: List[Habit], logs: List[Log]) -> List[Dict[str, object]]:
    return [status.to_dict() for status in evaluate_badges(habits, logs)]
