"""Habit services: the in-memory habit/log collections and their mutations.

The store is the only writer of both collections. Every mutation is mirrored
to the key-value gateway; reads are served from memory.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from threading import Lock
from typing import Callable, List, Optional, Tuple

from flask import current_app

from flagtracker.core.storage.services import KeyValueGateway
from flagtracker.domains.habits.models.habit_models import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    PRESET_HABITS,
    TYPE_DEFAULTS,
    Habit,
    HabitList,
    HabitType,
    Log,
    LogList,
    dump_habits,
    dump_logs,
)
from flagtracker.domains.habits.services.aggregates import check_in_step, todays_logs, value_for

logger = logging.getLogger(__name__)


class HabitStore:
    def __init__(
        self,
        gateway: KeyValueGateway,
        habits_key: str = "flagtracker_habits",
        logs_key: str = "flagtracker_logs",
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.gateway = gateway
        self.habits_key = habits_key
        self.logs_key = logs_key
        self.clock = clock
        self._lock = Lock()
        self._habits: Optional[List[Habit]] = None
        self._logs: Optional[List[Log]] = None

    # ---- loading ----

    def _ensure_loaded(self) -> None:
        if self._habits is None:
            self._habits = self.gateway.load(
                self.habits_key, list(PRESET_HABITS), HabitList.validate_python
            )
        if self._logs is None:
            self._logs = self.gateway.load(self.logs_key, [], LogList.validate_python)

    def reload(self) -> None:
        with self._lock:
            self._habits = None
            self._logs = None
            self._ensure_loaded()

    # ---- reads ----

    @property
    def habits(self) -> List[Habit]:
        self._ensure_loaded()
        return list(self._habits)

    @property
    def logs(self) -> List[Log]:
        self._ensure_loaded()
        return list(self._logs)

    def snapshot(self) -> Tuple[List[Habit], List[Log]]:
        with self._lock:
            self._ensure_loaded()
            return list(self._habits), list(self._logs)

    def today(self) -> date:
        return self.clock()

    def todays_logs(self) -> List[Log]:
        return todays_logs(self.logs, self.today())

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        return next((habit for habit in self.habits if habit.id == habit_id), None)

    # ---- habit mutations ----

    def _next_id(self) -> str:
        candidate = int(time.time() * 1000)
        taken = {habit.id for habit in self._habits}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def create_habit(
        self,
        *,
        name: str,
        type: HabitType = HabitType.COUNT,
        icon: Optional[str] = None,
        goal: Optional[float] = None,
        unit: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Optional[Habit]:
        """Append a habit; an empty name is ignored and returns ``None``."""
        name_norm = (name or "").strip()
        if not name_norm:
            return None
        habit_type = HabitType(type)
        default_goal, default_unit = TYPE_DEFAULTS[habit_type]
        if habit_type == HabitType.BOOLEAN:
            goal = default_goal
        with self._lock:
            self._ensure_loaded()
            habit = Habit(
                id=self._next_id(),
                name=name_norm,
                icon=(icon or "").strip() or DEFAULT_ICON,
                type=habit_type,
                goal=goal if goal else default_goal,
                unit=(unit or "").strip() or default_unit,
                color=(color or "").strip() or DEFAULT_COLOR,
            )
            self._habits = [*self._habits, habit]
            self._save_habits()
        logger.info("Created habit %s (%s)", habit.id, habit.name)
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        """Remove a habit; its logs stay behind untouched."""
        with self._lock:
            self._ensure_loaded()
            remaining = [habit for habit in self._habits if habit.id != habit_id]
            if len(remaining) == len(self._habits):
                return False
            self._habits = remaining
            self._save_habits()
        logger.info("Deleted habit %s", habit_id)
        return True

    # ---- log mutations ----

    def _upsert_locked(self, habit_id: str, value, day: str) -> Log:
        """Find-or-replace one log; caller holds ``self._lock``."""
        log = Log(habit_id=habit_id, date=day, value=value)
        logs = list(self._logs)
        index = next(
            (i for i, item in enumerate(logs) if item.habit_id == habit_id and item.date == day),
            None,
        )
        if index is None:
            logs.append(log)
        else:
            logs[index] = log
        self._logs = logs
        self._save_logs()
        return log

    def _current_value_locked(self, habit: Habit, day: date):
        return value_for(habit, todays_logs(self._logs, day))

    def update_log(self, habit_id: str, value, logged_date: Optional[date] = None) -> Log:
        """Find-or-replace the log for ``habit_id`` on ``logged_date`` (today by default)."""
        day = (logged_date or self.today()).isoformat()
        with self._lock:
            self._ensure_loaded()
            return self._upsert_locked(habit_id, value, day)

    def step_log(self, habit_id: str, direction: int) -> Optional[Log]:
        """Move today's value one check-in step up or down, never below zero."""
        today = self.today()
        with self._lock:
            self._ensure_loaded()
            habit = next((item for item in self._habits if item.id == habit_id), None)
            if habit is None:
                return None
            current = self._current_value_locked(habit, today)
            step = check_in_step(habit)
            new_value = current + step if direction > 0 else max(0, current - step)
            return self._upsert_locked(habit_id, new_value, today.isoformat())

    def toggle_log(self, habit_id: str) -> Optional[Log]:
        today = self.today()
        with self._lock:
            self._ensure_loaded()
            habit = next((item for item in self._habits if item.id == habit_id), None)
            if habit is None:
                return None
            current = self._current_value_locked(habit, today)
            return self._upsert_locked(habit_id, 1 if current == 0 else 0, today.isoformat())

    def reset(self) -> None:
        """Restore the preset habits and drop every log."""
        with self._lock:
            self._habits = list(PRESET_HABITS)
            self._logs = []
            self._save_habits()
            self._save_logs()
        logger.info("Habit store reset to presets")

    # ---- persistence ----

    def _save_habits(self) -> None:
        self.gateway.save(self.habits_key, dump_habits(self._habits))

    def _save_logs(self) -> None:
        self.gateway.save(self.logs_key, dump_logs(self._logs))


def get_store() -> HabitStore:
    return current_app.extensions["habit_store"]
