"""Tests for the habit store: creation defaults, deletion and log writes."""

import threading
import time
from datetime import date
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from flagtracker.core.storage.services import KeyValueGateway
from flagtracker.domains.habits.models.habit_models import PRESET_HABITS, HabitType
from flagtracker.domains.habits import services as habit_services
from flagtracker.domains.habits.services import HabitStore


class TestLoading:
    def test_presets_when_nothing_stored(self, store):
        assert store.habits == PRESET_HABITS
        assert store.logs == []

    def test_state_survives_a_new_store(self, app, store):
        store.update_log("2", 5)
        fresh = HabitStore(KeyValueGateway(), store.habits_key, store.logs_key, clock=store.clock)
        assert fresh.logs == store.logs
        assert fresh.habits == store.habits

    def test_reload_reads_from_storage(self, store):
        store.create_habit(name="Stretch")
        store.reload()
        assert store.habits[-1].name == "Stretch"


class TestCreateHabit:
    def test_defaults_for_count(self, store):
        habit = store.create_habit(name="  Push-ups  ")
        assert habit.name == "Push-ups"
        assert habit.type == HabitType.COUNT
        assert habit.goal == 10
        assert habit.unit == "times"
        assert habit.icon == "🎯"
        assert habit.color == "blue"
        assert store.habits[-1] == habit

    def test_defaults_for_duration(self, store):
        habit = store.create_habit(name="Yoga", type=HabitType.DURATION)
        assert (habit.goal, habit.unit) == (10, "mins")

    def test_boolean_goal_is_forced(self, store):
        habit = store.create_habit(name="Vitamins", type=HabitType.BOOLEAN, goal=5)
        assert habit.goal == 1
        assert habit.unit == "done"

    def test_explicit_values_are_kept(self, store):
        habit = store.create_habit(
            name="Cycling", type=HabitType.DURATION, icon="🚴", goal=60, unit="mins", color="green"
        )
        assert (habit.icon, habit.goal, habit.unit, habit.color) == ("🚴", 60, "mins", "green")

    def test_empty_name_is_a_no_op(self, store):
        before = store.habits
        assert store.create_habit(name="   ") is None
        assert store.habits == before

    def test_ids_are_unique(self, store):
        first = store.create_habit(name="A")
        second = store.create_habit(name="B")
        assert first.id != second.id
        assert first.id.isdigit()


class TestDeleteHabit:
    def test_delete_keeps_logs(self, store):
        store.update_log("1", 30)
        assert store.delete_habit("1") is True
        assert store.get_habit("1") is None
        assert [log.habit_id for log in store.logs] == ["1"]

    def test_delete_unknown(self, store):
        assert store.delete_habit("missing") is False


class TestLogs:
    def test_update_log_replaces_same_day(self, store):
        store.update_log("2", 5)
        store.update_log("2", 12)
        logs = store.logs
        assert len(logs) == 1
        assert logs[0].value == 12
        assert logs[0].date == "2024-01-10"

    def test_update_log_other_day_appends(self, store):
        store.update_log("2", 5)
        store.update_log("2", 7, logged_date=date(2024, 1, 9))
        assert len(store.logs) == 2

    def test_unknown_habit_is_accepted(self, store):
        log = store.update_log("ghost", 3)
        assert log.habit_id == "ghost"

    def test_step_log_uses_type_step_and_floors_at_zero(self, store):
        assert store.step_log("1", 1).value == 5  # duration
        assert store.step_log("2", 1).value == 1  # count
        assert store.step_log("2", -1).value == 0
        assert store.step_log("2", -1).value == 0
        assert store.step_log("missing", 1) is None

    def test_toggle_log(self, store):
        habit = store.create_habit(name="Meditate", type=HabitType.BOOLEAN)
        assert store.toggle_log(habit.id).value == 1
        assert store.toggle_log(habit.id).value == 0

    def test_todays_logs(self, store):
        store.update_log("2", 5)
        store.update_log("2", 7, logged_date=date(2024, 1, 9))
        assert [log.value for log in store.todays_logs()] == [5]

    def test_reset(self, store):
        store.create_habit(name="Extra")
        store.update_log("2", 5)
        store.reset()
        assert store.habits == PRESET_HABITS
        assert store.logs == []


class TestConcurrentCheckIns:
    """Read-modify-write check-ins must not lose updates across request threads."""

    def _run_in_threads(self, app, target, count=2):
        errors = []

        def worker():
            with app.app_context():
                try:
                    target()
                except Exception as exc:  # surfaced through the assertion below
                    errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)
        assert errors == []

    def _slow_value_for(self):
        original = habit_services.value_for

        def slow(habit, logs):
            value = original(habit, logs)
            time.sleep(0.2)
            return value

        return patch.object(habit_services, "value_for", side_effect=slow)

    def test_parallel_increments_both_count(self, app, store):
        store.logs  # load before the threads start
        with self._slow_value_for():
            self._run_in_threads(app, lambda: store.step_log("2", 1))
        assert [log.value for log in store.todays_logs()] == [2]

    def test_parallel_toggles_cancel_out(self, app, store):
        habit = store.create_habit(name="Stretch", type=HabitType.BOOLEAN)
        with self._slow_value_for():
            self._run_in_threads(app, lambda: store.toggle_log(habit.id))
        assert [log.value for log in store.todays_logs()] == [0]
