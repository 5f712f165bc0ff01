"""Tests for the ``flask habits`` commands."""

import pytest

pytestmark = pytest.mark.integration

from flagtracker.domains.habits.models.habit_models import PRESET_HABITS


def test_reset_restores_presets(app, store):
    store.create_habit(name="Extra")
    store.update_log("1", 30)

    result = app.test_cli_runner().invoke(args=["habits", "reset", "--yes"])

    assert result.exit_code == 0
    assert "reset" in result.output
    assert store.habits == PRESET_HABITS
    assert store.logs == []


def test_reset_aborts_without_confirmation(app, store):
    store.update_log("1", 30)
    result = app.test_cli_runner().invoke(args=["habits", "reset"], input="n\n")
    assert result.exit_code != 0
    assert len(store.logs) == 1


def test_summary_week(app, store):
    store.update_log("3", 8)
    result = app.test_cli_runner().invoke(args=["habits", "summary"])

    assert result.exit_code == 0
    assert "Today (2024-01-10): 20% (1/5 habits complete)" in result.output
    assert "Rising Star (locked)" in result.output
    assert "2024-01-08 to 2024-01-14" in result.output


def test_summary_month(app, store):
    result = app.test_cli_runner().invoke(args=["habits", "summary", "--range", "month"])
    assert result.exit_code == 0
    assert "2024-01-01 to 2024-01-31" in result.output
