"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from flagtracker.core.insights.schemas import RangeQuery
from flagtracker.domains.habits.models.habit_models import dump_habits, dump_logs
from flagtracker.domains.habits.schemas.habit_schemas import (
    AnalyticsResponse,
    DashboardResponse,
    HabitCreate,
    LogUpdate,
)
from flagtracker.domains.habits.services import get_store
from flagtracker.domains.habits.services.summaries import (
    analytics_summary,
    badge_summary,
    dashboard_summary,
)

habit_api_bp = Blueprint("habit_api", __name__)


def _validation_error(exc: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_url=False)}), 400


@habit_api_bp.get("/habits")
def list_habits():
    return jsonify({"ok": True, "habits": dump_habits(get_store().habits)})


@habit_api_bp.post("/habits")
def create_habit():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitCreate.model_validate(payload)
    except ValidationError as exc:
        return _validation_error(exc)
    habit = get_store().create_habit(**data.model_dump())
    if habit is None:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "habit": habit.model_dump(mode="json")}), 201


@habit_api_bp.delete("/habits/<habit_id>")
def delete_habit(habit_id: str):
    if not get_store().delete_habit(habit_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@habit_api_bp.get("/logs")
def list_logs():
    return jsonify({"ok": True, "logs": dump_logs(get_store().logs)})


@habit_api_bp.put("/logs/<habit_id>")
def update_log(habit_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        data = LogUpdate.model_validate(payload)
    except ValidationError as exc:
        return _validation_error(exc)
    log = get_store().update_log(habit_id, data.value)
    return jsonify({"ok": True, "log": log.model_dump(mode="json", by_alias=True)})


@habit_api_bp.get("/dashboard")
def dashboard():
    store = get_store()
    habits, logs = store.snapshot()
    summary = DashboardResponse.model_validate(dashboard_summary(habits, logs, store.today()))
    return jsonify({"ok": True, "dashboard": summary.model_dump(mode="json")})


@habit_api_bp.get("/analytics")
def analytics():
    try:
        query = RangeQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _validation_error(exc)
    store = get_store()
    habits, logs = store.snapshot()
    summary = AnalyticsResponse.model_validate(
        analytics_summary(habits, logs, store.today(), query.range)
    )
    return jsonify({"ok": True, "analytics": summary.model_dump(mode="json")})


@habit_api_bp.get("/badges")
def badges():
    habits, logs = get_store().snapshot()
    return jsonify({"ok": True, "badges": badge_summary(habits, logs)})
