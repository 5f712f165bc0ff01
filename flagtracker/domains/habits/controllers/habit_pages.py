"""Habit HTML pages and form posts."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from pydantic import ValidationError

from flagtracker.core.insights.client import InsightError
from flagtracker.core.insights.controllers import get_client, get_slot
from flagtracker.core.insights.services import request_insight
from flagtracker.domains.habits.models.habit_models import TYPE_DEFAULTS, HabitType
from flagtracker.domains.habits.schemas.habit_schemas import HabitCreate, LogUpdate
from flagtracker.domains.habits.services import get_store
from flagtracker.domains.habits.services.summaries import (
    analytics_summary,
    badge_summary,
    dashboard_summary,
    normalize_range,
)
from flagtracker.domains.habits.services.trends import window_bounds

logger = logging.getLogger(__name__)

habit_pages_bp = Blueprint("habit_pages", __name__)


def _selected_range() -> str:
    return normalize_range(request.values.get("range"), current_app.config.get("DEFAULT_RANGE", "week"))


@habit_pages_bp.get("/")
def index():
    return redirect(url_for("habit_pages.dashboard"))


@habit_pages_bp.get("/dashboard")
def dashboard():
    store = get_store()
    habits, logs = store.snapshot()
    return render_template(
        "dashboard.html",
        active="dashboard",
        summary=dashboard_summary(habits, logs, store.today()),
    )


@habit_pages_bp.get("/checkin")
def checkin():
    store = get_store()
    habits, logs = store.snapshot()
    return render_template(
        "checkin.html",
        active="checkin",
        summary=dashboard_summary(habits, logs, store.today()),
    )


@habit_pages_bp.post("/checkin/<habit_id>")
def checkin_update(habit_id: str):
    store = get_store()
    action = request.form.get("action", "")
    if action == "inc":
        store.step_log(habit_id, 1)
    elif action == "dec":
        store.step_log(habit_id, -1)
    elif action == "toggle":
        store.toggle_log(habit_id)
    elif action == "set":
        try:
            data = LogUpdate.model_validate({"value": request.form.get("value", "")})
        except ValidationError:
            flash("Please enter a number of zero or more.", "error")
        else:
            store.update_log(habit_id, data.value)
    else:
        logger.debug("Ignoring unknown check-in action %r", action)
    return redirect(url_for("habit_pages.checkin"))


@habit_pages_bp.get("/analytics")
def analytics():
    store = get_store()
    habits, logs = store.snapshot()
    range_name = _selected_range()
    return render_template(
        "analytics.html",
        active="analytics",
        analytics=analytics_summary(habits, logs, store.today(), range_name),
        badges=badge_summary(habits, logs),
        insight=get_slot().state,
    )


@habit_pages_bp.post("/analytics/insight")
def analytics_insight():
    store = get_store()
    habits, logs = store.snapshot()
    range_name = _selected_range()
    start, end = window_bounds(range_name, store.today())
    try:
        request_insight(get_slot(), get_client(), habits, logs, start, end)
    except InsightError:
        # the slot already carries the message shown on the page
        pass
    return redirect(url_for("habit_pages.analytics", range=range_name))


@habit_pages_bp.get("/settings")
def settings():
    return render_template(
        "settings.html",
        active="settings",
        habits=get_store().habits,
        habit_types=list(HabitType),
        type_defaults=TYPE_DEFAULTS,
    )


@habit_pages_bp.post("/settings/habits")
def settings_create_habit():
    form = {key: value.strip() for key, value in request.form.items() if value and value.strip()}
    if not form.get("name"):
        return redirect(url_for("habit_pages.settings"))
    try:
        data = HabitCreate.model_validate(form)
    except ValidationError:
        flash("Could not add the habit, please check the goal and type.", "error")
        return redirect(url_for("habit_pages.settings"))
    get_store().create_habit(**data.model_dump())
    return redirect(url_for("habit_pages.settings"))


@habit_pages_bp.post("/settings/habits/<habit_id>/delete")
def settings_delete_habit(habit_id: str):
    get_store().delete_habit(habit_id)
    return redirect(url_for("habit_pages.settings"))
