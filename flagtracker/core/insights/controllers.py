"""Insights API endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from flagtracker.core.insights.client import (
    ChatCompletionClient,
    InsightError,
    MissingCredentialError,
)
from flagtracker.core.insights.schemas import InsightResponse, RangeQuery
from flagtracker.core.insights.services import InsightSlot, USER_ERROR, period_label, request_insight
from flagtracker.domains.habits.services import get_store
from flagtracker.domains.habits.services.trends import window_bounds

insights_api_bp = Blueprint("insights_api", __name__)


def get_slot() -> InsightSlot:
    return current_app.extensions["insight_slot"]


def get_client() -> ChatCompletionClient:
    return ChatCompletionClient.from_config(current_app.config)


@insights_api_bp.post("")
def create_insight():
    try:
        query = RangeQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors()}), 400
    store = get_store()
    habits, logs = store.snapshot()
    start, end = window_bounds(query.range, store.today())
    try:
        content = request_insight(get_slot(), get_client(), habits, logs, start, end)
    except MissingCredentialError:
        return jsonify({"ok": False, "error": "insight_not_configured", "message": USER_ERROR}), 503
    except InsightError:
        return jsonify({"ok": False, "error": "insight_unavailable", "message": USER_ERROR}), 502
    return jsonify({"ok": True, "insight": content, "period": period_label(start, end)}), 201


@insights_api_bp.get("")
def latest_insight():
    state = get_slot().state
    payload = InsightResponse(**state.to_dict()).model_dump()
    return jsonify({"ok": True, "insight": payload})
