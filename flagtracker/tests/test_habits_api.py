"""Tests for the habits and insights JSON API."""

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from flagtracker.core.insights.client import InsightProviderError


class TestHabitsApi:
    def test_list_habits_returns_presets(self, client, store):
        resp = client.get("/api/habits")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["ok"] is True
        assert [habit["name"] for habit in body["habits"]][:2] == ["Swimming", "Reading"]

    def test_create_habit(self, client, store):
        resp = client.post("/api/habits", json={"name": "Journal", "type": "boolean", "goal": 3})
        assert resp.status_code == 201
        habit = resp.get_json()["habit"]
        assert habit["name"] == "Journal"
        assert habit["goal"] == 1
        assert habit["unit"] == "done"
        assert store.get_habit(habit["id"]) is not None

    def test_create_habit_zero_goal_uses_default(self, client, store):
        resp = client.post("/api/habits", json={"name": "Walk", "type": "duration", "goal": 0})
        assert resp.status_code == 201
        assert resp.get_json()["habit"]["goal"] == 10

    def test_create_habit_empty_name(self, client, store):
        resp = client.post("/api/habits", json={"name": "   "})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"
        assert len(store.habits) == 5

    def test_create_habit_bad_type(self, client, store):
        resp = client.post("/api/habits", json={"name": "X", "type": "weekly"})
        assert resp.status_code == 400

    def test_delete_habit(self, client, store):
        assert client.delete("/api/habits/1").status_code == 200
        assert client.delete("/api/habits/1").status_code == 404


class TestLogsApi:
    def test_put_log_is_idempotent_per_day(self, client, store):
        client.put("/api/logs/2", json={"value": 3})
        resp = client.put("/api/logs/2", json={"value": 8})
        assert resp.status_code == 200
        assert resp.get_json()["log"] == {"habitId": "2", "date": "2024-01-10", "value": 8}

        logs = client.get("/api/logs").get_json()["logs"]
        assert logs == [{"habitId": "2", "date": "2024-01-10", "value": 8}]

    def test_negative_value_rejected(self, client, store):
        resp = client.put("/api/logs/2", json={"value": -1})
        assert resp.status_code == 400
        assert store.logs == []


class TestDashboardAndAnalytics:
    def test_dashboard(self, client, store):
        store.update_log("3", 8)
        store.update_log("2", 10)
        body = client.get("/api/dashboard").get_json()["dashboard"]
        assert body["date"] == "2024-01-10"
        assert body["total"] == 5
        assert body["completed_count"] == 1
        # (1 + 0.5) / 5 = 30%
        assert body["completion"] == 30
        water = next(row for row in body["habits"] if row["id"] == "3")
        assert water["completed"] is True
        assert water["progress"] == 100

    def test_analytics_week(self, client, store):
        store.update_log("1", 45)
        body = client.get("/api/analytics?range=week").get_json()["analytics"]
        assert body["range"] == "week"
        assert body["start"] == "2024-01-08"
        assert len(body["trend"]) == 7
        assert body["distribution"] == [{"habit_id": "1", "name": "Swimming", "minutes": 45, "color": "blue"}]

    def test_analytics_month(self, client, store):
        body = client.get("/api/analytics?range=month").get_json()["analytics"]
        assert len(body["trend"]) == 31

    def test_analytics_bad_range(self, client, store):
        assert client.get("/api/analytics?range=year").status_code == 400

    def test_badges(self, client, store):
        store.update_log("1", 60)
        body = client.get("/api/badges").get_json()
        assert [badge["id"] for badge in body["badges"]] == [
            "streak_3",
            "streak_7",
            "volume_duration",
            "volume_count",
        ]
        assert not any(badge["unlocked"] for badge in body["badges"])


class TestInsightsApi:
    def test_idle_by_default(self, client, store):
        body = client.get("/api/insights").get_json()
        assert body["insight"]["status"] == "idle"

    @patch("flagtracker.core.insights.client.ChatCompletionClient.complete", return_value="## Review")
    def test_generate(self, mock_complete, client, store):
        resp = client.post("/api/insights?range=week")
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["insight"] == "## Review"
        assert body["period"] == "2024-01-08 to 2024-01-14"

        latest = client.get("/api/insights").get_json()["insight"]
        assert latest["status"] == "ready"
        assert latest["content"] == "## Review"

    @patch(
        "flagtracker.core.insights.client.ChatCompletionClient.complete",
        side_effect=InsightProviderError("boom"),
    )
    def test_provider_failure(self, mock_complete, client, store):
        resp = client.post("/api/insights")
        assert resp.status_code == 502
        assert resp.get_json()["error"] == "insight_unavailable"
        assert client.get("/api/insights").get_json()["insight"]["status"] == "error"

    def test_missing_key(self, app, client, store):
        app.config["INSIGHTS_API_KEY"] = ""
        resp = client.post("/api/insights")
        assert resp.status_code == 503
        assert resp.get_json()["error"] == "insight_not_configured"


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
