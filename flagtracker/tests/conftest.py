import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from flagtracker import create_app
from flagtracker.core.storage.services import KeyValueGateway
from flagtracker.domains.habits.services import HabitStore
from flagtracker.extensions import db

# Wednesday; its week runs 2024-01-08..2024-01-14
TODAY = date(2024, 1, 10)


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app():
    """Per-test app backed by a fresh in-memory sqlite database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    """Habit store pinned to ``TODAY`` and installed on the app."""
    habit_store = HabitStore(
        KeyValueGateway(),
        habits_key=app.config["HABITS_STORAGE_KEY"],
        logs_key=app.config["LOGS_STORAGE_KEY"],
        clock=lambda: TODAY,
    )
    app.extensions["habit_store"] = habit_store
    return habit_store


