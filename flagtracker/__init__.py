"""FlagTracker application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask

from flagtracker.config import config_by_name
from flagtracker.extensions import db, init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the FlagTracker Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _init_storage(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    # Register CLI commands
    from flagtracker.scripts.habits_cli import register_commands

    register_commands(app)

    return app


def _init_storage(app: Flask) -> None:
    """Create the key-value table and attach the shared habit store and insight slot."""
    from flagtracker.core.insights.services import InsightSlot
    from flagtracker.core.storage.models import KeyValueEntry  # noqa: F401  (registers the table)
    from flagtracker.core.storage.services import KeyValueGateway
    from flagtracker.domains.habits.services import HabitStore

    with app.app_context():
        db.create_all()

    app.extensions["habit_store"] = HabitStore(
        KeyValueGateway(),
        habits_key=app.config["HABITS_STORAGE_KEY"],
        logs_key=app.config["LOGS_STORAGE_KEY"],
    )
    app.extensions["insight_slot"] = InsightSlot()


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from flagtracker.core.insights.controllers import insights_api_bp
    from flagtracker.domains.habits.controllers.habit_api import habit_api_bp
    from flagtracker.domains.habits.controllers.habit_pages import habit_pages_bp

    app.register_blueprint(habit_pages_bp)
    app.register_blueprint(habit_api_bp, url_prefix="/api")
    app.register_blueprint(insights_api_bp, url_prefix="/api/insights")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
