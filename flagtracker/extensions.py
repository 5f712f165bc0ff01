"""Shared extensions for the FlagTracker application."""

from flask_sqlalchemy import SQLAlchemy

# Key-value persistence for the habit and log collections
db = SQLAlchemy(session_options={"expire_on_commit": False})


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    db.init_app(app)
