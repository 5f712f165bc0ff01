"""Application configuration for FlagTracker."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/flagtracker.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Key-value storage keys for the two persisted collections
    HABITS_STORAGE_KEY = os.environ.get("HABITS_STORAGE_KEY", "flagtracker_habits")
    LOGS_STORAGE_KEY = os.environ.get("LOGS_STORAGE_KEY", "flagtracker_logs")

    DEFAULT_RANGE = os.environ.get("DEFAULT_RANGE", "week")

    # OpenAI-compatible chat completion endpoint used for weekly summaries
    INSIGHTS_API_KEY = os.environ.get("INSIGHTS_API_KEY") or os.environ.get("API_KEY", "")
    INSIGHTS_BASE_URL = os.environ.get("INSIGHTS_BASE_URL", "https://openrouter.ai/api/v1")
    INSIGHTS_MODEL = os.environ.get("INSIGHTS_MODEL", "google/gemini-3-pro-preview")
    INSIGHTS_TIMEOUT_SECONDS = int(os.environ.get("INSIGHTS_TIMEOUT_SECONDS", "60"))
    INSIGHTS_REASONING = _env_flag("INSIGHTS_REASONING", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    INSIGHTS_API_KEY = "test-key"
    INSIGHTS_BASE_URL = "https://insights.test/api/v1"


class ProductionConfig(BaseConfig):
    ENV = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
