"""Pydantic schemas for the analytics and insights API."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class RangeQuery(BaseModel):
    """Query params carrying the analytics window (``?range=week|month``)."""

    range: Literal["week", "month"] = "week"

    @field_validator("range", mode="before")
    @classmethod
    def _normalize_range(cls, value: Optional[str]):
        if value is None:
            return "week"
        return str(value).strip().lower() or "week"


class InsightResponse(BaseModel):
    status: Literal["idle", "loading", "ready", "error"]
    content: Optional[str] = None
    error: Optional[str] = None
    period: Optional[str] = None
