"""Key-value persistence model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Mapped, mapped_column

from flagtracker.extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(db.Model):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(db.String(128), primary_key=True)
    value: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
