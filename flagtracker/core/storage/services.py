"""Key-value gateway: JSON text stored under fixed string keys."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, TypeVar

from flagtracker.core.storage.models import KeyValueEntry, utcnow
from flagtracker.extensions import db

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueGateway:
    """Load and save JSON documents in the ``kv_store`` table.

    Reads never fail the caller: a missing key, malformed JSON, or a value
    rejected by ``parse`` all fall back to the supplied default.
    """

    def __init__(self, session=None) -> None:
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def load(self, key: str, default: T, parse: Optional[Callable[[Any], T]] = None) -> T:
        entry = self.session.get(KeyValueEntry, key)
        if entry is None or not entry.value:
            return default
        try:
            raw = json.loads(entry.value)
            return parse(raw) if parse else raw
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both derive from ValueError
            logger.warning("Discarding malformed value for %s: %s", key, exc)
            return default

    def save(self, key: str, value: Any) -> None:
        text = json.dumps(value, ensure_ascii=False)
        entry = self.session.get(KeyValueEntry, key)
        if entry is None:
            self.session.add(KeyValueEntry(key=key, value=text))
        else:
            entry.value = text
            entry.updated_at = utcnow()
        self.session.commit()

    def delete(self, key: str) -> bool:
        entry = self.session.get(KeyValueEntry, key)
        if entry is None:
            return False
        self.session.delete(entry)
        self.session.commit()
        return True
