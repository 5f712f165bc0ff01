"""Insight services: prompt payloads, the summary call, and the result slot."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from threading import Lock
from typing import Dict, Iterable, List, Optional

from flagtracker.core.insights.client import ChatCompletionClient, InsightError
from flagtracker.domains.habits.models.habit_models import Habit, Log

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
You are a warm, enthusiastic and analytical personal growth coach.
Using the user's habit check-in data for the period, write a concise,
emoji-rich review.
1. Summarise their performance (completion rate, total time invested, etc.).
2. Pick the highlight of the period or the best-performing habit.
3. For the weakest habit, give one specific, actionable improvement tip.
4. Keep the tone positive and encouraging, like a friend.
5. Use Markdown with clear headings and bullet lists.
"""

EMPTY_REPLY = "Could not generate a report, please try again later."
USER_ERROR = "AI connection failed, please try again later."


def period_label(start: date, end: date) -> str:
    return f"{start.isoformat()} to {end.isoformat()}"


def logs_since(logs: Iterable[Log], start: date) -> List[Log]:
    start_str = start.isoformat()
    return [log for log in logs if log.date >= start_str]


def build_payload(habits: List[Habit], logs: List[Log], period: str) -> Dict[str, object]:
    names = {habit.id: habit.name for habit in habits}
    entries = []
    for log in logs:
        entry = {"date": log.date, "value": log.value}
        # orphaned logs carry no habit name
        if log.habit_id in names:
            entry = {"habit": names[log.habit_id], **entry}
        entries.append(entry)
    return {
        "period": period,
        "habits": [{"name": h.name, "goal": h.goal, "unit": h.unit} for h in habits],
        "logs": entries,
    }


def generate_weekly_insight(
    client: ChatCompletionClient,
    habits: List[Habit],
    logs: List[Log],
    period: str,
) -> str:
    """Return a Markdown review of ``logs``; raises ``InsightError`` on failure."""
    data_context = json.dumps(build_payload(habits, logs, period), ensure_ascii=False)
    user_message = (
        f"Here is my habit check-in data for this period: {data_context}. "
        "Please write my review."
    )
    content = client.complete(SYSTEM_INSTRUCTION, user_message)
    return content or EMPTY_REPLY


@dataclass
class InsightState:
    status: str = "idle"  # idle | loading | ready | error
    content: Optional[str] = None
    error: Optional[str] = None
    period: Optional[str] = None
    generation: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "content": self.content,
            "error": self.error,
            "period": self.period,
        }


class InsightSlot:
    """Shared holder for the latest summary.

    Each request takes a ticket from ``begin``; a response is applied only if
    its ticket is still the newest, so a slow earlier request cannot overwrite
    a later one.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._state = InsightState()

    def begin(self, period: str) -> int:
        with self._lock:
            generation = self._state.generation + 1
            self._state = InsightState(
                status="loading",
                content=self._state.content,
                period=period,
                generation=generation,
            )
            return generation

    def _apply(self, ticket: int, **fields) -> bool:
        with self._lock:
            if ticket != self._state.generation:
                logger.info("Dropping stale insight response (ticket %s, latest %s)", ticket, self._state.generation)
                return False
            for key, value in fields.items():
                setattr(self._state, key, value)
            return True

    def resolve(self, ticket: int, content: str) -> bool:
        return self._apply(ticket, status="ready", content=content, error=None)

    def fail(self, ticket: int, message: str) -> bool:
        return self._apply(ticket, status="error", error=message)

    def reset(self) -> None:
        with self._lock:
            self._state = InsightState(generation=self._state.generation)

    @property
    def state(self) -> InsightState:
        with self._lock:
            return InsightState(**vars(self._state))


def request_insight(
    slot: InsightSlot,
    client: ChatCompletionClient,
    habits: List[Habit],
    logs: List[Log],
    start: date,
    end: date,
) -> str:
    """Generate the summary for the window and publish it to ``slot``.

    Errors are recorded on the slot as one user-facing message and re-raised.
    """
    period = period_label(start, end)
    ticket = slot.begin(period)
    try:
        content = generate_weekly_insight(client, habits, logs_since(logs, start), period)
    except InsightError as exc:
        logger.warning("Insight generation failed for %s: %s", period, exc)
        slot.fail(ticket, USER_ERROR)
        raise
    slot.resolve(ticket, content)
    return content
