"""Non-blocking notice channel for board activity.

The presentation layer subscribes a callback and receives a
:class:`BoardEvent` for every applied, confirmed, failed or rejected
transition. Publishing never blocks and never raises into the board: a
subscriber that fails is logged and skipped.

Usage::

    channel = EventChannel()
    unsubscribe = channel.subscribe(lambda event: print(event.message))
    ...
    unsubscribe()
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from loguru import logger

from ..domain.models import now_iso
from ..errors import DashboardError


TRANSITION_APPLIED = "transition.applied"
TRANSITION_CONFIRMED = "transition.confirmed"
TRANSITION_FAILED = "transition.failed"
TRANSITION_REJECTED = "transition.rejected"

Subscriber = Callable[["BoardEvent"], None]


@dataclass(frozen=True)
class BoardEvent:
    type: str
    task_id: str
    project_id: Optional[str] = None
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    message: str = ""
    error: Optional[DashboardError] = None
    ts: str = field(default_factory=now_iso)

    @property
    def is_failure(self) -> bool:
        return self.type in (TRANSITION_FAILED, TRANSITION_REJECTED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "task_id": self.task_id,
            "project_id": self.project_id,
            "from_status": self.from_status,
            "to_status": self.to_status,
            "message": self.message,
            "error": str(self.error) if self.error else None,
            "ts": self.ts,
        }


class EventChannel:
    """Fan-out of board events to subscribers, with a bounded history."""

    def __init__(self, history: int = 100) -> None:
        self._subscribers: list[Subscriber] = []
        self._history: deque[BoardEvent] = deque(maxlen=max(history, 1))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: BoardEvent) -> None:
        self._history.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Board event subscriber failed on {}", event.type)

    def recent(self, limit: int = 100) -> list[BoardEvent]:
        if limit < 1:
            return []
        return list(self._history)[-limit:]

    def failures(self) -> list[BoardEvent]:
        return [e for e in self._history if e.is_failure]
