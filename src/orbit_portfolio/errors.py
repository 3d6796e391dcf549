"""Exception hierarchy for the dashboard core.

Every failure the core can surface derives from :class:`DashboardError` so
callers (the CLI, a presentation layer) can catch one type at the boundary.
"""

from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base class for all dashboard core failures."""


class TransitionRejected(DashboardError, ValueError):
    """A status transition was refused before touching any state.

    Raised when the task is already pending, or the target equals the
    current status.
    """

    def __init__(self, task_id: str, reason: str) -> None:
        super().__init__(f"Transition for {task_id} rejected: {reason}")
        self.task_id = task_id
        self.reason = reason


class TaskNotFound(TransitionRejected):
    def __init__(self, task_id: str) -> None:
        super().__init__(task_id, "task is not on this board")


class GatewayError(DashboardError):
    """The remote gateway could not complete a call."""


class RemoteReadFailed(GatewayError):
    """Loading projects or users from the gateway failed."""


class RemoteWriteFailed(GatewayError):
    """Persisting a task change through the gateway failed."""

    def __init__(self, task_id: str, detail: Optional[str] = None) -> None:
        message = f"Failed to update task {task_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.task_id = task_id
        self.detail = detail
