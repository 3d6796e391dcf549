"""Task board for one project, with optimistic status transitions.

A transition is applied to the local task list immediately, then persisted
through the remote gateway. If the gateway reports failure the whole list
reverts to the snapshot taken just before the optimistic write. Changes that
settled after that snapshot, and other outstanding optimistic writes, are then
laid back on top so the board converges with the store.

At most one transition per task is in flight: a task with an outstanding
gateway call is *pending*, and further requests for it are rejected until the
call resolves. Transitions of different tasks may overlap.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from loguru import logger

from ..domain.models import Project, Task, TaskStatus
from ..errors import RemoteWriteFailed, TaskNotFound, TransitionRejected
from ..gateway.interfaces import RemoteGateway
from .events import (
    TRANSITION_APPLIED,
    TRANSITION_CONFIRMED,
    TRANSITION_FAILED,
    TRANSITION_REJECTED,
    BoardEvent,
    EventChannel,
)


@dataclass(frozen=True)
class _InFlight:
    task_id: str
    from_status: TaskStatus
    to_status: TaskStatus
    snapshot: tuple[Task, ...]
    seq: int


class TaskBoard:
    """Working set of tasks for exactly one project.

    Parameters
    ----------
    tasks:
        Initial task list, in board order.
    gateway:
        Remote store that confirms or refuses each transition.
    channel:
        Where applied/confirmed/failed/rejected notices are published.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        gateway: RemoteGateway,
        *,
        channel: Optional[EventChannel] = None,
        project_id: Optional[str] = None,
    ) -> None:
        self._tasks: list[Task] = list(tasks)
        self._gateway = gateway
        self.channel = channel or EventChannel()
        self.project_id = project_id
        self._inflight: dict[str, _InFlight] = {}
        # task id -> (status the store holds, sequence number it settled at)
        self._settled: dict[str, tuple[TaskStatus, int]] = {}
        self._seq = 0

    @classmethod
    def for_project(
        cls,
        project: Project,
        gateway: RemoteGateway,
        channel: Optional[EventChannel] = None,
    ) -> "TaskBoard":
        return cls(project.tasks, gateway, channel=channel, project_id=project.id)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._inflight)

    def is_pending(self, task_id: str) -> bool:
        return task_id in self._inflight

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def column(self, status: Union[TaskStatus, str]) -> list[Task]:
        """Tasks with *status*, in board order."""
        wanted = TaskStatus(status)
        return [t for t in self._tasks if t.status == wanted]

    def columns(self) -> dict[TaskStatus, list[Task]]:
        return {status: self.column(status) for status in TaskStatus}

    def replace_tasks(self, tasks: Iterable[Task]) -> None:
        """Resynchronize with a freshly loaded task list.

        Refused while any transition is outstanding, since its rollback
        snapshot would no longer describe the list.
        """
        if self._inflight:
            raise TransitionRejected(
                ",".join(sorted(self._inflight)), "cannot reload while transitions are pending"
            )
        self._tasks = list(tasks)
        self._settled.clear()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def request_transition(
        self,
        task_id: str,
        target_status: Union[TaskStatus, str],
        *,
        timeout: Optional[float] = None,
    ) -> bool:
        """Move *task_id* to *target_status*; returns True once confirmed.

        Raises :class:`TransitionRejected` (before any state change) when the
        task is unknown, already pending, or already in *target_status*.
        Returns False after a gateway failure, by which point the board has
        been rolled back.
        """
        flight = self._begin(task_id, target_status)
        return await self._settle(flight, timeout)

    def submit_transition(
        self,
        task_id: str,
        target_status: Union[TaskStatus, str],
        *,
        timeout: Optional[float] = None,
    ) -> "asyncio.Task[bool]":
        """Fire-and-forget variant of :meth:`request_transition`.

        Validation and the optimistic write happen before this returns; the
        gateway call runs as a task on the current event loop.
        """
        loop = asyncio.get_running_loop()
        flight = self._begin(task_id, target_status)
        job = loop.create_task(self._settle(flight, timeout))
        job.add_done_callback(lambda _job: self._abandon(flight))
        return job

    def _begin(self, task_id: str, target_status: Union[TaskStatus, str]) -> _InFlight:
        try:
            target = TaskStatus(target_status)
        except ValueError:
            raise self._rejected(TransitionRejected(task_id, f"unknown status {target_status!r}")) from None
        task = self.get(task_id)
        if task is None:
            raise self._rejected(TaskNotFound(task_id))
        if task_id in self._inflight:
            raise self._rejected(TransitionRejected(task_id, "a transition is already pending"))
        if task.status == target:
            raise self._rejected(TransitionRejected(task_id, f"already {target.value}"))

        snapshot = tuple(self._tasks)
        self._tasks = [t.with_status(target) if t.id == task_id else t for t in self._tasks]
        flight = _InFlight(
            task_id=task_id, from_status=task.status, to_status=target, snapshot=snapshot, seq=self._tick()
        )
        self._inflight[task_id] = flight
        logger.debug("Applied {} {} -> {} optimistically", task_id, task.status.value, target.value)
        self._publish(TRANSITION_APPLIED, flight, f"Moving {task.title or task_id} to {target.value}")
        return flight

    async def _settle(self, flight: _InFlight, timeout: Optional[float]) -> bool:
        task_id = flight.task_id
        try:
            call = self._gateway.update_task(task_id, {"status": flight.to_status.value})
            if timeout is None:
                ok = await call
            else:
                ok = await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError:
            self._rollback(flight, RemoteWriteFailed(task_id, f"no response within {timeout}s"))
            return False
        except asyncio.CancelledError:
            self._rollback(flight, RemoteWriteFailed(task_id, "cancelled"))
            raise
        except Exception as exc:
            logger.exception("Gateway raised while updating task {}", task_id)
            self._rollback(flight, RemoteWriteFailed(task_id, str(exc)))
            return False

        if not ok:
            self._rollback(flight, RemoteWriteFailed(task_id))
            return False

        self._inflight.pop(task_id, None)
        self._settled[task_id] = (flight.to_status, self._tick())
        # An overlapping rollback may have restored a snapshot older than this write.
        self._tasks = [
            t.with_status(flight.to_status) if t.id == task_id and t.status != flight.to_status else t
            for t in self._tasks
        ]
        logger.info("Task {} moved to {}", task_id, flight.to_status.value)
        self._publish(TRANSITION_CONFIRMED, flight, f"Task {task_id} moved to {flight.to_status.value}")
        return True

    def _rollback(self, flight: _InFlight, error: RemoteWriteFailed) -> None:
        if self._inflight.get(flight.task_id) is not flight:
            return
        del self._inflight[flight.task_id]
        self._settled[flight.task_id] = (flight.from_status, self._tick())
        self._tasks = self._restore(flight)
        logger.warning("Rolled back board after failed update of {}: {}", flight.task_id, error)
        self._publish(TRANSITION_FAILED, flight, "Failed to update task on the remote store.", error)

    def _tick(self) -> int:
        self._seq += 1
        return self._seq

    def _restore(self, flight: _InFlight) -> list[Task]:
        """Snapshot of *flight* with every change it predates put back on top.

        Tasks settled after the snapshot was taken get their settled status
        (confirmed target, or the origin of a failed move), and tasks still in
        flight keep their optimistic status.
        """
        overlay = {
            task_id: status
            for task_id, (status, seq) in self._settled.items()
            if seq > flight.seq and task_id != flight.task_id
        }
        overlay.update((task_id, other.to_status) for task_id, other in self._inflight.items())
        return [
            t.with_status(overlay[t.id]) if t.id in overlay and t.status != overlay[t.id] else t
            for t in flight.snapshot
        ]

    def _abandon(self, flight: _InFlight) -> None:
        # A scheduled settle that was cancelled before it ever ran.
        self._rollback(flight, RemoteWriteFailed(flight.task_id, "cancelled before dispatch"))

    def _rejected(self, error: TransitionRejected) -> TransitionRejected:
        logger.debug("{}", error)
        self.channel.publish(
            BoardEvent(
                type=TRANSITION_REJECTED,
                task_id=error.task_id,
                project_id=self.project_id,
                message=str(error),
                error=error,
            )
        )
        return error

    def _publish(
        self,
        event_type: str,
        flight: _InFlight,
        message: str,
        error: Optional[RemoteWriteFailed] = None,
    ) -> None:
        self.channel.publish(
            BoardEvent(
                type=event_type,
                task_id=flight.task_id,
                project_id=self.project_id,
                from_status=flight.from_status.value,
                to_status=flight.to_status.value,
                message=message,
                error=error,
            )
        )
