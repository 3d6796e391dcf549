from __future__ import annotations

import asyncio
import copy
from typing import Any, Iterable, Optional

from loguru import logger

from ..domain.models import Project, User, apply_task_changes
from ..errors import GatewayError, RemoteReadFailed
from .interfaces import RemoteGateway
from .records import ProjectDraft


class InMemoryGateway(RemoteGateway):
    """List-backed gateway with hooks for simulating latency and failures.

    Usage::

        gateway = InMemoryGateway(projects=sample_projects())
        gateway.fail_updates.add("t1")      # next updates of t1 report failure
        release = gateway.hold("t2")        # updates of t2 wait until release.set()
    """

    def __init__(
        self,
        projects: Optional[Iterable[Project]] = None,
        users: Optional[Iterable[User]] = None,
    ) -> None:
        self._projects: list[Project] = [copy.deepcopy(p) for p in projects or []]
        self._users: list[User] = list(users or [])
        self.update_calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_updates: set[str] = set()
        self.fail_all_updates = False
        self.raise_on_update: Optional[BaseException] = None
        self.fail_reads = False
        self._holds: dict[str, asyncio.Event] = {}

    def hold(self, task_id: str) -> asyncio.Event:
        """Keep updates of *task_id* outstanding until the returned event is set."""
        event = asyncio.Event()
        self._holds[task_id] = event
        return event

    def task_status(self, task_id: str) -> Optional[str]:
        """Authoritative status of *task_id*, for assertions."""
        for project in self._projects:
            for task in project.tasks:
                if task.id == task_id:
                    return task.status.value
        return None

    async def list_projects(self) -> list[Project]:
        if self.fail_reads:
            raise RemoteReadFailed("project read failed")
        return copy.deepcopy(self._projects)

    async def list_users(self) -> list[User]:
        if self.fail_reads:
            logger.warning("User read failed; returning no users")
            return []
        return list(self._users)

    async def create_project(self, draft: ProjectDraft) -> Project:
        project = draft.to_project()
        if any(p.id == project.id for p in self._projects):
            raise GatewayError(f"Project {project.id} already exists")
        self._projects.append(project)
        return copy.deepcopy(project)

    async def delete_project(self, project_id: str) -> bool:
        before = len(self._projects)
        self._projects = [p for p in self._projects if p.id != project_id]
        return len(self._projects) != before

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> bool:
        self.update_calls.append((task_id, dict(changes)))
        gate = self._holds.get(task_id)
        if gate is not None:
            await gate.wait()
            self._holds.pop(task_id, None)
        if self.raise_on_update is not None:
            raise self.raise_on_update
        if self.fail_all_updates or task_id in self.fail_updates:
            return False
        for project in self._projects:
            for idx, task in enumerate(project.tasks):
                if task.id == task_id:
                    try:
                        project.tasks[idx] = apply_task_changes(task, changes)
                    except ValueError:
                        return False
                    return True
        return False
