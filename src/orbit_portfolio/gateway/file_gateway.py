"""YAML-file gateway.

Projects (with their nested tasks) and users live in two YAML documents under
a state directory. Every read and write goes through a process file lock, and
writes are atomic (write-tmp-then-rename). Blocking file I/O runs in a worker
thread so the board's event loop keeps turning while a write is in flight.
"""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any, Iterable

from loguru import logger

from ..constants import LOCK_FILE, PROJECTS_FILE, STORE_VERSION, USERS_FILE
from ..domain.models import Project, User, apply_task_changes
from ..errors import GatewayError, RemoteReadFailed
from ..io_utils import FileLock, atomic_write_yaml, load_yaml_with_error
from .interfaces import RemoteGateway
from .records import ProjectDraft


class FileGateway(RemoteGateway):
    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir
        self._projects_path = state_dir / PROJECTS_FILE
        self._users_path = state_dir / USERS_FILE
        self._lock = FileLock(state_dir / LOCK_FILE)
        self._thread_lock = threading.RLock()

    # -- low-level I/O ------------------------------------------------------

    def _load_collection(self, path: Path, key: str) -> list[dict[str, Any]]:
        data, err = load_yaml_with_error(path, {})
        if err:
            raise GatewayError(err)
        items = data.get(key, [])
        if not isinstance(items, list):
            raise GatewayError(f"{path.name}: '{key}' must be a list")
        return [item for item in items if isinstance(item, dict)]

    def _load_projects(self) -> list[Project]:
        return [Project.from_dict(d) for d in self._load_collection(self._projects_path, "projects")]

    def _save_projects(self, projects: list[Project]) -> None:
        payload = {"version": STORE_VERSION, "projects": [p.to_dict() for p in projects]}
        atomic_write_yaml(self._projects_path, payload)

    def _load_users(self) -> list[User]:
        return [User.from_dict(d) for d in self._load_collection(self._users_path, "users")]

    def _save_users(self, users: list[User]) -> None:
        payload = {"version": STORE_VERSION, "users": [u.to_dict() for u in users]}
        atomic_write_yaml(self._users_path, payload)

    # -- synchronous API ----------------------------------------------------

    def read_projects(self) -> list[Project]:
        with self._thread_lock:
            with self._lock:
                return self._load_projects()

    def read_users(self) -> list[User]:
        with self._thread_lock:
            with self._lock:
                return self._load_users()

    def is_empty(self) -> bool:
        return not self._projects_path.exists() and not self._users_path.exists()

    def seed(self, projects: Iterable[Project], users: Iterable[User]) -> None:
        """Write *projects* and *users*, replacing any existing documents."""
        with self._thread_lock:
            with self._lock:
                self._save_projects(list(projects))
                self._save_users(list(users))

    def _insert_project(self, draft: ProjectDraft) -> Project:
        with self._thread_lock:
            with self._lock:
                projects = self._load_projects()
                project = draft.to_project()
                if any(p.id == project.id for p in projects):
                    raise GatewayError(f"Project {project.id} already exists")
                projects.append(project)
                self._save_projects(projects)
                return project

    def _remove_project(self, project_id: str) -> bool:
        with self._thread_lock:
            with self._lock:
                projects = self._load_projects()
                remaining = [p for p in projects if p.id != project_id]
                if len(remaining) == len(projects):
                    return False
                self._save_projects(remaining)
                return True

    def _patch_task(self, task_id: str, changes: dict[str, Any]) -> bool:
        with self._thread_lock:
            with self._lock:
                projects = self._load_projects()
                for project in projects:
                    for idx, task in enumerate(project.tasks):
                        if task.id != task_id:
                            continue
                        try:
                            project.tasks[idx] = apply_task_changes(task, changes)
                        except ValueError as exc:
                            logger.warning("Rejected change for task {}: {}", task_id, exc)
                            return False
                        self._save_projects(projects)
                        return True
        logger.warning("Task {} not found in {}", task_id, self._projects_path)
        return False

    # -- RemoteGateway ------------------------------------------------------

    async def list_projects(self) -> list[Project]:
        try:
            return await asyncio.to_thread(self.read_projects)
        except (GatewayError, OSError) as exc:
            raise RemoteReadFailed(str(exc)) from exc

    async def list_users(self) -> list[User]:
        try:
            return await asyncio.to_thread(self.read_users)
        except (GatewayError, OSError) as exc:
            logger.warning("Failed to read users from {}: {}", self._users_path, exc)
            return []

    async def create_project(self, draft: ProjectDraft) -> Project:
        try:
            return await asyncio.to_thread(self._insert_project, draft)
        except OSError as exc:
            raise GatewayError(f"Failed to create project {draft.name!r}: {exc}") from exc

    async def delete_project(self, project_id: str) -> bool:
        try:
            return await asyncio.to_thread(self._remove_project, project_id)
        except (GatewayError, OSError) as exc:
            logger.warning("Failed to delete project {}: {}", project_id, exc)
            return False

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> bool:
        try:
            return await asyncio.to_thread(self._patch_task, task_id, changes)
        except (GatewayError, OSError) as exc:
            logger.warning("Failed to update task {}: {}", task_id, exc)
            return False
