"""Load the projects and users a dashboard session works on.

A failed project read leaves the workspace with no projects (the error is
recorded, not raised) so the aggregators still run on empty input. When the
user read comes back empty the seed users stand in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from .board.events import EventChannel
from .board.state import TaskBoard
from .domain.models import Project, User
from .domain.seed import DEFAULT_USERS
from .errors import DashboardError, RemoteReadFailed
from .gateway.interfaces import RemoteGateway
from .gateway.records import ProjectDraft
from .portfolio.aggregator import PortfolioStats, compute_stats, filter_projects
from .portfolio.workload import Workload, team_workload


@dataclass
class Workspace:
    gateway: RemoteGateway
    projects: list[Project] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    seed_users: bool = True

    def project(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def board(self, project_id: str, channel: Optional[EventChannel] = None) -> TaskBoard:
        project = self.project(project_id)
        if project is None:
            raise DashboardError(f"Unknown project {project_id}")
        return TaskBoard.for_project(project, self.gateway, channel)

    def stats(self) -> PortfolioStats:
        return compute_stats(self.projects)

    def filtered(self, search_text: str = "", health: Any = None, status: Any = None) -> list[Project]:
        return filter_projects(self.projects, search_text, health, status)

    def workload(self, **options: Any) -> list[tuple[User, Workload]]:
        return team_workload(self.users, self.projects, **options)

    async def reload(self) -> None:
        self.errors = []
        try:
            self.projects = await self.gateway.list_projects()
        except RemoteReadFailed as exc:
            logger.warning("Project load failed, continuing with none: {}", exc)
            self.errors.append(str(exc))
            self.projects = []

        users = await self.gateway.list_users()
        if not users and self.seed_users:
            logger.info("No users returned; using {} seed users", len(DEFAULT_USERS))
            users = list(DEFAULT_USERS)
        self.users = users

    async def create_project(self, draft: ProjectDraft) -> Project:
        project = await self.gateway.create_project(draft)
        logger.info("Created project {}: {}", project.id, project.name)
        await self.reload()
        return project

    async def delete_project(self, project_id: str) -> bool:
        deleted = await self.gateway.delete_project(project_id)
        if deleted:
            logger.info("Deleted project {}", project_id)
            await self.reload()
        else:
            logger.warning("Project {} was not deleted", project_id)
        return deleted


async def load_workspace(gateway: RemoteGateway, *, seed_users: bool = True) -> Workspace:
    workspace = Workspace(gateway=gateway, seed_users=seed_users)
    await workspace.reload()
    return workspace
