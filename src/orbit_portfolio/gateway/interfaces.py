from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..domain.models import Project, User
from .records import AssistantReply, AssistantRequest, ProjectDraft, SummaryRequest, SummaryResponse


class RemoteGateway(ABC):
    """Authoritative store for projects, users and task changes.

    ``list_projects`` raises :class:`~orbit_portfolio.errors.RemoteReadFailed`
    when the read fails; ``list_users`` returns an empty list instead.
    Writes report failure through their return value or a ``GatewayError``.
    """

    @abstractmethod
    async def list_projects(self) -> list[Project]:
        raise NotImplementedError

    @abstractmethod
    async def list_users(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    async def create_project(self, draft: ProjectDraft) -> Project:
        raise NotImplementedError

    @abstractmethod
    async def delete_project(self, project_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def update_task(self, task_id: str, changes: dict[str, Any]) -> bool:
        raise NotImplementedError


class AssistantProvider(ABC):
    """Text generation backend: project summaries and free-form answers.

    Implementations may raise; callers substitute fixed fallback text.
    """

    @abstractmethod
    async def generate(self, request: SummaryRequest) -> SummaryResponse:
        raise NotImplementedError

    @abstractmethod
    async def answer(self, request: AssistantRequest) -> AssistantReply:
        raise NotImplementedError
