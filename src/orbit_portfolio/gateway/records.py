"""Typed request/response records exchanged with external collaborators."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..constants import DEFAULT_PROJECT_END, DEFAULT_PROJECT_START
from ..domain.models import Priority, Project, ProjectHealth, ProjectStatus, now_iso


class ProjectDraft(BaseModel):
    """Fields supplied when creating a project."""

    name: str = Field(min_length=1)
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: ProjectStatus = ProjectStatus.ACTIVE
    health: ProjectHealth = ProjectHealth.HEALTHY
    progress: int = Field(default=0, ge=0, le=100)
    owner_id: str = ""
    members: list[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def to_project(self, project_id: Optional[str] = None) -> Project:
        return Project(
            id=project_id or f"proj-{uuid.uuid4().hex[:8]}",
            name=self.name,
            description=self.description,
            status=self.status,
            health=self.health,
            priority=self.priority,
            progress=self.progress,
            start_date=self.start_date or DEFAULT_PROJECT_START,
            end_date=self.end_date or DEFAULT_PROJECT_END,
            owner_id=self.owner_id,
            members=list(self.members),
            tasks=[],
            created_at=now_iso(),
        )


class SummaryRequest(BaseModel):
    """Input for a textual project summary."""

    project_name: str
    tasks: list[dict[str, Any]] = Field(default_factory=list)
    context: str = ""


class SummaryResponse(BaseModel):
    text: str
    ok: bool = True


class AssistantRequest(BaseModel):
    """A free-form question for the project-management assistant."""

    message: str = Field(min_length=1)
    context: str = ""


class AssistantReply(BaseModel):
    text: str
    ok: bool = True
