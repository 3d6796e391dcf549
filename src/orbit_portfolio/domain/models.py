"""Entity model for the portfolio dashboard.

Users, projects and the tasks they own, plus the enumerations shared with the
remote store. Entities are plain data: the only behaviour here is
serialization and the status-copy helper the task board uses for its
optimistic writes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..constants import DEFAULT_PROJECT_END, DEFAULT_PROJECT_START


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Board column a task sits in."""

    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class ProjectStatus(str, Enum):
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class ProjectHealth(str, Enum):
    """Qualitative risk classification of a project."""

    HEALTHY = "Healthy"
    AT_RISK = "At Risk"
    CRITICAL = "Critical"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def coerce_enum(enum_cls: type[Enum], raw: Any, default: Enum) -> Any:
    """Map *raw* onto *enum_cls* by value or member name, else *default*."""
    if raw is None:
        return default
    if isinstance(raw, enum_cls):
        return raw
    text = str(raw)
    try:
        return enum_cls(text)
    except ValueError:
        pass
    try:
        return enum_cls[text.upper().replace(" ", "_")]
    except KeyError:
        return default


def _optional_number(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return int(value) if value.is_integer() else value


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(item) for item in raw]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class User:
    id: str
    name: str = ""
    role: str = ""
    skills: tuple[str, ...] = ()
    capacity_per_week: Optional[float] = None  # story points
    avatar: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "skills": list(self.skills),
            "capacity_per_week": self.capacity_per_week,
            "avatar": self.avatar,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        capacity = data.get("capacity_per_week", data.get("capacityPerWeek"))
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            role=str(data.get("role") or ""),
            skills=tuple(_str_list(data.get("skills"))),
            capacity_per_week=_optional_number(capacity),
            avatar=str(data.get("avatar") or ""),
        )


@dataclass(frozen=True)
class Task:
    """A unit of work on a project's board.

    Tasks are frozen: a status change produces a new value through
    :meth:`with_status`, which keeps snapshots of the board list stable.
    """

    id: str
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.BACKLOG
    priority: Priority = Priority.MEDIUM
    assignee_id: str = ""
    due_date: str = ""
    project_id: Optional[str] = None
    story_points: Optional[float] = None
    labels: tuple[str, ...] = ()

    def with_status(self, status: TaskStatus) -> "Task":
        return replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "assignee_id": self.assignee_id,
            "due_date": self.due_date,
            "project_id": self.project_id,
            "story_points": self.story_points,
            "labels": list(self.labels),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize, coercing unknown statuses to BACKLOG."""
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=coerce_enum(TaskStatus, data.get("status"), TaskStatus.BACKLOG),
            priority=coerce_enum(Priority, data.get("priority"), Priority.MEDIUM),
            assignee_id=str(data.get("assignee_id", data.get("assigneeId")) or ""),
            due_date=str(data.get("due_date", data.get("dueDate")) or ""),
            project_id=data.get("project_id", data.get("projectId")),
            story_points=_optional_number(data.get("story_points", data.get("storyPoints"))),
            labels=tuple(_str_list(data.get("labels"))),
        )


@dataclass
class Project:
    id: str
    name: str = ""
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    health: ProjectHealth = ProjectHealth.HEALTHY
    priority: Priority = Priority.MEDIUM
    progress: int = 0  # 0-100, computed by the remote store
    start_date: str = DEFAULT_PROJECT_START
    end_date: str = DEFAULT_PROJECT_END
    owner_id: str = ""
    members: list[str] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "health": self.health.value,
            "priority": self.priority.value,
            "progress": self.progress,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "owner_id": self.owner_id,
            "members": list(self.members),
            "tasks": [t.to_dict() for t in self.tasks],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Deserialize a project record, filling the loader defaults.

        Missing health means Healthy and missing dates fall back to the
        calendar-year defaults. Progress is clamped to 0-100.
        """
        try:
            progress = int(round(float(data.get("progress") or 0)))
        except (TypeError, ValueError):
            progress = 0
        project_id = str(data.get("id", ""))
        tasks = []
        for raw in data.get("tasks") or []:
            if isinstance(raw, dict):
                task = Task.from_dict(raw)
                if task.project_id is None:
                    task = replace(task, project_id=project_id)
                tasks.append(task)
        return cls(
            id=project_id,
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            status=coerce_enum(ProjectStatus, data.get("status"), ProjectStatus.ACTIVE),
            health=coerce_enum(ProjectHealth, data.get("health"), ProjectHealth.HEALTHY),
            priority=coerce_enum(Priority, data.get("priority"), Priority.MEDIUM),
            progress=max(0, min(100, progress)),
            start_date=str(data.get("start_date", data.get("startDate")) or DEFAULT_PROJECT_START),
            end_date=str(data.get("end_date", data.get("endDate")) or DEFAULT_PROJECT_END),
            owner_id=str(data.get("owner_id", data.get("ownerId")) or ""),
            members=_str_list(data.get("members")),
            tasks=tasks,
            created_at=str(data.get("created_at", data.get("createdAt")) or now_iso()),
        )


_TASK_ENUM_FIELDS: dict[str, tuple[type[Enum], Enum]] = {
    "status": (TaskStatus, TaskStatus.BACKLOG),
    "priority": (Priority, Priority.MEDIUM),
}


def apply_task_changes(task: Task, changes: dict[str, Any]) -> Task:
    """Return a copy of *task* with the partial *changes* applied.

    Unknown keys are ignored. Enum fields given as strings must name a valid
    value, otherwise ``ValueError`` is raised and nothing is applied.
    """
    updates: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "id" or key not in Task.__dataclass_fields__:
            continue
        if key in _TASK_ENUM_FIELDS:
            enum_cls, _ = _TASK_ENUM_FIELDS[key]
            value = value if isinstance(value, enum_cls) else enum_cls(str(value))
        elif key == "labels":
            value = tuple(_str_list(value))
        updates[key] = value
    return replace(task, **updates) if updates else task
