"""Per-user allocation against weekly capacity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional, Sequence

from ..constants import DEFAULT_CAPACITY_PER_WEEK
from ..domain.models import Project, ProjectStatus, TaskStatus, User


@dataclass(frozen=True)
class Workload:
    points: float
    capacity: float
    percentage: float  # unclamped; may exceed 100
    overbooked: bool

    @property
    def fill_percentage(self) -> float:
        """Primary bar fill, clamped to 100."""
        return min(self.percentage, 100.0)

    @property
    def overflow_percentage(self) -> float:
        return max(self.percentage - 100.0, 0.0)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["fill_percentage"] = self.fill_percentage
        data["overflow_percentage"] = self.overflow_percentage
        return data


def user_capacity(user: User, default: float = DEFAULT_CAPACITY_PER_WEEK) -> float:
    capacity = user.capacity_per_week
    if not capacity or capacity <= 0:
        return default
    return capacity


def compute_workload(
    user: User,
    assigned_points: float,
    *,
    default_capacity: float = DEFAULT_CAPACITY_PER_WEEK,
) -> Workload:
    capacity = user_capacity(user, default_capacity)
    percentage = assigned_points / capacity * 100
    return Workload(
        points=assigned_points,
        capacity=capacity,
        percentage=percentage,
        overbooked=percentage > 100,
    )


def _is_assigned(assignee_id: str, user: User) -> bool:
    if not assignee_id:
        return False
    return assignee_id == user.id or (bool(user.name) and assignee_id == user.name)


def assigned_points(
    user: User,
    projects: Iterable[Project],
    *,
    active_statuses: Optional[Sequence[ProjectStatus]] = None,
    include_done: bool = False,
) -> float:
    """Sum the story points of open tasks assigned to *user*.

    Only projects whose status is in *active_statuses* (default: Active)
    count. Tasks without an estimate contribute nothing.
    """
    statuses = set(active_statuses or (ProjectStatus.ACTIVE,))
    total: float = 0
    for project in projects:
        if project.status not in statuses:
            continue
        for task in project.tasks:
            if not include_done and task.status == TaskStatus.DONE:
                continue
            if _is_assigned(task.assignee_id, user):
                total += task.story_points or 0
    return total


def team_workload(
    users: Iterable[User],
    projects: Sequence[Project],
    *,
    default_capacity: float = DEFAULT_CAPACITY_PER_WEEK,
    active_statuses: Optional[Sequence[ProjectStatus]] = None,
    include_done: bool = False,
) -> list[tuple[User, Workload]]:
    out: list[tuple[User, Workload]] = []
    for user in users:
        points = assigned_points(user, projects, active_statuses=active_statuses, include_done=include_done)
        out.append((user, compute_workload(user, points, default_capacity=default_capacity)))
    return out
