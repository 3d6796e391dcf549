"""Portfolio statistics and filtered views.

Everything here is a pure function of its inputs: no I/O, no mutation, safe
to memoize and to re-run on every change.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable, Sequence, Union

from ..constants import FILTER_ALL
from ..domain.models import Project, ProjectHealth, TaskStatus

FilterValue = Union[str, Enum, None]

CONDITION_OPTIMAL = "Optimal"
CONDITION_CAUTION = "Caution"


@dataclass(frozen=True)
class PortfolioStats:
    critical: int = 0
    healthy: int = 0
    avg_progress: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaskBreakdown:
    completed: int = 0
    in_progress: int = 0
    review: int = 0
    to_do: int = 0
    total: int = 0

    def share(self, count: int) -> float:
        """Percentage of *count* against the total (total 0 counts as 1)."""
        return count / (self.total or 1) * 100

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(projects: Sequence[Project]) -> PortfolioStats:
    total = len(projects)
    if total == 0:
        return PortfolioStats()
    critical = sum(1 for p in projects if p.health == ProjectHealth.CRITICAL)
    healthy = sum(1 for p in projects if p.health == ProjectHealth.HEALTHY)
    avg_progress = _round_half_up(sum(p.progress for p in projects) / total)
    return PortfolioStats(critical=critical, healthy=healthy, avg_progress=avg_progress, total=total)


def _filter_value(value: FilterValue) -> str:
    if value is None:
        return FILTER_ALL
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _matches(field_value: Enum, wanted: str) -> bool:
    return wanted == FILTER_ALL or field_value.value == wanted


def filter_projects(
    projects: Iterable[Project],
    search_text: str = "",
    health_filter: FilterValue = FILTER_ALL,
    status_filter: FilterValue = FILTER_ALL,
) -> list[Project]:
    """Return the projects matching every predicate, in their original order.

    *search_text* matches case-insensitively against the project name or the
    owner id. ``"All"`` (or ``None``) disables the health/status predicates.
    """
    query = (search_text or "").lower()
    health = _filter_value(health_filter)
    status = _filter_value(status_filter)
    out: list[Project] = []
    for project in projects:
        if query and query not in project.name.lower() and query not in project.owner_id.lower():
            continue
        if not _matches(project.health, health):
            continue
        if not _matches(project.status, status):
            continue
        out.append(project)
    return out


def task_breakdown(project: Project) -> TaskBreakdown:
    counts = {status: 0 for status in TaskStatus}
    for task in project.tasks:
        counts[task.status] += 1
    return TaskBreakdown(
        completed=counts[TaskStatus.DONE],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        review=counts[TaskStatus.REVIEW],
        to_do=counts[TaskStatus.TODO] + counts[TaskStatus.BACKLOG],
        total=len(project.tasks),
    )


def portfolio_condition(projects: Iterable[Project]) -> str:
    if any(p.health == ProjectHealth.CRITICAL for p in projects):
        return CONDITION_CAUTION
    return CONDITION_OPTIMAL
