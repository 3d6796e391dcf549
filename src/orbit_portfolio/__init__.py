"""Portfolio dashboard core: task board transitions and portfolio metrics."""

from __future__ import annotations

from .board import BoardEvent, EventChannel, TaskBoard
from .portfolio import compute_stats, compute_workload, filter_projects
from .workspace import Workspace, load_workspace

__all__ = [
    "BoardEvent",
    "EventChannel",
    "TaskBoard",
    "Workspace",
    "compute_stats",
    "compute_workload",
    "filter_projects",
    "load_workspace",
]
