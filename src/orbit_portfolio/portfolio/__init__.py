from .aggregator import (
    CONDITION_CAUTION,
    CONDITION_OPTIMAL,
    PortfolioStats,
    TaskBreakdown,
    compute_stats,
    filter_projects,
    portfolio_condition,
    task_breakdown,
)
from .workload import Workload, assigned_points, compute_workload, team_workload, user_capacity

__all__ = [
    "CONDITION_CAUTION",
    "CONDITION_OPTIMAL",
    "PortfolioStats",
    "TaskBreakdown",
    "Workload",
    "assigned_points",
    "compute_stats",
    "compute_workload",
    "filter_projects",
    "portfolio_condition",
    "task_breakdown",
    "team_workload",
    "user_capacity",
]
