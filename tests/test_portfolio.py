from __future__ import annotations

import pytest

from orbit_portfolio.domain.models import Project, ProjectHealth, ProjectStatus, Task, TaskStatus
from orbit_portfolio.domain.seed import sample_projects
from orbit_portfolio.portfolio import (
    CONDITION_CAUTION,
    CONDITION_OPTIMAL,
    PortfolioStats,
    compute_stats,
    filter_projects,
    portfolio_condition,
    task_breakdown,
)


def _project(pid: str, name: str, health: ProjectHealth, progress: int, **kwargs) -> Project:
    return Project(id=pid, name=name, health=health, progress=progress, **kwargs)


@pytest.fixture
def portfolio() -> list[Project]:
    return [
        _project("p1", "Apollo", ProjectHealth.CRITICAL, 40, status=ProjectStatus.ACTIVE, owner_id="James Miller"),
        _project("p2", "Orbit", ProjectHealth.HEALTHY, 80, status=ProjectStatus.ON_HOLD, owner_id="Dana Scully"),
    ]


class TestComputeStats:
    def test_mixed_portfolio(self, portfolio: list[Project]) -> None:
        stats = compute_stats(portfolio)
        assert stats == PortfolioStats(critical=1, healthy=1, avg_progress=60, total=2)

    def test_empty_input(self) -> None:
        stats = compute_stats([])
        assert stats.to_dict() == {"critical": 0, "healthy": 0, "avg_progress": 0, "total": 0}

    def test_average_rounds_half_up(self) -> None:
        projects = [
            _project("a", "A", ProjectHealth.HEALTHY, 50),
            _project("b", "B", ProjectHealth.HEALTHY, 51),
        ]
        assert compute_stats(projects).avg_progress == 51

    def test_at_risk_counted_only_in_total(self) -> None:
        projects = [
            _project("a", "A", ProjectHealth.AT_RISK, 10),
            _project("b", "B", ProjectHealth.AT_RISK, 20),
            _project("c", "C", ProjectHealth.CRITICAL, 30),
        ]
        stats = compute_stats(projects)
        assert (stats.critical, stats.healthy, stats.total) == (1, 0, 3)
        assert stats.critical + stats.healthy <= stats.total

    def test_average_stays_in_range(self) -> None:
        projects = [_project(str(i), "P", ProjectHealth.HEALTHY, p) for i, p in enumerate([0, 100, 99, 1, 37])]
        assert 0 <= compute_stats(projects).avg_progress <= 100

    def test_seed_portfolio(self) -> None:
        stats = compute_stats(sample_projects())
        assert stats == PortfolioStats(critical=0, healthy=2, avg_progress=48, total=2)


class TestFilterProjects:
    def test_search_matches_name_case_insensitively(self, portfolio: list[Project]) -> None:
        result = filter_projects(portfolio, "orb", "All", "All")
        assert [p.id for p in result] == ["p2"]

    def test_search_matches_owner(self, portfolio: list[Project]) -> None:
        result = filter_projects(portfolio, "miller")
        assert [p.id for p in result] == ["p1"]

    def test_health_filter(self, portfolio: list[Project]) -> None:
        assert [p.id for p in filter_projects(portfolio, health_filter="Critical")] == ["p1"]
        assert [p.id for p in filter_projects(portfolio, health_filter=ProjectHealth.HEALTHY)] == ["p2"]
        assert filter_projects(portfolio, health_filter="At Risk") == []

    def test_status_filter(self, portfolio: list[Project]) -> None:
        assert [p.id for p in filter_projects(portfolio, status_filter="On Hold")] == ["p2"]
        assert [p.id for p in filter_projects(portfolio, status_filter=None)] == ["p1", "p2"]

    def test_combined_predicates(self, portfolio: list[Project]) -> None:
        assert filter_projects(portfolio, "apollo", "Healthy", "All") == []

    def test_no_filters_keeps_everything_in_order(self, portfolio: list[Project]) -> None:
        assert [p.id for p in filter_projects(portfolio)] == ["p1", "p2"]

    def test_result_is_subset_and_idempotent(self, portfolio: list[Project]) -> None:
        once = filter_projects(portfolio, "o", "Healthy", "All")
        twice = filter_projects(once, "o", "Healthy", "All")
        assert all(p in portfolio for p in once)
        assert twice == once

    def test_health_filters_partition_projects(self, portfolio: list[Project]) -> None:
        buckets = [filter_projects(portfolio, health_filter=h) for h in ProjectHealth]
        ids = [p.id for bucket in buckets for p in bucket]
        assert sorted(ids) == ["p1", "p2"]


class TestBreakdownAndCondition:
    def test_task_breakdown_folds_backlog_into_to_do(self) -> None:
        project = Project(
            id="p",
            tasks=[
                Task(id="a", status=TaskStatus.BACKLOG),
                Task(id="b", status=TaskStatus.TODO),
                Task(id="c", status=TaskStatus.IN_PROGRESS),
                Task(id="d", status=TaskStatus.REVIEW),
                Task(id="e", status=TaskStatus.DONE),
            ],
        )
        breakdown = task_breakdown(project)
        assert breakdown.to_dict() == {"completed": 1, "in_progress": 1, "review": 1, "to_do": 2, "total": 5}
        assert breakdown.share(breakdown.completed) == 20

    def test_share_of_empty_project(self) -> None:
        assert task_breakdown(Project(id="p")).share(0) == 0

    def test_condition(self, portfolio: list[Project]) -> None:
        assert portfolio_condition(portfolio) == CONDITION_CAUTION
        assert portfolio_condition(portfolio[1:]) == CONDITION_OPTIMAL
        assert portfolio_condition([]) == CONDITION_OPTIMAL
