"""Fixed seed values used when the remote store has no records."""

from __future__ import annotations

from .models import Priority, Project, ProjectHealth, ProjectStatus, Task, TaskStatus, User


DEFAULT_USERS: tuple[User, ...] = (
    User(
        id="u1",
        name="Sarah Chen",
        role="UX Lead",
        skills=("Figma", "React"),
        capacity_per_week=30,
        avatar="https://picsum.photos/seed/sarah/40/40",
    ),
    User(
        id="u2",
        name="Alex Rivera",
        role="Architect",
        skills=("Go", "K8s"),
        capacity_per_week=40,
        avatar="https://picsum.photos/seed/alex/40/40",
    ),
    User(
        id="u3",
        name="Mike Ross",
        role="Fullstack",
        skills=("Node", "SQL"),
        capacity_per_week=35,
        avatar="https://picsum.photos/seed/mike/40/40",
    ),
)


def sample_projects() -> list[Project]:
    """Return fresh copies of the sample portfolio."""
    return [
        Project(
            id="p1",
            name="Apollo Re-launch",
            description="Modernizing the legacy flight control systems for high-altitude orbital testing.",
            progress=65,
            status=ProjectStatus.ACTIVE,
            priority=Priority.HIGH,
            health=ProjectHealth.HEALTHY,
            start_date="2024-01-10",
            end_date="2024-12-31",
            owner_id="James Miller",
            created_at="2024-01-10T09:00:00Z",
            members=["Alex Rivera", "Sarah Chen", "Mike Ross"],
            tasks=[
                Task(
                    id="t1",
                    project_id="p1",
                    title="Backend API Optimization",
                    description="Refactor Node.js endpoints for 30% faster latency.",
                    status=TaskStatus.IN_PROGRESS,
                    priority=Priority.HIGH,
                    assignee_id="Alex Rivera",
                    due_date="2024-06-15",
                    story_points=8,
                ),
                Task(
                    id="t2",
                    project_id="p1",
                    title="User Interface Design",
                    description="Design the new telemetry dashboard screens.",
                    status=TaskStatus.DONE,
                    priority=Priority.MEDIUM,
                    assignee_id="Sarah Chen",
                    due_date="2024-05-20",
                    story_points=5,
                ),
            ],
        ),
        Project(
            id="p2",
            name="Orbit Dashboard SDK",
            description="Public SDK for third-party integration with our project tracking APIs.",
            progress=30,
            status=ProjectStatus.ACTIVE,
            priority=Priority.MEDIUM,
            health=ProjectHealth.HEALTHY,
            start_date="2024-02-15",
            end_date="2024-09-30",
            owner_id="James Miller",
            created_at="2024-02-15T10:30:00Z",
            members=["John Doe", "Emily Watson"],
            tasks=[
                Task(
                    id="t3",
                    project_id="p2",
                    title="Documentation Draft",
                    description="Write initial README and API endpoint docs.",
                    status=TaskStatus.TODO,
                    priority=Priority.MEDIUM,
                    assignee_id="John Doe",
                    due_date="2024-07-01",
                    story_points=3,
                ),
            ],
        ),
    ]
