from .models import (
    apply_task_changes,
    Priority,
    Project,
    ProjectHealth,
    ProjectStatus,
    Task,
    TaskStatus,
    User,
)

__all__ = ["apply_task_changes", "Priority", "Project", "ProjectHealth", "ProjectStatus", "Task", "TaskStatus", "User"]
