"""Use cases for project tasks."""

from .access import get_task_or_404
from .assignments import assign_user, unassign_user
from .comments import add_comment, delete_comment
from .dependencies import add_dependency, remove_dependency
from .manage_tasks import (
    TASK_COMPLETION_POINTS,
    create_subtask,
    create_task,
    delete_task,
    get_task,
    list_my_tasks,
    list_project_tasks,
    update_progress,
    update_task,
)
from .time_tracking import list_time_entries, start_time_tracking, stop_time_tracking

__all__ = [
    "TASK_COMPLETION_POINTS",
    "add_comment",
    "add_dependency",
    "assign_user",
    "create_subtask",
    "create_task",
    "delete_comment",
    "delete_task",
    "get_task",
    "get_task_or_404",
    "list_my_tasks",
    "list_project_tasks",
    "list_time_entries",
    "remove_dependency",
    "start_time_tracking",
    "stop_time_tracking",
    "unassign_user",
    "update_progress",
    "update_task",
]
