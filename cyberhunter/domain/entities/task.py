"""Domain entity representing a project task."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

TASK_STATUS_NOT_STARTED = "not_started"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_IN_REVIEW = "in_review"
TASK_STATUS_DONE = "done"
TASK_STATUSES = (
    TASK_STATUS_NOT_STARTED,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_IN_REVIEW,
    TASK_STATUS_DONE,
)
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


@dataclass
class Task:
    """Unit of work inside a project, optionally nested under a parent task."""

    id: int | None
    title: str
    project_id: int
    creator_id: int
    description: str | None = None
    milestone_id: int | None = None
    parent_task_id: int | None = None
    status: str = TASK_STATUS_NOT_STARTED
    priority: str = "medium"
    assignee_ids: list[int] = field(default_factory=list)
    due_date: datetime | None = None
    estimated_hours: float | None = None
    tags: list[str] = field(default_factory=list)
    dependencies: list[int] = field(default_factory=list)
    progress: int = 0
    actual_hours: float = 0.0
    comments: list[dict[str, Any]] = field(default_factory=list)
    subtask_ids: list[int] = field(default_factory=list)
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int | None = None

    def is_assigned(self, user_id: int) -> bool:
        return user_id in self.assignee_ids


@dataclass
class TimeEntry:
    """One tracked work session of a user on a task; open while ``ended_at`` is unset."""

    id: int | None
    task_id: int
    user_id: int
    started_at: datetime
    ended_at: datetime | None = None
    duration_hours: float | None = None
    description: str | None = None

    @property
    def is_open(self) -> bool:
        return self.ended_at is None


__all__ = [
    "TASK_PRIORITIES",
    "TASK_STATUSES",
    "TASK_STATUS_DONE",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_IN_REVIEW",
    "TASK_STATUS_NOT_STARTED",
    "Task",
    "TimeEntry",
]
