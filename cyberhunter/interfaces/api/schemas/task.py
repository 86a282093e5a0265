"""Task schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["not_started", "in_progress", "in_review", "done"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


class SubtaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    milestone_id: int | None = None
    status: TaskStatus = "not_started"
    priority: TaskPriority = "medium"
    assignee_ids: list[int] = Field(default_factory=list)
    due_date: datetime | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    tags: list[str] = Field(default_factory=list)
    dependency_ids: list[int] = Field(default_factory=list)


class TaskCreate(SubtaskCreate):
    project_id: int
    parent_task_id: int | None = None


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    milestone_id: int | None = None
    due_date: datetime | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    tags: list[str] | None = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    project_id: int
    milestone_id: int | None = None
    parent_task_id: int | None = None
    status: str
    priority: str
    assignee_ids: list[int] = Field(default_factory=list)
    creator_id: int
    due_date: datetime | None = None
    estimated_hours: float | None = None
    tags: list[str] = Field(default_factory=list)
    dependencies: list[int] = Field(default_factory=list)
    progress: int = 0
    actual_hours: float = 0.0
    comments: list[dict[str, Any]] = Field(default_factory=list)
    subtask_ids: list[int] = Field(default_factory=list)
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AssignRequest(BaseModel):
    user_id: int


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class ProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0, le=100)


class DependencyCreate(BaseModel):
    dependency_id: int


class TimeTrackingRequest(BaseModel):
    description: str | None = Field(default=None, max_length=500)


class TimeEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    user_id: int
    started_at: datetime
    ended_at: datetime | None = None
    duration_hours: float | None = None
    description: str | None = None


__all__ = [
    "AssignRequest",
    "CommentCreate",
    "DependencyCreate",
    "ProgressUpdate",
    "SubtaskCreate",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "TimeEntryRead",
    "TimeTrackingRequest",
]
