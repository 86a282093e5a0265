"""Use cases for creating, reading, updating and deleting project tasks."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.application.use_cases.projects import (
    ensure_project_participant,
    get_project_or_404,
    project_participant_ids,
)
from cyberhunter.domain.entities import (
    TASK_PRIORITIES,
    TASK_STATUSES,
    TASK_STATUS_DONE,
    Notification,
    Task,
    User,
)
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import (
    ProjectRepository,
    TaskRepository,
    UserRepository,
)
from cyberhunter.utils import PageRequest, now_in_app_timezone

from .access import ensure_project_worker, is_project_worker, load_task, task_link

logger = logging.getLogger(__name__)

TASK_COMPLETION_POINTS = 10


def _validate_choices(*, status: str | None, priority: str | None) -> None:
    if status is not None and status not in TASK_STATUSES:
        raise ValueError(f"Invalid task status: {status}")
    if priority is not None and priority not in TASK_PRIORITIES:
        raise ValueError(f"Invalid task priority: {priority}")


def _validate_dependencies(session: Session, project_id: int, dependency_ids: list[int]) -> None:
    repository = TaskRepository(session)
    for dependency_id in dependency_ids:
        dependency = repository.get(dependency_id)
        if dependency is None:
            raise NotFoundError("Dependency not found")
        if dependency.project_id != project_id:
            raise ValueError("Dependency must be from the same project")


def create_task(
    session: Session,
    *,
    actor: User,
    project_id: int,
    title: str,
    description: str | None = None,
    milestone_id: int | None = None,
    parent_task_id: int | None = None,
    status: str = "not_started",
    priority: str = "medium",
    assignee_ids: list[int] | None = None,
    due_date: datetime | None = None,
    estimated_hours: float | None = None,
    tags: list[str] | None = None,
    dependency_ids: list[int] | None = None,
) -> Task:
    """Create a task, or a subtask when ``parent_task_id`` is given.

    Assignees other than the creator receive a "New Task Assignment"
    notification.
    """

    if not title.strip():
        raise ValueError("Task title is required")
    _validate_choices(status=status, priority=priority)
    project = get_project_or_404(session, project_id)
    ensure_project_worker(project, actor, action="create tasks for this project")

    if milestone_id is not None:
        if ProjectRepository(session).get_milestone(project_id, milestone_id) is None:
            raise NotFoundError("Milestone not found")
    repository = TaskRepository(session)
    if parent_task_id is not None:
        parent = repository.get(parent_task_id)
        if parent is None or parent.project_id != project_id:
            raise NotFoundError("Parent task not found")

    assignees = list(dict.fromkeys(assignee_ids or []))
    participants = set(project_participant_ids(session, project))
    outsiders = [user_id for user_id in assignees if user_id not in participants]
    if outsiders:
        raise ValueError("Assignees must be participants of the project")
    dependencies = list(dict.fromkeys(dependency_ids or []))
    _validate_dependencies(session, project_id, dependencies)

    now = now_in_app_timezone()
    task = repository.add(
        Task(
            id=None,
            title=title.strip(),
            project_id=project_id,
            creator_id=actor.id,
            description=description,
            milestone_id=milestone_id,
            parent_task_id=parent_task_id,
            status=status,
            priority=priority,
            assignee_ids=assignees,
            due_date=due_date,
            estimated_hours=estimated_hours,
            tags=[tag.strip() for tag in tags or [] if tag.strip()],
            dependencies=dependencies,
            progress=100 if status == TASK_STATUS_DONE else 0,
            completed_at=now if status == TASK_STATUS_DONE else None,
        )
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=task.assignee_ids,
        actor_id=actor.id,
        type="task",
        title="New Task Assignment",
        content=f"You have been assigned to a new task: {task.title}",
        link=task_link(task),
        project_id=project_id,
        task_id=task.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return task


def create_subtask(session: Session, *, actor: User, task_id: int, title: str, **fields) -> Task:
    parent, _ = load_task(session, task_id)
    return create_task(
        session,
        actor=actor,
        project_id=parent.project_id,
        parent_task_id=parent.id,
        title=title,
        **fields,
    )


def get_task(session: Session, *, actor: User, task_id: int) -> Task:
    task, project = load_task(session, task_id)
    if not (is_project_worker(project, actor) or task.is_assigned(actor.id)):
        raise PermissionDeniedError("Not authorized to view this task")
    return task


def list_project_tasks(
    session: Session,
    *,
    actor: User,
    project_id: int,
    page: PageRequest,
    status: str | None = None,
    priority: str | None = None,
) -> tuple[list[Task], int]:
    project = get_project_or_404(session, project_id)
    ensure_project_participant(session, project, actor)
    return TaskRepository(session).list_for_project(
        project_id, status=status, priority=priority, offset=page.offset, limit=page.limit
    )


def list_my_tasks(session: Session, *, actor: User) -> list[Task]:
    return TaskRepository(session).list_for_assignee(actor.id)


def _apply_status(session: Session, task: Task, status: str) -> Task:
    """Return ``task`` moved to ``status``, rewarding assignees on completion."""

    if status == task.status:
        return task
    if status == TASK_STATUS_DONE:
        UserRepository(session).increment_counters(
            task.assignee_ids, points=TASK_COMPLETION_POINTS
        )
        return replace(task, status=status, progress=100, completed_at=now_in_app_timezone())
    return replace(task, status=status, completed_at=None)


def _status_notifications(
    session: Session, *, actor: User, task: Task, client_id: int
) -> list[Notification]:
    return queue_fan_out(
        session,
        recipient_ids=[task.creator_id, client_id],
        actor_id=actor.id,
        type="task",
        title="Task Status Updated",
        content=f'The task "{task.title}" has been updated to {task.status}',
        link=task_link(task),
        project_id=task.project_id,
        task_id=task.id,
    )


def update_task(
    session: Session,
    *,
    actor: User,
    task_id: int,
    title: str | None = None,
    description: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    milestone_id: int | None = None,
    due_date: datetime | None = None,
    estimated_hours: float | None = None,
    tags: list[str] | None = None,
) -> Task:
    task, project = load_task(session, task_id)
    allowed = (
        is_project_worker(project, actor)
        or task.creator_id == actor.id
        or task.is_assigned(actor.id)
    )
    if not allowed:
        raise PermissionDeniedError("Not authorized to update this task")
    _validate_choices(status=status, priority=priority)
    if milestone_id is not None:
        if ProjectRepository(session).get_milestone(project.id, milestone_id) is None:
            raise NotFoundError("Milestone not found")

    previous_status = task.status
    updated = replace(
        task,
        title=title.strip() if title is not None else task.title,
        description=description if description is not None else task.description,
        priority=priority or task.priority,
        milestone_id=milestone_id if milestone_id is not None else task.milestone_id,
        due_date=due_date if due_date is not None else task.due_date,
        estimated_hours=estimated_hours if estimated_hours is not None else task.estimated_hours,
        tags=[tag.strip() for tag in tags if tag.strip()] if tags is not None else task.tags,
    )
    if not updated.title:
        raise ValueError("Task title is required")
    if status is not None:
        updated = _apply_status(session, updated, status)

    saved = TaskRepository(session).update(updated)
    notifications: list[Notification] = []
    if saved.status != previous_status:
        notifications = _status_notifications(
            session, actor=actor, task=saved, client_id=project.client_id
        )
    session.commit()
    deliver_notifications(session, notifications)
    return saved


def update_progress(session: Session, *, actor: User, task_id: int, progress: int) -> Task:
    """Set the completion percentage; reaching 100 marks the task done."""

    if not 0 <= progress <= 100:
        raise ValueError("Progress must be between 0 and 100")
    task, project = load_task(session, task_id)
    if not (is_project_worker(project, actor) or task.is_assigned(actor.id)):
        raise PermissionDeniedError("Not authorized to update this task's progress")

    previous_status = task.status
    updated = replace(task, progress=progress)
    if progress == 100:
        updated = _apply_status(session, updated, TASK_STATUS_DONE)
    saved = TaskRepository(session).update(updated)
    notifications: list[Notification] = []
    if saved.status != previous_status:
        notifications = _status_notifications(
            session, actor=actor, task=saved, client_id=project.client_id
        )
    session.commit()
    deliver_notifications(session, notifications)
    return saved


def delete_task(session: Session, *, actor: User, task_id: int) -> list[int]:
    """Delete a task together with all of its subtasks."""

    task, project = load_task(session, task_id)
    if not (project.is_owned_by(actor.id) or task.creator_id == actor.id):
        raise PermissionDeniedError("Not authorized to delete this task")
    removed = TaskRepository(session).delete_tree(task.id)
    session.commit()
    logger.info("Deleted task %s with %d subtasks", task.id, len(removed) - 1)
    return removed


__all__ = [
    "TASK_COMPLETION_POINTS",
    "create_subtask",
    "create_task",
    "delete_task",
    "get_task",
    "list_my_tasks",
    "list_project_tasks",
    "update_progress",
    "update_task",
]
