"""Use cases tracking the time assignees spend on a task."""

from __future__ import annotations

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.projects import ensure_project_participant
from cyberhunter.domain.entities import TimeEntry, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import TaskRepository
from cyberhunter.utils import now_in_app_timezone

from .access import get_task_or_404, load_task

SECONDS_PER_HOUR = 3600


def _clean(description: str | None) -> str | None:
    return description.strip() if description and description.strip() else None


def start_time_tracking(
    session: Session, *, actor: User, task_id: int, description: str | None = None
) -> TimeEntry:
    """Open a work session for ``actor``; only assignees track time."""

    task = get_task_or_404(session, task_id)
    if not task.is_assigned(actor.id):
        raise PermissionDeniedError("Not authorized to track time for this task")

    repository = TaskRepository(session)
    if repository.open_time_entry(task.id, actor.id) is not None:
        raise ValueError("You already have an active time tracking session for this task")
    entry = repository.start_time_entry(
        task.id, actor.id, started_at=now_in_app_timezone(), description=_clean(description)
    )
    session.commit()
    return entry


def stop_time_tracking(
    session: Session, *, actor: User, task_id: int, description: str | None = None
) -> tuple[TimeEntry, float]:
    """Close the open session of ``actor`` and return it with the task's new total hours.

    The duration is rounded to hundredths of an hour and added to the task total.
    """

    task = get_task_or_404(session, task_id)
    repository = TaskRepository(session)
    entry = repository.open_time_entry(task.id, actor.id)
    if entry is None:
        raise NotFoundError("No active time tracking session found")

    ended_at = now_in_app_timezone()
    elapsed = max((ended_at - entry.started_at).total_seconds(), 0.0)
    duration = round(elapsed / SECONDS_PER_HOUR, 2)
    notes = "\n".join(part for part in (entry.description, _clean(description)) if part)

    closed = repository.close_time_entry(
        entry.id, ended_at=ended_at, duration_hours=duration, description=notes or None
    )
    if closed is None:
        raise NotFoundError("No active time tracking session found")
    total = repository.add_actual_hours(task.id, duration)
    session.commit()
    return closed, total


def list_time_entries(session: Session, *, actor: User, task_id: int) -> list[TimeEntry]:
    task, project = load_task(session, task_id)
    ensure_project_participant(session, project, actor)
    return TaskRepository(session).list_time_entries(task.id)


__all__ = ["list_time_entries", "start_time_tracking", "stop_time_tracking"]
