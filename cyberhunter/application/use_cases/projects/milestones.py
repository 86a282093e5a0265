"""Use cases for project milestones."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.domain.entities import MILESTONE_STATUSES, Milestone, User
from cyberhunter.domain.errors import NotFoundError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import ProjectRepository
from cyberhunter.utils import now_in_app_timezone

from .access import ensure_project_owner, get_project_or_404

MILESTONE_COMPLETED = "completed"


def add_milestone(
    session: Session,
    *,
    actor: User,
    project_id: int,
    title: str,
    description: str | None = None,
    due_date: datetime | None = None,
    amount: float | None = None,
) -> Milestone:
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="add milestones to")
    if amount is not None and amount < 0:
        raise ValueError("Milestone amount cannot be negative")

    milestone = ProjectRepository(session).save_milestone(
        Milestone(
            id=None,
            project_id=project_id,
            title=title.strip(),
            description=description,
            due_date=due_date,
            amount=amount,
        )
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=project.assigned_freelancer_ids,
        actor_id=actor.id,
        type="milestone",
        title="New Milestone Added",
        content=f'A new milestone "{milestone.title}" has been added to your project: '
        f"{project.title}",
        link=f"/projects/{project.id}",
        project_id=project.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return milestone


def update_milestone(
    session: Session,
    *,
    actor: User,
    project_id: int,
    milestone_id: int,
    title: str | None = None,
    description: str | None = None,
    due_date: datetime | None = None,
    amount: float | None = None,
    status: str | None = None,
) -> Milestone:
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="update milestones of")
    repository = ProjectRepository(session)
    milestone = repository.get_milestone(project_id, milestone_id)
    if milestone is None:
        raise NotFoundError("Milestone not found")
    if status is not None and status not in MILESTONE_STATUSES:
        raise ValueError(f"Invalid milestone status: {status}")

    updated = replace(
        milestone,
        title=title.strip() if title is not None else milestone.title,
        description=description if description is not None else milestone.description,
        due_date=due_date if due_date is not None else milestone.due_date,
        amount=amount if amount is not None else milestone.amount,
        status=status if status is not None else milestone.status,
    )
    if updated.status == MILESTONE_COMPLETED and updated.completed_at is None:
        updated.completed_at = now_in_app_timezone()
    saved = repository.save_milestone(updated)
    session.commit()
    return saved


def complete_milestone(
    session: Session, *, actor: User, project_id: int, milestone_id: int
) -> Milestone:
    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="complete milestones of")
    repository = ProjectRepository(session)
    milestone = repository.get_milestone(project_id, milestone_id)
    if milestone is None:
        raise NotFoundError("Milestone not found")
    if milestone.status == MILESTONE_COMPLETED:
        raise ValueError("Milestone is already completed")

    saved = repository.save_milestone(
        replace(milestone, status=MILESTONE_COMPLETED, completed_at=now_in_app_timezone())
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=project.assigned_freelancer_ids,
        actor_id=actor.id,
        type="milestone",
        title="Milestone Completed",
        content=f'The milestone "{saved.title}" has been marked as completed for project: '
        f"{project.title}",
        link=f"/projects/{project.id}",
        project_id=project.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return saved


__all__ = ["add_milestone", "complete_milestone", "update_milestone"]
