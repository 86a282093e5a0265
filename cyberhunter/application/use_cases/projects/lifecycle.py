"""Use cases closing a project: completion, reviews and bookmarks."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.domain.entities import (
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_IN_PROGRESS,
    REVIEW_SIDE_CLIENT,
    REVIEW_SIDE_FREELANCER,
    Project,
    User,
)
from cyberhunter.domain.errors import PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import ProjectRepository, UserRepository
from cyberhunter.utils import now_in_app_timezone

from .access import ensure_project_owner, get_project_or_404

COMPLETION_POINTS = 50


def complete_project(session: Session, *, actor: User, project_id: int) -> Project:
    """Close an in-progress project and reward its freelancers."""

    project = get_project_or_404(session, project_id)
    ensure_project_owner(project, actor, action="complete")
    if project.status != PROJECT_STATUS_IN_PROGRESS:
        raise ValueError(f"Project cannot be completed when status is {project.status}")

    saved = ProjectRepository(session).update(
        replace(project, status=PROJECT_STATUS_COMPLETED, completed_date=now_in_app_timezone())
    )
    UserRepository(session).increment_counters(
        saved.assigned_freelancer_ids, points=COMPLETION_POINTS, completed_projects=1
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=saved.assigned_freelancer_ids,
        actor_id=actor.id,
        type="project",
        title="Project Completed",
        content=f'The project "{saved.title}" has been marked as completed. '
        "Please leave a review!",
        link=f"/projects/{saved.id}",
        project_id=saved.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return saved


def add_review(
    session: Session,
    *,
    actor: User,
    project_id: int,
    rating: int,
    comment: str | None = None,
) -> Project:
    """Store the client's or a freelancer's review; each side reviews once."""

    project = get_project_or_404(session, project_id)
    if project.status != PROJECT_STATUS_COMPLETED:
        raise ValueError("Project must be completed before adding a review")
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")

    if project.is_owned_by(actor.id):
        side, recipients = REVIEW_SIDE_CLIENT, project.assigned_freelancer_ids
        content = f'The client has left a review for the project "{project.title}".'
    elif project.has_freelancer(actor.id):
        side, recipients = REVIEW_SIDE_FREELANCER, [project.client_id]
        content = f'A freelancer has left a review for the project "{project.title}".'
    else:
        raise PermissionDeniedError("Not authorized to add a review for this project")
    if side in project.reviews:
        raise ValueError(f"A {side} has already submitted a review for this project")

    reviews = dict(project.reviews)
    reviews[side] = {
        "rating": rating,
        "comment": comment,
        "reviewer": actor.id,
        "created_at": now_in_app_timezone().isoformat(),
    }
    saved = ProjectRepository(session).update(replace(project, reviews=reviews))
    notifications = queue_fan_out(
        session,
        recipient_ids=recipients,
        actor_id=actor.id,
        type="project",
        title="New Review Received",
        content=content,
        link=f"/projects/{project.id}",
        project_id=project.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return saved


def toggle_saved_project(session: Session, *, actor: User, project_id: int) -> bool:
    """Bookmark or un-bookmark a project; returns whether it is now saved."""

    get_project_or_404(session, project_id)
    saved = ProjectRepository(session).toggle_saved(project_id, actor.id)
    session.commit()
    return saved


def list_saved_projects(session: Session, *, actor: User) -> list[Project]:
    return ProjectRepository(session).list_saved(actor.id)


__all__ = ["add_review", "complete_project", "list_saved_projects", "toggle_saved_project"]
