"""Use case assigning a team to an open project."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out, queue_notification
from cyberhunter.application.use_cases.projects import get_project_or_404
from cyberhunter.domain.entities import (
    PROJECT_STATUS_IN_PROGRESS,
    PROJECT_STATUS_OPEN,
    Project,
    User,
)
from cyberhunter.domain.errors import PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import ProjectRepository
from cyberhunter.utils import now_in_app_timezone

from .manage_teams import get_team_or_404


def assign_team_to_project(
    session: Session, *, actor: User, team_id: int, project_id: int
) -> Project:
    """Start ``project_id`` with ``team_id`` as its assigned team.

    Either a team admin or the project's client may do this, and only while the
    project is still open.
    """

    team = get_team_or_404(session, team_id)
    project = get_project_or_404(session, project_id)
    if not (team.is_admin(actor.id) or project.is_owned_by(actor.id)):
        raise PermissionDeniedError("Not authorized to assign this team to the project")
    if project.status != PROJECT_STATUS_OPEN:
        raise ValueError("Project is not open for assignment")

    saved = ProjectRepository(session).update(
        replace(
            project,
            status=PROJECT_STATUS_IN_PROGRESS,
            assigned_team_id=team.id,
            start_date=now_in_app_timezone(),
        )
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=team.member_ids,
        actor_id=actor.id,
        type="project",
        title="Team Assigned to Project",
        content=f"Your team {team.name} has been assigned to the project: {saved.title}",
        link=f"/projects/{saved.id}",
        project_id=saved.id,
        team_id=team.id,
    )
    if saved.client_id not in team.member_ids:
        client_notice = queue_notification(
            session,
            recipient_id=saved.client_id,
            actor_id=actor.id,
            type="project",
            title="Team Assigned to Your Project",
            content=f"The team {team.name} has been assigned to your project: {saved.title}",
            link=f"/projects/{saved.id}",
            project_id=saved.id,
            team_id=team.id,
        )
        if client_notice is not None:
            notifications.append(client_notice)
    session.commit()
    deliver_notifications(session, notifications)
    return saved


__all__ = ["assign_team_to_project"]
