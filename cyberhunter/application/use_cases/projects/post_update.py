"""Use case broadcasting a progress update to a project's participants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.domain.entities import Notification, User
from cyberhunter.infrastructure.notifications import (
    deliver_notifications,
    project_room,
    publish_event,
)
from cyberhunter.utils import now_in_app_timezone

from .access import ensure_project_participant, get_project_or_404, project_participant_ids


@dataclass
class ProjectUpdate:
    project_id: int
    update_type: str
    content: str
    author: User
    timestamp: datetime
    notifications: list[Notification]

    def as_event(self) -> dict:
        return {
            "projectId": self.project_id,
            "updateType": self.update_type,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "user": {"id": self.author.id, "name": self.author.name},
        }


def post_project_update(
    session: Session,
    *,
    actor: User,
    project_id: int,
    update_type: str,
    content: str,
) -> ProjectUpdate:
    """Notify participants and emit ``project-updated`` to the project room."""

    update_type = update_type.strip()
    if not update_type or not content.strip():
        raise ValueError("Update type and content are required")
    project = get_project_or_404(session, project_id)
    ensure_project_participant(session, project, actor)

    notifications = queue_fan_out(
        session,
        recipient_ids=project_participant_ids(session, project),
        actor_id=actor.id,
        type="project",
        title=f"Project Update: {update_type}",
        content=content,
        link=f"/projects/{project.id}",
        project_id=project.id,
    )
    session.commit()

    update = ProjectUpdate(
        project_id=project.id,
        update_type=update_type,
        content=content,
        author=actor,
        timestamp=now_in_app_timezone(),
        notifications=notifications,
    )
    publish_event(project_room(project.id), "project-updated", update.as_event())
    deliver_notifications(session, notifications)
    return update


__all__ = ["ProjectUpdate", "post_project_update"]
