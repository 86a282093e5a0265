"""Use cases for task comments."""

from __future__ import annotations

from dataclasses import replace
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.application.use_cases.projects import ensure_project_participant
from cyberhunter.domain.entities import User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import TaskRepository
from cyberhunter.utils import now_in_app_timezone

from .access import load_task, task_link


def add_comment(session: Session, *, actor: User, task_id: int, content: str) -> dict[str, Any]:
    """Append a comment and notify the creator and assignees."""

    if not content.strip():
        raise ValueError("Comment content is required")
    task, project = load_task(session, task_id)
    ensure_project_participant(session, project, actor)

    comment = {
        "id": uuid4().hex,
        "user": actor.id,
        "content": content.strip(),
        "created_at": now_in_app_timezone().isoformat(),
    }
    TaskRepository(session).update(replace(task, comments=[*task.comments, comment]))
    notifications = queue_fan_out(
        session,
        recipient_ids=[*task.assignee_ids, task.creator_id],
        actor_id=actor.id,
        type="task",
        title="New Comment on Task",
        content=f"{actor.name} commented on task: {task.title}",
        link=task_link(task),
        project_id=task.project_id,
        task_id=task.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return comment


def delete_comment(session: Session, *, actor: User, task_id: int, comment_id: str) -> None:
    task, _ = load_task(session, task_id)
    comment = next((item for item in task.comments if item.get("id") == comment_id), None)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.get("user") != actor.id:
        raise PermissionDeniedError("Not authorized to delete this comment")

    remaining = [item for item in task.comments if item.get("id") != comment_id]
    TaskRepository(session).update(replace(task, comments=remaining))
    session.commit()


__all__ = ["add_comment", "delete_comment"]
