"""Use cases adding and removing task assignees."""

from __future__ import annotations

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_notification
from cyberhunter.application.use_cases.projects import project_participant_ids
from cyberhunter.domain.entities import Task, User
from cyberhunter.domain.errors import ConflictError, NotFoundError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import TaskRepository, UserRepository

from .access import ensure_project_worker, get_task_or_404, load_task, task_link


def assign_user(session: Session, *, actor: User, task_id: int, user_id: int) -> Task:
    task, project = load_task(session, task_id)
    ensure_project_worker(project, actor, action="assign this task")
    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User not found")
    if user_id not in project_participant_ids(session, project):
        raise ValueError("User is not part of the project")
    if task.is_assigned(user_id):
        raise ValueError("User is already assigned to this task")

    if not TaskRepository(session).add_assignees(task.id, [user_id]):
        raise ConflictError("User was assigned by another request")
    notification = queue_notification(
        session,
        recipient_id=user_id,
        actor_id=actor.id,
        type="task",
        title="Task Assignment",
        content=f"You have been assigned to task: {task.title}",
        link=task_link(task),
        project_id=task.project_id,
        task_id=task.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return get_task_or_404(session, task.id)


def unassign_user(session: Session, *, actor: User, task_id: int, user_id: int) -> Task:
    task, project = load_task(session, task_id)
    ensure_project_worker(project, actor, action="unassign from this task")
    if not TaskRepository(session).remove_assignee(task.id, user_id):
        raise ValueError("User is not assigned to this task")

    notification = queue_notification(
        session,
        recipient_id=user_id,
        actor_id=actor.id,
        type="task",
        title="Task Unassignment",
        content=f"You have been unassigned from task: {task.title}",
        link=task_link(task),
        project_id=task.project_id,
        task_id=task.id,
    )
    session.commit()
    deliver_notifications(session, [notification] if notification else [])
    return get_task_or_404(session, task.id)


__all__ = ["assign_user", "unassign_user"]
