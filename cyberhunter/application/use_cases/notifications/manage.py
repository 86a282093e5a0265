"""Use cases for reading and managing a user's notifications."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Notification, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import deliver_notifications
from cyberhunter.infrastructure.repositories import (
    NotificationRepository,
    TeamRepository,
    UserRepository,
)
from cyberhunter.utils import PageRequest

from .events import queue_fan_out


def list_notifications(
    session: Session, *, user: User, page: PageRequest, unread_only: bool = False
) -> tuple[list[Notification], int]:
    """Return a page of visible notifications together with the total."""

    notifications, total = NotificationRepository(session).list_for_user(
        user.id, unread_only=unread_only, offset=page.offset, limit=page.limit
    )
    return list(notifications), total


def count_unread_notifications(session: Session, *, user: User) -> int:
    return NotificationRepository(session).unread_count(user.id)


def _owned(repository: NotificationRepository, notification_id: int, user: User) -> Notification:
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != user.id:
        raise PermissionDeniedError("Not authorized to access this notification")
    return notification


def mark_notification_read(session: Session, *, user: User, notification_id: int) -> Notification:
    repository = NotificationRepository(session)
    _owned(repository, notification_id, user)
    notification = repository.mark_read(notification_id)
    session.commit()
    return notification


def mark_all_notifications_read(session: Session, *, user: User) -> int:
    updated = NotificationRepository(session).mark_all_read(user.id)
    session.commit()
    return updated


def delete_notification(session: Session, *, user: User, notification_id: int) -> None:
    repository = NotificationRepository(session)
    _owned(repository, notification_id, user)
    repository.delete(notification_id)
    session.commit()


def delete_read_notifications(session: Session, *, user: User) -> int:
    deleted = NotificationRepository(session).delete_read(user.id)
    session.commit()
    return deleted


def complete_notification_action(
    session: Session, *, user: User, notification_id: int, action_index: int
) -> Notification:
    repository = NotificationRepository(session)
    notification = _owned(repository, notification_id, user)
    if action_index < 0 or action_index >= len(notification.actions):
        raise ValueError("Invalid action index")
    updated = repository.complete_action(notification_id, action_index)
    session.commit()
    return updated


def send_system_notification(
    session: Session,
    *,
    actor: User,
    title: str,
    content: str,
    recipient_ids: Sequence[int] | None = None,
    link: str | None = None,
    priority: str = "normal",
    expires_at: datetime | None = None,
) -> list[Notification]:
    """Send a ``system`` notification to ``recipient_ids`` or every active user."""

    users = UserRepository(session)
    if recipient_ids:
        known = users.existing_ids(recipient_ids)
        recipients = [
            recipient_id for recipient_id in dict.fromkeys(recipient_ids) if recipient_id in known
        ]
    else:
        recipients = users.list_active_ids()
    notifications = queue_fan_out(
        session,
        recipient_ids=recipients,
        created_by=actor.id,
        type="system",
        title=title,
        content=content,
        link=link,
        priority=priority,
        expires_at=expires_at,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return notifications


def send_user_notification(
    session: Session,
    *,
    actor: User,
    user_id: int,
    title: str,
    content: str,
    type: str = "system",
    link: str | None = None,
    priority: str = "normal",
    expires_at: datetime | None = None,
) -> Notification:
    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User not found")
    notifications = queue_fan_out(
        session,
        recipient_ids=[user_id],
        created_by=actor.id,
        type=type,
        title=title,
        content=content,
        link=link,
        priority=priority,
        expires_at=expires_at,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return notifications[0]


def send_team_notification(
    session: Session,
    *,
    actor: User,
    team_id: int,
    title: str,
    content: str,
    link: str | None = None,
    priority: str = "normal",
    expires_at: datetime | None = None,
) -> list[Notification]:
    """Notify every member of a team except the sender."""

    team = TeamRepository(session).get(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    if team.creator_id != actor.id and not team.is_admin(actor.id):
        raise PermissionDeniedError("Not authorized to create team notifications")
    notifications = queue_fan_out(
        session,
        recipient_ids=team.member_ids,
        actor_id=actor.id,
        type="team",
        title=title,
        content=content,
        link=link,
        priority=priority,
        expires_at=expires_at,
        team_id=team.id,
    )
    session.commit()
    deliver_notifications(session, notifications)
    return notifications


__all__ = [
    "complete_notification_action",
    "count_unread_notifications",
    "delete_notification",
    "delete_read_notifications",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "send_system_notification",
    "send_team_notification",
    "send_user_notification",
]
