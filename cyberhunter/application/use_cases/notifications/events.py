"""Helpers to queue domain notifications inside the caller's transaction.

Queued notifications are only flushed. The calling use case commits and then
hands them to :func:`cyberhunter.infrastructure.notifications.deliver_notifications`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    Notification,
    NotificationAction,
)
from cyberhunter.infrastructure.repositories import NotificationRepository


def fan_out_recipients(
    recipient_ids: Iterable[int | None], *, actor_id: int | None = None
) -> list[int]:
    """Drop empty ids and the actor, keeping the first occurrence of each user."""

    recipients: list[int] = []
    for recipient_id in recipient_ids:
        if not recipient_id or recipient_id == actor_id or recipient_id in recipients:
            continue
        recipients.append(recipient_id)
    return recipients


def _build(
    recipient_id: int,
    *,
    type: str,
    title: str,
    content: str,
    link: str | None,
    priority: str,
    created_by: int | None,
    actions: Sequence[NotificationAction] | None,
    payload: dict[str, Any] | None,
    expires_at: datetime | None,
    refs: dict[str, int | None],
) -> Notification:
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Invalid notification type: {type}")
    if priority not in NOTIFICATION_PRIORITIES:
        raise ValueError(f"Invalid notification priority: {priority}")
    return Notification(
        id=None,
        recipient_id=recipient_id,
        type=type,
        title=title,
        content=content,
        link=link,
        priority=priority,
        created_by=created_by,
        project_id=refs.get("project_id"),
        team_id=refs.get("team_id"),
        task_id=refs.get("task_id"),
        proposal_id=refs.get("proposal_id"),
        message_id=refs.get("message_id"),
        actions=list(actions or []),
        payload=dict(payload or {}),
        expires_at=expires_at,
    )


def queue_fan_out(
    session: Session,
    *,
    recipient_ids: Iterable[int | None],
    actor_id: int | None = None,
    created_by: int | None = None,
    type: str,
    title: str,
    content: str,
    link: str | None = None,
    priority: str = "normal",
    actions: Sequence[NotificationAction] | None = None,
    payload: dict[str, Any] | None = None,
    expires_at: datetime | None = None,
    **refs: int | None,
) -> list[Notification]:
    """Create one notification per recipient, never for the actor.

    ``created_by`` defaults to the actor.
    """

    recipients = fan_out_recipients(recipient_ids, actor_id=actor_id)
    if not recipients:
        return []
    notifications = [
        _build(
            recipient_id,
            type=type,
            title=title,
            content=content,
            link=link,
            priority=priority,
            created_by=created_by if created_by is not None else actor_id,
            actions=actions,
            payload=payload,
            expires_at=expires_at,
            refs=refs,
        )
        for recipient_id in recipients
    ]
    return NotificationRepository(session).add_many(notifications)


def queue_notification(
    session: Session,
    *,
    recipient_id: int,
    actor_id: int | None = None,
    **fields: Any,
) -> Notification | None:
    """Queue a single notification; ``None`` when the recipient is the actor."""

    queued = queue_fan_out(session, recipient_ids=[recipient_id], actor_id=actor_id, **fields)
    return queued[0] if queued else None


__all__ = ["fan_out_recipients", "queue_fan_out", "queue_notification"]
