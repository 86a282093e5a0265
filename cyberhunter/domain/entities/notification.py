"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPES = (
    "project",
    "proposal",
    "team",
    "task",
    "message",
    "payment",
    "milestone",
    "system",
    "badge",
)
NOTIFICATION_PRIORITIES = ("low", "normal", "high", "urgent")
ACTION_METHODS = ("GET", "POST", "PUT", "DELETE")

DISPATCH_PENDING = "pending"
DISPATCH_SENT = "sent"
DISPATCH_FAILED = "failed"


@dataclass
class NotificationAction:
    """A follow-up the recipient can trigger from the notification."""

    label: str
    action_type: str
    value: str
    method: str = "POST"
    completed: bool = False
    completed_at: datetime | None = None


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: int
    type: str
    title: str
    content: str
    link: str | None = None
    priority: str = "normal"
    created_by: int | None = None
    project_id: int | None = None
    team_id: int | None = None
    task_id: int | None = None
    proposal_id: int | None = None
    message_id: int | None = None
    actions: list[NotificationAction] = field(default_factory=list)
    payload: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    read_at: datetime | None = None
    expires_at: datetime | None = None
    dispatch_status: str = DISPATCH_PENDING
    dispatch_attempts: int = 0
    dispatched_at: datetime | None = None
    created_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


__all__ = [
    "ACTION_METHODS",
    "DISPATCH_FAILED",
    "DISPATCH_PENDING",
    "DISPATCH_SENT",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_TYPES",
    "Notification",
    "NotificationAction",
]
