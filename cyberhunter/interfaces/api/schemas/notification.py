"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["low", "normal", "high", "urgent"]


class NotificationActionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    action_type: str
    value: str
    method: str
    completed: bool = False
    completed_at: datetime | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_id: int
    type: str
    title: str
    content: str
    link: str | None = None
    priority: str
    created_by: int | None = None
    project_id: int | None = None
    team_id: int | None = None
    task_id: int | None = None
    proposal_id: int | None = None
    message_id: int | None = None
    actions: list[NotificationActionRead] = Field(default_factory=list)
    payload: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None


class NotificationSend(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=500)
    link: str | None = None
    priority: Priority = "normal"
    expires_at: datetime | None = None


class SystemNotificationCreate(NotificationSend):
    recipient_ids: list[int] = Field(default_factory=list)


class UserNotificationCreate(NotificationSend):
    type: str = "system"


__all__ = [
    "NotificationActionRead",
    "NotificationRead",
    "NotificationSend",
    "SystemNotificationCreate",
    "UserNotificationCreate",
]
