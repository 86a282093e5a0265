"""Realtime delivery helpers for the infrastructure layer."""

from .manager import (
    RoomConnectionManager,
    connection_manager,
    project_room,
    team_room,
    user_room,
)
from .outbox import deliver_notifications, flush_pending_notifications, run_outbox_worker
from .publisher import (
    RealtimeEventPublisher,
    publish_event,
    realtime_publisher,
    serialize_message,
    serialize_notification,
)

__all__ = [
    "RealtimeEventPublisher",
    "RoomConnectionManager",
    "connection_manager",
    "deliver_notifications",
    "flush_pending_notifications",
    "project_room",
    "publish_event",
    "realtime_publisher",
    "run_outbox_worker",
    "serialize_message",
    "serialize_notification",
    "team_room",
    "user_room",
]
