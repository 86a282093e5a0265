"""Use cases for notifications and helpers to emit them."""

from .events import fan_out_recipients, queue_fan_out, queue_notification
from .manage import (
    complete_notification_action,
    count_unread_notifications,
    delete_notification,
    delete_read_notifications,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    send_system_notification,
    send_team_notification,
    send_user_notification,
)

__all__ = [
    "complete_notification_action",
    "count_unread_notifications",
    "delete_notification",
    "delete_read_notifications",
    "fan_out_recipients",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "queue_fan_out",
    "queue_notification",
    "send_system_notification",
    "send_team_notification",
    "send_user_notification",
]
