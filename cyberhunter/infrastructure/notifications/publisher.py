"""Utility helpers to push realtime events to websocket rooms."""

from __future__ import annotations

import asyncio
import copy
import logging
from datetime import datetime
from typing import Any

from anyio import from_thread
from fastapi import WebSocket

from cyberhunter.domain.entities import ChatMessage, Notification

from .manager import RoomConnectionManager, connection_manager, user_room

logger = logging.getLogger(__name__)


class RealtimeEventPublisher:
    """Wrap events in the ``{"type", "data"}`` envelope and schedule delivery.

    Delivery is fire-and-forget: nothing waits for the client to receive it.
    """

    def __init__(self, manager: RoomConnectionManager) -> None:
        self._manager = manager

    def publish(
        self,
        room: str,
        event_type: str,
        payload: Any,
        *,
        exclude: WebSocket | None = None,
    ) -> bool:
        """Schedule ``event_type`` for ``room``.

        Returns ``False`` when no event loop is reachable from the caller.
        """

        message = {"type": event_type, "data": copy.deepcopy(payload)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._send, room, message, exclude)
            except RuntimeError:
                logger.debug("No event loop available to publish %s to %s", event_type, room)
                return False
        else:
            loop.create_task(self._send(room, message, exclude))
        return True

    def publish_notification(self, notification: Notification) -> bool:
        return self.publish(
            user_room(notification.recipient_id),
            "notification",
            serialize_notification(notification),
        )

    async def _send(
        self, room: str, message: dict[str, Any], exclude: WebSocket | None
    ) -> None:
        await self._manager.send_to_room(room, message, exclude=exclude)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "recipient": notification.recipient_id,
        "type": notification.type,
        "title": notification.title,
        "content": notification.content,
        "link": notification.link,
        "priority": notification.priority,
        "createdBy": notification.created_by,
        "project": notification.project_id,
        "team": notification.team_id,
        "task": notification.task_id,
        "proposal": notification.proposal_id,
        "message": notification.message_id,
        "actions": [
            {
                "label": action.label,
                "type": action.action_type,
                "value": action.value,
                "method": action.method,
                "completed": action.completed,
            }
            for action in notification.actions
        ],
        "payload": notification.payload or {},
        "isRead": notification.is_read,
        "readAt": _isoformat(notification.read_at),
        "expiresAt": _isoformat(notification.expires_at),
        "createdAt": _isoformat(notification.created_at),
    }


def serialize_message(message: ChatMessage) -> dict[str, Any]:
    """Return the websocket payload representation for a chat ``message``."""

    attachment = message.attachment
    return {
        "id": message.id,
        "sender": message.sender_id,
        "recipient": message.recipient_id,
        "team": message.team_id,
        "project": message.project_id,
        "content": message.content,
        "messageType": message.message_type,
        "fileUrl": attachment.url if attachment else None,
        "fileName": attachment.name if attachment else None,
        "fileSize": attachment.size if attachment else None,
        "replyTo": message.reply_to_id,
        "isRead": message.is_read,
        "readBy": [
            {"user": user_id, "readAt": _isoformat(read_at)}
            for user_id, read_at in message.read_by.items()
        ],
        "reactions": [
            {"user": reaction.user_id, "emoji": reaction.emoji}
            for reaction in message.reactions
        ],
        "createdAt": _isoformat(message.created_at),
    }


realtime_publisher = RealtimeEventPublisher(connection_manager)


def publish_event(
    room: str, event_type: str, payload: Any, *, exclude: WebSocket | None = None
) -> bool:
    """Public helper that delegates to the shared publisher instance."""

    return realtime_publisher.publish(room, event_type, payload, exclude=exclude)


__all__ = [
    "RealtimeEventPublisher",
    "publish_event",
    "realtime_publisher",
    "serialize_message",
    "serialize_notification",
]
