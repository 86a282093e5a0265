"""Use cases posting chat messages into direct, team and project conversations."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.notifications import queue_fan_out
from cyberhunter.config import get_settings
from cyberhunter.domain.entities import (
    ATTACHMENT_MESSAGE_TYPES,
    MESSAGE_TYPES,
    Attachment,
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    TeamConversation,
    User,
)
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.notifications import (
    deliver_notifications,
    project_room,
    publish_event,
    serialize_message,
    team_room,
    user_room,
)
from cyberhunter.infrastructure.repositories import ChatRepository

from .access import authorize_conversation, can_view_message, reply_conversation


def _validate_payload(
    content: str, message_type: str, attachment: Attachment | None
) -> None:
    if message_type not in MESSAGE_TYPES:
        raise ValueError(f"Invalid message type: {message_type}")
    if attachment is None:
        if not content.strip():
            raise ValueError("Message content is required")
        return
    if message_type not in ATTACHMENT_MESSAGE_TYPES:
        raise ValueError("Only file and image messages can carry an attachment")
    if not attachment.url:
        raise ValueError("File URL is required for file messages")
    if attachment.size is not None:
        if attachment.size < 0:
            raise ValueError("File size cannot be negative")
        limit = get_settings().max_upload_size
        if attachment.size > limit:
            raise ValueError(f"File size exceeds the maximum of {limit} bytes")


def _notification_text(
    conversation: Conversation, *, actor: User, name: str, is_reply: bool
) -> tuple[str, str, str]:
    if isinstance(conversation, DirectConversation):
        if is_reply:
            return (
                "New Reply to Message",
                f"{actor.name} replied to your message",
                f"/messages/{actor.id}",
            )
        return (
            "New Private Message",
            f"You have received a new message from {actor.name}",
            f"/messages/{actor.id}",
        )
    if isinstance(conversation, TeamConversation):
        link = f"/teams/{conversation.team_id}/chat"
        if is_reply:
            return (
                "New Reply in Team Chat",
                f"{actor.name} replied to a message in the team: {name}",
                link,
            )
        return "New Team Message", f"{actor.name} sent a message to the team: {name}", link
    link = f"/projects/{conversation.project_id}/chat"
    if is_reply:
        return (
            "New Reply in Project Chat",
            f"{actor.name} replied to a message in the project: {name}",
            link,
        )
    return "New Project Message", f"{actor.name} sent a message in the project: {name}", link


def _room_event(conversation: Conversation) -> tuple[str, str]:
    if isinstance(conversation, DirectConversation):
        return user_room(conversation.recipient_id), "new-message"
    if isinstance(conversation, TeamConversation):
        return team_room(conversation.team_id), "new-team-message"
    return project_room(conversation.project_id), "new-project-message"


def send_message(
    session: Session,
    *,
    actor: User,
    conversation: Conversation,
    content: str,
    message_type: str = "text",
    attachment: Attachment | None = None,
    reply_to_id: int | None = None,
    exclude: Any = None,
) -> ChatMessage:
    """Store a message, notify the audience and push it to the conversation room.

    ``exclude`` is a websocket that should not receive the room event, used when
    the message arrives over that socket.
    """

    _validate_payload(content, message_type, attachment)
    if isinstance(conversation, DirectConversation) and conversation.recipient_id == actor.id:
        raise ValueError("Cannot send a message to yourself")
    access = authorize_conversation(session, actor=actor, conversation=conversation)

    message = ChatRepository(session).add(
        ChatMessage(
            id=None,
            sender_id=actor.id,
            conversation=conversation,
            content=content.strip(),
            message_type=message_type,
            attachment=attachment,
            reply_to_id=reply_to_id,
        )
    )
    title, text, link = _notification_text(
        conversation, actor=actor, name=access.name, is_reply=reply_to_id is not None
    )
    notifications = queue_fan_out(
        session,
        recipient_ids=access.member_ids,
        actor_id=actor.id,
        type="message",
        title=title,
        content=text,
        link=link,
        message_id=message.id,
        team_id=message.team_id,
        project_id=message.project_id,
    )
    session.commit()

    room, event = _room_event(conversation)
    publish_event(room, event, serialize_message(message), exclude=exclude)
    deliver_notifications(session, notifications)
    return message


def send_private_message(
    session: Session, *, actor: User, recipient_id: int, content: str, **fields
) -> ChatMessage:
    return send_message(
        session,
        actor=actor,
        conversation=DirectConversation(recipient_id=recipient_id),
        content=content,
        **fields,
    )


def send_team_message(
    session: Session, *, actor: User, team_id: int, content: str, **fields
) -> ChatMessage:
    return send_message(
        session,
        actor=actor,
        conversation=TeamConversation(team_id=team_id),
        content=content,
        **fields,
    )


def send_project_message(
    session: Session, *, actor: User, project_id: int, content: str, **fields
) -> ChatMessage:
    return send_message(
        session,
        actor=actor,
        conversation=ProjectConversation(project_id=project_id),
        content=content,
        **fields,
    )


def reply_to_message(
    session: Session, *, actor: User, message_id: int, content: str, **fields
) -> ChatMessage:
    """Answer ``message_id`` inside the conversation it was posted to."""

    original = ChatRepository(session).get(message_id)
    if original is None:
        raise NotFoundError("Message not found")
    if not can_view_message(session, actor, original):
        raise PermissionDeniedError("Not authorized to reply to this message")
    return send_message(
        session,
        actor=actor,
        conversation=reply_conversation(original, actor),
        content=content,
        reply_to_id=original.id,
        **fields,
    )


__all__ = [
    "reply_to_message",
    "send_message",
    "send_private_message",
    "send_project_message",
    "send_team_message",
]
