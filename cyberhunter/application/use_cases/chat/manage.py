"""Use cases for reactions and message deletion."""

from __future__ import annotations

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import ChatMessage, Reaction, User
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import ChatRepository

from .access import can_view_message


def get_message_or_404(session: Session, message_id: int) -> ChatMessage:
    message = ChatRepository(session).get(message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return message


def react_to_message(
    session: Session, *, actor: User, message_id: int, emoji: str
) -> list[Reaction]:
    """Toggle ``emoji``: the same emoji removes the reaction, another replaces it."""

    emoji = emoji.strip()
    if not emoji:
        raise ValueError("Emoji is required")
    message = get_message_or_404(session, message_id)
    if not can_view_message(session, actor, message):
        raise PermissionDeniedError("Not authorized to react to this message")
    reactions = ChatRepository(session).toggle_reaction(message.id, actor.id, emoji)
    session.commit()
    return reactions


def delete_message(session: Session, *, actor: User, message_id: int) -> None:
    message = get_message_or_404(session, message_id)
    if message.sender_id != actor.id:
        raise PermissionDeniedError("Not authorized to delete this message")
    ChatRepository(session).delete(message.id)
    session.commit()


__all__ = ["delete_message", "get_message_or_404", "react_to_message"]
