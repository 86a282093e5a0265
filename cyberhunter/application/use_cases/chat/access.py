"""Authorization rules deciding who may use a conversation."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.projects import (
    get_project_or_404,
    is_project_participant,
    project_participant_ids,
)
from cyberhunter.application.use_cases.teams import get_team_or_404
from cyberhunter.domain.entities import (
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    TeamConversation,
    User,
)
from cyberhunter.domain.errors import NotFoundError, PermissionDeniedError
from cyberhunter.infrastructure.repositories import UserRepository


@dataclass
class ConversationAccess:
    """What a sender needs to know about a conversation it may write to."""

    conversation: Conversation
    name: str
    member_ids: list[int]


def authorize_conversation(
    session: Session, *, actor: User, conversation: Conversation, action: str = "send messages to"
) -> ConversationAccess:
    """Return the conversation's audience or raise 404/403."""

    if isinstance(conversation, DirectConversation):
        recipient = UserRepository(session).get(conversation.recipient_id)
        if recipient is None:
            raise NotFoundError("User not found")
        return ConversationAccess(conversation, recipient.name, [actor.id, recipient.id])
    if isinstance(conversation, TeamConversation):
        team = get_team_or_404(session, conversation.team_id)
        if not team.is_member(actor.id):
            raise PermissionDeniedError(f"Not authorized to {action} this team")
        return ConversationAccess(conversation, team.name, team.member_ids)
    if isinstance(conversation, ProjectConversation):
        project = get_project_or_404(session, conversation.project_id)
        participants = project_participant_ids(session, project)
        if actor.id not in participants:
            raise PermissionDeniedError(f"Not authorized to {action} this project")
        return ConversationAccess(conversation, project.title, participants)
    raise ValueError(f"Unsupported conversation: {conversation!r}")


def can_view_message(session: Session, user: User, message: ChatMessage) -> bool:
    if message.sender_id == user.id:
        return True
    conversation = message.conversation
    if isinstance(conversation, DirectConversation):
        return conversation.recipient_id == user.id
    if isinstance(conversation, TeamConversation):
        return get_team_or_404(session, conversation.team_id).is_member(user.id)
    project = get_project_or_404(session, conversation.project_id)
    return is_project_participant(session, project, user.id)


def reply_conversation(message: ChatMessage, actor: User) -> Conversation:
    """The conversation a reply to ``message`` by ``actor`` belongs to."""

    if isinstance(message.conversation, DirectConversation):
        other_id = message.sender_id if message.sender_id != actor.id else message.recipient_id
        return DirectConversation(recipient_id=other_id)
    return message.conversation


__all__ = [
    "ConversationAccess",
    "authorize_conversation",
    "can_view_message",
    "reply_conversation",
]
