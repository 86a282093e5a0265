"""Use cases reading conversations and tracking what has been read."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    CONVERSATION_PROJECT,
    CONVERSATION_TEAM,
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    TeamConversation,
    User,
)
from cyberhunter.infrastructure.repositories import (
    ChatRepository,
    ProjectRepository,
    TeamRepository,
    UserRepository,
)
from cyberhunter.utils import PageRequest

from .access import authorize_conversation, can_view_message


@dataclass
class ConversationSummary:
    kind: str
    target_id: int
    name: str
    last_message: ChatMessage | None
    unread: int

    @property
    def last_activity(self) -> datetime | None:
        return self.last_message.created_at if self.last_message else None


def list_messages(
    session: Session, *, actor: User, conversation: Conversation, page: PageRequest
) -> tuple[list[ChatMessage], int]:
    """Return one page of history and mark it read for ``actor``.

    Pages run newest first while messages inside a page are chronological.
    """

    if isinstance(conversation, DirectConversation) and conversation.recipient_id == actor.id:
        raise ValueError("Cannot open a conversation with yourself")
    authorize_conversation(
        session, actor=actor, conversation=conversation, action="view messages for"
    )
    repository = ChatRepository(session)
    messages, total = repository.list_conversation(
        conversation, viewer_id=actor.id, offset=page.offset, limit=page.limit
    )
    unread = [
        message.id
        for message in messages
        if message.sender_id != actor.id and not message.is_read_by(actor.id)
    ]
    if unread:
        repository.mark_read(unread, actor.id)
        session.commit()
        refreshed = {message.id: message for message in repository.get_many(unread)}
        messages = [refreshed.get(message.id, message) for message in messages]
    return messages, total


def mark_messages_read(session: Session, *, actor: User, message_ids: list[int]) -> int:
    """Mark the visible messages among ``message_ids`` read; repeats are no-ops."""

    if not message_ids:
        raise ValueError("Message IDs are required")
    repository = ChatRepository(session)
    visible = [
        message.id
        for message in repository.get_many(message_ids)
        if can_view_message(session, actor, message)
    ]
    marked = repository.mark_read(visible, actor.id) if visible else 0
    session.commit()
    return marked


def unread_counts(session: Session, *, actor: User) -> dict[str, int]:
    repository = ChatRepository(session)
    team_ids = TeamRepository(session).team_ids_for_member(actor.id)
    project_ids = [
        project.id for project in ProjectRepository(session).list_for_participant(actor.id)
    ]
    counts = {
        "private": repository.unread_direct_count(actor.id),
        "team": repository.unread_group_count(CONVERSATION_TEAM, team_ids, actor.id),
        "project": repository.unread_group_count(CONVERSATION_PROJECT, project_ids, actor.id),
    }
    counts["total"] = sum(counts.values())
    return counts


def list_conversations(session: Session, *, actor: User) -> list[ConversationSummary]:
    """Direct partners, teams and projects, most recently active first."""

    repository = ChatRepository(session)
    summaries: list[ConversationSummary] = []

    partners = repository.direct_partner_summaries(actor.id)
    names = UserRepository(session).get_map_by_ids(partner_id for partner_id, _, _ in partners)
    for partner_id, last_message, unread in partners:
        partner = names.get(partner_id)
        summaries.append(
            ConversationSummary(
                kind=DirectConversation(partner_id).kind,
                target_id=partner_id,
                name=partner.name if partner else "Deleted user",
                last_message=last_message,
                unread=unread,
            )
        )

    group_sources = [
        (TeamConversation(team.id), team.name)
        for team in TeamRepository(session).list_for_member(actor.id)
    ] + [
        (ProjectConversation(project.id), project.title)
        for project in ProjectRepository(session).list_for_participant(actor.id)
    ]
    for conversation, name in group_sources:
        summaries.append(
            ConversationSummary(
                kind=conversation.kind,
                target_id=conversation.target_id,
                name=name,
                last_message=repository.last_message(conversation, viewer_id=actor.id),
                unread=repository.unread_count(conversation, viewer_id=actor.id),
            )
        )

    dated = sorted(
        (summary for summary in summaries if summary.last_activity is not None),
        key=lambda summary: summary.last_activity,
        reverse=True,
    )
    return dated + [summary for summary in summaries if summary.last_activity is None]


__all__ = [
    "ConversationSummary",
    "list_conversations",
    "list_messages",
    "mark_messages_read",
    "unread_counts",
]
