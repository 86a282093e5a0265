"""Persistence helpers for chat messages, read markers and reactions."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import and_, delete, exists, func, or_
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    CONVERSATION_DIRECT,
    CONVERSATION_PROJECT,
    CONVERSATION_TEAM,
    Attachment,
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    Reaction,
    TeamConversation,
    conversation_from_parts,
)
from cyberhunter.infrastructure.models import (
    ChatMessageModel,
    MessageReactionModel,
    MessageReadModel,
)
from cyberhunter.utils import ensure_app_timezone, now_in_app_naive_datetime

from .base import insert_ignoring_duplicates, upsert


class ChatRepository:
    """Provide persistence operations for :class:`ChatMessage` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int) -> ChatMessage | None:
        model = self.session.get(ChatMessageModel, message_id)
        if model is None:
            return None
        self.session.refresh(model, ["reads", "reactions"])
        return self._to_entity(model)

    def get_many(self, message_ids: Iterable[int]) -> list[ChatMessage]:
        ids = {int(message_id) for message_id in message_ids}
        if not ids:
            return []
        query = (
            self.session.query(ChatMessageModel)
            .filter(ChatMessageModel.id.in_(ids))
            .order_by(ChatMessageModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def add(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            sender_id=message.sender_id,
            kind=message.kind,
            recipient_id=message.recipient_id,
            team_id=message.team_id,
            project_id=message.project_id,
            content=message.content,
            message_type=message.message_type,
            reply_to_id=message.reply_to_id,
        )
        if message.attachment is not None:
            model.file_url = message.attachment.url
            model.file_name = message.attachment.name
            model.file_size = message.attachment.size
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def delete(self, message_id: int) -> None:
        model = self.session.get(ChatMessageModel, message_id)
        if model is not None:
            self.session.delete(model)
            self.session.flush()

    def list_conversation(
        self,
        conversation: Conversation,
        *,
        viewer_id: int,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[ChatMessage], int]:
        """Return one page of a conversation, newest page first.

        Messages inside the page are ordered oldest to newest.
        """

        query = self.session.query(ChatMessageModel).filter(
            self._conversation_filter(conversation, viewer_id)
        )
        total = query.count()
        query = query.order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
        if limit is not None:
            query = query.offset(offset).limit(limit)
        models = list(reversed(query.all()))
        return [self._to_entity(model) for model in models], total

    # -- read markers -----------------------------------------------------

    def mark_read(self, message_ids: Iterable[int], user_id: int) -> int:
        """Record read markers, skipping markers that already exist."""

        now = now_in_app_naive_datetime()
        rows = [
            {"message_id": message_id, "user_id": user_id, "read_at": now}
            for message_id in dict.fromkeys(int(message_id) for message_id in message_ids)
        ]
        inserted = insert_ignoring_duplicates(self.session, MessageReadModel.__table__, rows)
        self._expire(row["message_id"] for row in rows)
        return inserted

    def unread_count(self, conversation: Conversation, *, viewer_id: int) -> int:
        query = (
            self.session.query(func.count(ChatMessageModel.id))
            .filter(self._conversation_filter(conversation, viewer_id))
            .filter(ChatMessageModel.sender_id != viewer_id)
            .filter(self._unread_by(viewer_id))
        )
        return query.scalar() or 0

    def unread_direct_count(self, user_id: int) -> int:
        query = (
            self.session.query(func.count(ChatMessageModel.id))
            .filter(ChatMessageModel.kind == CONVERSATION_DIRECT)
            .filter(ChatMessageModel.recipient_id == user_id)
            .filter(self._unread_by(user_id))
        )
        return query.scalar() or 0

    def unread_group_count(self, kind: str, target_ids: Iterable[int], user_id: int) -> int:
        ids = list(target_ids)
        if not ids:
            return 0
        column = ChatMessageModel.team_id if kind == CONVERSATION_TEAM else ChatMessageModel.project_id
        query = (
            self.session.query(func.count(ChatMessageModel.id))
            .filter(ChatMessageModel.kind == kind)
            .filter(column.in_(ids))
            .filter(ChatMessageModel.sender_id != user_id)
            .filter(self._unread_by(user_id))
        )
        return query.scalar() or 0

    # -- reactions --------------------------------------------------------

    def toggle_reaction(self, message_id: int, user_id: int, emoji: str) -> list[Reaction]:
        """Remove the user's reaction when it matches ``emoji``, else set it."""

        table = MessageReactionModel.__table__
        removed = self.session.execute(
            delete(table).where(
                table.c.message_id == message_id,
                table.c.user_id == user_id,
                table.c.emoji == emoji,
            )
        ).rowcount
        if not removed:
            upsert(
                self.session,
                table,
                {
                    "message_id": message_id,
                    "user_id": user_id,
                    "emoji": emoji,
                    "created_at": now_in_app_naive_datetime(),
                },
                update_columns=("emoji", "created_at"),
            )
        message = self.get(message_id)
        return message.reactions if message else []

    # -- conversations ----------------------------------------------------

    def direct_partner_summaries(self, user_id: int) -> list[tuple[int, ChatMessage, int]]:
        """Return ``(partner_id, last_message, unread)`` for each direct partner."""

        models = (
            self.session.query(ChatMessageModel)
            .filter(ChatMessageModel.kind == CONVERSATION_DIRECT)
            .filter(
                or_(
                    ChatMessageModel.sender_id == user_id,
                    ChatMessageModel.recipient_id == user_id,
                )
            )
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .all()
        )
        summaries: dict[int, list] = {}
        for model in models:
            partner_id = model.recipient_id if model.sender_id == user_id else model.sender_id
            entry = summaries.get(partner_id)
            if entry is None:
                entry = summaries[partner_id] = [self._to_entity(model), 0]
            if model.recipient_id == user_id and not any(
                read.user_id == user_id for read in model.reads
            ):
                entry[1] += 1
        return [(partner_id, entry[0], entry[1]) for partner_id, entry in summaries.items()]

    def last_message(self, conversation: Conversation, *, viewer_id: int) -> ChatMessage | None:
        model = (
            self.session.query(ChatMessageModel)
            .filter(self._conversation_filter(conversation, viewer_id))
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    # -- helpers ----------------------------------------------------------

    def _expire(self, message_ids: Iterable[int]) -> None:
        for message_id in message_ids:
            model = self.session.identity_map.get(
                self.session.identity_key(ChatMessageModel, message_id)
            )
            if model is not None:
                self.session.expire(model, ["reads", "reactions"])

    @staticmethod
    def _unread_by(user_id: int):
        return ~exists().where(
            and_(
                MessageReadModel.message_id == ChatMessageModel.id,
                MessageReadModel.user_id == user_id,
            )
        )

    @staticmethod
    def _conversation_filter(conversation: Conversation, viewer_id: int):
        if isinstance(conversation, DirectConversation):
            other_id = conversation.recipient_id
            return and_(
                ChatMessageModel.kind == CONVERSATION_DIRECT,
                or_(
                    and_(
                        ChatMessageModel.sender_id == viewer_id,
                        ChatMessageModel.recipient_id == other_id,
                    ),
                    and_(
                        ChatMessageModel.sender_id == other_id,
                        ChatMessageModel.recipient_id == viewer_id,
                    ),
                ),
            )
        if isinstance(conversation, TeamConversation):
            return and_(
                ChatMessageModel.kind == CONVERSATION_TEAM,
                ChatMessageModel.team_id == conversation.team_id,
            )
        if isinstance(conversation, ProjectConversation):
            return and_(
                ChatMessageModel.kind == CONVERSATION_PROJECT,
                ChatMessageModel.project_id == conversation.project_id,
            )
        raise ValueError(f"Unsupported conversation: {conversation!r}")

    @staticmethod
    def _to_entity(model: ChatMessageModel) -> ChatMessage:
        target_id = {
            CONVERSATION_DIRECT: model.recipient_id,
            CONVERSATION_TEAM: model.team_id,
            CONVERSATION_PROJECT: model.project_id,
        }.get(model.kind)
        attachment = None
        if model.file_url:
            attachment = Attachment(url=model.file_url, name=model.file_name, size=model.file_size)
        return ChatMessage(
            id=model.id,
            sender_id=model.sender_id,
            conversation=conversation_from_parts(model.kind, target_id),
            content=model.content,
            message_type=model.message_type,
            attachment=attachment,
            reply_to_id=model.reply_to_id,
            read_by={read.user_id: ensure_app_timezone(read.read_at) for read in model.reads},
            reactions=[
                Reaction(
                    user_id=reaction.user_id,
                    emoji=reaction.emoji,
                    created_at=ensure_app_timezone(reaction.created_at),
                )
                for reaction in model.reactions
            ],
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["ChatRepository"]
