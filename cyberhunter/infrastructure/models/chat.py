"""SQLAlchemy models for chat messages, read markers and reactions."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from cyberhunter.infrastructure.database import Base
from cyberhunter.utils import now_in_app_naive_datetime

_SINGLE_TARGET = (
    "(kind = 'direct' AND recipient_id IS NOT NULL AND team_id IS NULL AND project_id IS NULL)"
    " OR (kind = 'team' AND team_id IS NOT NULL AND recipient_id IS NULL AND project_id IS NULL)"
    " OR (kind = 'project' AND project_id IS NOT NULL AND recipient_id IS NULL AND team_id IS NULL)"
)


class ChatMessageModel(Base):
    """A message addressed to exactly one of a user, a team or a project."""

    __tablename__ = "chat_messages"
    __table_args__ = (
        CheckConstraint(_SINGLE_TARGET, name="ck_chat_message_single_target"),
        Index("ix_chat_messages_direct_pair", "sender_id", "recipient_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(10), nullable=False)
    recipient_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    team_id = Column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True
    )
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)
    message_type = Column(String(10), nullable=False, default="text")
    file_url = Column(String(500), nullable=True)
    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
    reply_to_id = Column(
        Integer, ForeignKey("chat_messages.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime, index=True)

    reads = relationship(
        "MessageReadModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reactions = relationship(
        "MessageReactionModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageReactionModel.created_at",
    )


class MessageReadModel(Base):
    """Read marker; the composite key stores one marker per user and message."""

    __tablename__ = "message_reads"

    message_id = Column(
        Integer, ForeignKey("chat_messages.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    read_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class MessageReactionModel(Base):
    """Reaction; the composite key allows one reaction per user and message."""

    __tablename__ = "message_reactions"

    message_id = Column(
        Integer, ForeignKey("chat_messages.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    emoji = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ChatMessageModel", "MessageReactionModel", "MessageReadModel"]
