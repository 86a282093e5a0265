"""Chat message schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cyberhunter.domain.entities import Attachment, ChatMessage


class MessageCreate(BaseModel):
    content: str = Field(default="", max_length=5000)
    message_type: Literal["text", "image", "file", "system"] = "text"
    file_url: str | None = Field(default=None, max_length=500)
    file_name: str | None = Field(default=None, max_length=255)
    file_size: int | None = Field(default=None, ge=0)

    def attachment(self) -> Attachment | None:
        if not self.file_url:
            return None
        return Attachment(url=self.file_url, name=self.file_name, size=self.file_size)


class ReactionRequest(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=32)


class MarkReadRequest(BaseModel):
    message_ids: list[int]


class ReadMarkerRead(BaseModel):
    user_id: int
    read_at: datetime | None = None


class ReactionRead(BaseModel):
    user_id: int
    emoji: str


class MessageRead(BaseModel):
    id: int
    sender_id: int
    kind: str
    recipient_id: int | None = None
    team_id: int | None = None
    project_id: int | None = None
    content: str
    message_type: str
    file_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    reply_to_id: int | None = None
    is_read: bool | None = None
    read_by: list[ReadMarkerRead] = Field(default_factory=list)
    reactions: list[ReactionRead] = Field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, message: ChatMessage) -> "MessageRead":
        attachment = message.attachment
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            kind=message.kind,
            recipient_id=message.recipient_id,
            team_id=message.team_id,
            project_id=message.project_id,
            content=message.content,
            message_type=message.message_type,
            file_url=attachment.url if attachment else None,
            file_name=attachment.name if attachment else None,
            file_size=attachment.size if attachment else None,
            reply_to_id=message.reply_to_id,
            is_read=message.is_read,
            read_by=[
                ReadMarkerRead(user_id=user_id, read_at=read_at)
                for user_id, read_at in message.read_by.items()
            ],
            reactions=[
                ReactionRead(user_id=reaction.user_id, emoji=reaction.emoji)
                for reaction in message.reactions
            ],
            created_at=message.created_at,
        )


class ConversationRead(BaseModel):
    kind: str
    target_id: int
    name: str
    last_message: MessageRead | None = None
    unread: int = 0


class UnreadCountsRead(BaseModel):
    total: int
    private: int
    team: int
    project: int


__all__ = [
    "ConversationRead",
    "MarkReadRequest",
    "MessageCreate",
    "MessageRead",
    "ReactionRead",
    "ReactionRequest",
    "ReadMarkerRead",
    "UnreadCountsRead",
]
