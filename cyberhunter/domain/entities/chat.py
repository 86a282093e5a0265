"""Domain entities for chat messages.

A message lives in exactly one conversation. The conversation is modelled as a
tagged variant so a message can never point at a recipient and a team at the
same time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

CONVERSATION_DIRECT = "direct"
CONVERSATION_TEAM = "team"
CONVERSATION_PROJECT = "project"

MESSAGE_TYPES = ("text", "image", "file", "system")
ATTACHMENT_MESSAGE_TYPES = frozenset({"image", "file"})


@dataclass(frozen=True)
class DirectConversation:
    recipient_id: int

    @property
    def kind(self) -> str:
        return CONVERSATION_DIRECT

    @property
    def target_id(self) -> int:
        return self.recipient_id


@dataclass(frozen=True)
class TeamConversation:
    team_id: int

    @property
    def kind(self) -> str:
        return CONVERSATION_TEAM

    @property
    def target_id(self) -> int:
        return self.team_id


@dataclass(frozen=True)
class ProjectConversation:
    project_id: int

    @property
    def kind(self) -> str:
        return CONVERSATION_PROJECT

    @property
    def target_id(self) -> int:
        return self.project_id


Conversation = Union[DirectConversation, TeamConversation, ProjectConversation]


def conversation_from_parts(kind: str, target_id: int) -> Conversation:
    """Rebuild a conversation from its persisted ``kind`` and target."""

    if kind == CONVERSATION_DIRECT:
        return DirectConversation(recipient_id=target_id)
    if kind == CONVERSATION_TEAM:
        return TeamConversation(team_id=target_id)
    if kind == CONVERSATION_PROJECT:
        return ProjectConversation(project_id=target_id)
    raise ValueError(f"Unknown conversation kind: {kind}")


@dataclass
class Reaction:
    user_id: int
    emoji: str
    created_at: datetime | None = None


@dataclass
class Attachment:
    url: str
    name: str | None = None
    size: int | None = None


@dataclass
class ChatMessage:
    """A message sent by ``sender_id`` into ``conversation``."""

    id: int | None
    sender_id: int
    conversation: Conversation
    content: str
    message_type: str = "text"
    attachment: Attachment | None = None
    reply_to_id: int | None = None
    read_by: dict[int, datetime] = field(default_factory=dict)
    reactions: list[Reaction] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def kind(self) -> str:
        return self.conversation.kind

    @property
    def recipient_id(self) -> int | None:
        if isinstance(self.conversation, DirectConversation):
            return self.conversation.recipient_id
        return None

    @property
    def team_id(self) -> int | None:
        if isinstance(self.conversation, TeamConversation):
            return self.conversation.team_id
        return None

    @property
    def project_id(self) -> int | None:
        if isinstance(self.conversation, ProjectConversation):
            return self.conversation.project_id
        return None

    @property
    def is_read(self) -> bool | None:
        """Whether the recipient has read a direct message; ``None`` for groups."""

        if self.recipient_id is None:
            return None
        return self.recipient_id in self.read_by

    def is_read_by(self, user_id: int) -> bool:
        return user_id in self.read_by


__all__ = [
    "ATTACHMENT_MESSAGE_TYPES",
    "Attachment",
    "CONVERSATION_DIRECT",
    "CONVERSATION_PROJECT",
    "CONVERSATION_TEAM",
    "ChatMessage",
    "Conversation",
    "DirectConversation",
    "MESSAGE_TYPES",
    "ProjectConversation",
    "Reaction",
    "TeamConversation",
    "conversation_from_parts",
]
