"""Use cases for direct, team and project chat."""

from .access import ConversationAccess, authorize_conversation, can_view_message
from .history import (
    ConversationSummary,
    list_conversations,
    list_messages,
    mark_messages_read,
    unread_counts,
)
from .manage import delete_message, get_message_or_404, react_to_message
from .send import (
    reply_to_message,
    send_message,
    send_private_message,
    send_project_message,
    send_team_message,
)

__all__ = [
    "ConversationAccess",
    "ConversationSummary",
    "authorize_conversation",
    "can_view_message",
    "delete_message",
    "get_message_or_404",
    "list_conversations",
    "list_messages",
    "mark_messages_read",
    "react_to_message",
    "reply_to_message",
    "send_message",
    "send_private_message",
    "send_project_message",
    "send_team_message",
]
