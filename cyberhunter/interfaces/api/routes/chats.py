"""Endpoints for direct, team and project chat over HTTP."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.chat import (
    ConversationSummary,
    delete_message,
    list_conversations,
    list_messages,
    mark_messages_read,
    react_to_message,
    reply_to_message,
    send_private_message,
    send_project_message,
    send_team_message,
    unread_counts,
)
from cyberhunter.config import get_settings
from cyberhunter.domain.entities import (
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    TeamConversation,
    User,
)
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_current_active_user
from cyberhunter.interfaces.api.schemas import (
    ConversationRead,
    MarkReadRequest,
    MessageCreate,
    MessageRead,
    MessageResponse,
    ReactionRead,
    ReactionRequest,
    UnreadCountsRead,
    page_envelope,
)
from cyberhunter.utils import PageRequest, resolve_page

router = APIRouter(prefix="/chats", tags=["chats"])


def get_chat_page(page: int = 1, limit: int | None = None) -> PageRequest:
    return resolve_page(page, limit, default_limit=get_settings().chat_page_limit)


def _message_response(message: ChatMessage) -> dict:
    return {"success": True, "message": MessageRead.from_entity(message)}


def _conversation_read(summary: ConversationSummary) -> ConversationRead:
    last = MessageRead.from_entity(summary.last_message) if summary.last_message else None
    return ConversationRead(
        kind=summary.kind,
        target_id=summary.target_id,
        name=summary.name,
        last_message=last,
        unread=summary.unread,
    )


def _history(db: Session, actor: User, conversation: Conversation, page: PageRequest) -> dict:
    messages, total = list_messages(db, actor=actor, conversation=conversation, page=page)
    return page_envelope(
        "messages", [MessageRead.from_entity(message) for message in messages], total, page
    )


def _send_fields(payload: MessageCreate) -> dict:
    return {
        "content": payload.content,
        "message_type": payload.message_type,
        "attachment": payload.attachment(),
    }


@router.get("/conversations")
def read_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    summaries = list_conversations(db, actor=current_user)
    return {
        "success": True,
        "count": len(summaries),
        "conversations": [_conversation_read(summary) for summary in summaries],
    }


@router.get("/unread")
def read_unread_counts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    counts = unread_counts(db, actor=current_user)
    return {"success": True, "unread": UnreadCountsRead(**counts)}


@router.put("/read")
def mark_read(
    payload: MarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    marked = mark_messages_read(db, actor=current_user, message_ids=payload.message_ids)
    return {"success": True, "count": marked}


@router.get("/private/{user_id}")
def read_private_history(
    user_id: int,
    page: PageRequest = Depends(get_chat_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _history(db, current_user, DirectConversation(recipient_id=user_id), page)


@router.post("/private/{user_id}", status_code=status.HTTP_201_CREATED)
def post_private_message(
    user_id: int,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    message = send_private_message(
        db, actor=current_user, recipient_id=user_id, **_send_fields(payload)
    )
    return _message_response(message)


@router.get("/team/{team_id}")
def read_team_history(
    team_id: int,
    page: PageRequest = Depends(get_chat_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _history(db, current_user, TeamConversation(team_id=team_id), page)


@router.post("/team/{team_id}", status_code=status.HTTP_201_CREATED)
def post_team_message(
    team_id: int,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    message = send_team_message(db, actor=current_user, team_id=team_id, **_send_fields(payload))
    return _message_response(message)


@router.get("/project/{project_id}")
def read_project_history(
    project_id: int,
    page: PageRequest = Depends(get_chat_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _history(db, current_user, ProjectConversation(project_id=project_id), page)


@router.post("/project/{project_id}", status_code=status.HTTP_201_CREATED)
def post_project_message(
    project_id: int,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    message = send_project_message(
        db, actor=current_user, project_id=project_id, **_send_fields(payload)
    )
    return _message_response(message)


@router.post("/{message_id}/reply", status_code=status.HTTP_201_CREATED)
def reply(
    message_id: int,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    message = reply_to_message(
        db, actor=current_user, message_id=message_id, **_send_fields(payload)
    )
    return _message_response(message)


@router.post("/{message_id}/reactions")
def react(
    message_id: int,
    payload: ReactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    reactions = react_to_message(
        db, actor=current_user, message_id=message_id, emoji=payload.emoji
    )
    return {
        "success": True,
        "reactions": [
            ReactionRead(user_id=reaction.user_id, emoji=reaction.emoji) for reaction in reactions
        ],
    }


@router.delete("/{message_id}", response_model=MessageResponse)
def remove_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    delete_message(db, actor=current_user, message_id=message_id)
    return MessageResponse(message="Message deleted successfully")
