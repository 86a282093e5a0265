"""Websocket endpoint carrying chat, typing and notification events."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.chat import send_private_message, send_team_message
from cyberhunter.application.use_cases.projects import post_project_update
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import SessionLocal
from cyberhunter.infrastructure.notifications import (
    connection_manager,
    project_room,
    team_room,
    user_room,
)
from cyberhunter.infrastructure.repositories import ProjectRepository, TeamRepository
from cyberhunter.interfaces.api.dependencies import resolve_current_user

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008


def _initial_rooms(session: Session, user: User) -> list[str]:
    rooms = [user_room(user.id)]
    rooms.extend(
        team_room(team_id) for team_id in TeamRepository(session).team_ids_for_member(user.id)
    )
    rooms.extend(
        project_room(project.id)
        for project in ProjectRepository(session).list_for_participant(user.id)
    )
    return rooms


def _require(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise ValueError(f"{key} is required")
    return value


def _require_id(data: dict[str, Any], key: str) -> int:
    value = _require(data, key)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer") from exc


def _message_type(data: dict[str, Any]) -> str:
    return str(data.get("type") or "text")


async def _handle_private_message(
    websocket: WebSocket, session: Session, user: User, data: dict
) -> None:
    message = send_private_message(
        session,
        actor=user,
        recipient_id=_require_id(data, "recipientId"),
        content=str(data.get("content") or ""),
        message_type=_message_type(data),
        exclude=websocket,
    )
    await websocket.send_json(
        {"type": "message-sent", "data": {"success": True, "messageId": message.id}}
    )


async def _handle_team_message(
    websocket: WebSocket, session: Session, user: User, data: dict
) -> None:
    message = send_team_message(
        session,
        actor=user,
        team_id=_require_id(data, "teamId"),
        content=str(data.get("content") or ""),
        message_type=_message_type(data),
        exclude=websocket,
    )
    await websocket.send_json(
        {"type": "message-sent", "data": {"success": True, "messageId": message.id}}
    )


async def _handle_project_update(
    websocket: WebSocket, session: Session, user: User, data: dict
) -> None:
    post_project_update(
        session,
        actor=user,
        project_id=_require_id(data, "projectId"),
        update_type=str(_require(data, "updateType")),
        content=str(_require(data, "content")),
    )


def _typing_room(websocket: WebSocket, data: dict) -> str | None:
    """Room a typing indicator is relayed to; group rooms must already be joined."""

    if data.get("recipientId") is not None:
        return user_room(_require_id(data, "recipientId"))
    if data.get("teamId") is not None:
        room = team_room(_require_id(data, "teamId"))
    elif data.get("projectId") is not None:
        room = project_room(_require_id(data, "projectId"))
    else:
        return None
    return room if connection_manager.is_member(websocket, room) else None


async def _relay_typing(websocket: WebSocket, user: User, event: str, data: dict) -> None:
    room = _typing_room(websocket, data)
    if room is None:
        return
    relayed = "user-typing" if event == "typing" else "user-stop-typing"
    await connection_manager.send_to_room(
        room, {"type": relayed, "data": {"userId": user.id}}, exclude=websocket
    )


_SESSION_HANDLERS = {
    "private-message": _handle_private_message,
    "team-message": _handle_team_message,
    "project-update": _handle_project_update,
}


async def _dispatch(websocket: WebSocket, user: User, event: str, data: dict) -> None:
    if event == "ping":
        await websocket.send_json({"type": "pong", "data": {}})
        return
    if event in ("typing", "stop-typing"):
        await _relay_typing(websocket, user, event, data)
        return
    handler = _SESSION_HANDLERS.get(event)
    if handler is None:
        raise ValueError(f"Unknown event: {event}")

    session = SessionLocal()
    try:
        await handler(websocket, session, user, data)
    except SQLAlchemyError:
        session.rollback()
        raise
    finally:
        session.close()


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Authenticate with ``?token=``, join the user's rooms and serve events."""

    session = SessionLocal()
    try:
        user = resolve_current_user(websocket.query_params.get("token"), session)
        rooms = _initial_rooms(session, user)
    except HTTPException:
        await websocket.close(code=POLICY_VIOLATION)
        return
    finally:
        session.close()

    await connection_manager.connect(websocket, rooms)
    logger.info("User %s connected to %d rooms", user.id, len(rooms))
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                envelope = json.loads(raw)
            except ValueError:
                envelope = None
            if not isinstance(envelope, dict) or not isinstance(envelope.get("type"), str):
                await websocket.send_json(
                    {"type": "error", "data": {"message": "Invalid event envelope"}}
                )
                continue
            event = envelope["type"]
            data = envelope.get("data")
            if not isinstance(data, dict):
                data = {}
            try:
                await _dispatch(websocket, user, event, data)
            except ValueError as exc:
                await websocket.send_json({"type": "error", "data": {"message": str(exc)}})
            except SQLAlchemyError:
                logger.exception("Websocket event %s failed for user %s", event, user.id)
                await websocket.send_json({"type": "error", "data": {"message": "Server Error"}})
    except WebSocketDisconnect:
        logger.info("User %s disconnected", user.id)
    finally:
        connection_manager.disconnect(websocket)
