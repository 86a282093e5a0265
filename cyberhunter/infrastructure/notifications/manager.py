"""Connection management helpers for realtime websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Dict, Iterable, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def user_room(user_id: int) -> str:
    return f"user:{user_id}"


def team_room(team_id: int) -> str:
    return f"team:{team_id}"


def project_room(project_id: int) -> str:
    return f"project:{project_id}"


class RoomConnectionManager:
    """Manage active websocket connections grouped by room.

    The room table lives in process memory, so every connection of a user must
    be served by the same process to receive its events.
    """

    def __init__(self) -> None:
        self._rooms: DefaultDict[str, Set[WebSocket]] = defaultdict(set)
        self._memberships: Dict[WebSocket, Set[str]] = {}

    async def connect(self, websocket: WebSocket, rooms: Iterable[str]) -> None:
        """Accept the websocket connection and register it in ``rooms``."""

        await websocket.accept()
        self._memberships.setdefault(websocket, set())
        for room in rooms:
            self.join(websocket, room)

    def join(self, websocket: WebSocket, room: str) -> None:
        self._rooms[room].add(websocket)
        self._memberships.setdefault(websocket, set()).add(room)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from every room it joined."""

        for room in list(self._memberships.pop(websocket, set())):
            connections = self._rooms.get(room)
            if connections is None:
                continue
            connections.discard(websocket)
            if not connections:
                self._rooms.pop(room, None)

    def rooms_for(self, websocket: WebSocket) -> set[str]:
        return set(self._memberships.get(websocket, set()))

    def is_member(self, websocket: WebSocket, room: str) -> bool:
        return websocket in self._rooms.get(room, set())

    def connection_count(self, room: str) -> int:
        return len(self._rooms.get(room, set()))

    async def send_to_room(
        self,
        room: str,
        message: dict[str, Any],
        *,
        exclude: WebSocket | None = None,
    ) -> int:
        """Send ``message`` to every connection in ``room`` but ``exclude``.

        Returns the number of connections that received the message.
        """

        delivered = 0
        for connection in list(self._rooms.get(room, set())):
            if connection is exclude:
                continue
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - depends on socket state
                logger.warning("Dropping websocket in %s after a failed send", room)
                self.disconnect(connection)
            else:
                delivered += 1
        return delivered


connection_manager = RoomConnectionManager()


__all__ = [
    "RoomConnectionManager",
    "connection_manager",
    "project_room",
    "team_room",
    "user_room",
]
