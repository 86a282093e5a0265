"""Room bookkeeping and event publishing."""

from __future__ import annotations

import anyio

from cyberhunter.infrastructure.notifications import (
    RealtimeEventPublisher,
    RoomConnectionManager,
    team_room,
    user_room,
)


class FakeSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.broken = broken

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_connect_joins_rooms_and_disconnect_leaves_them() -> None:
    manager = RoomConnectionManager()
    socket = FakeSocket()

    anyio.run(manager.connect, socket, [user_room(1), team_room(7)])

    assert socket.accepted
    assert manager.rooms_for(socket) == {"user:1", "team:7"}
    manager.disconnect(socket)
    assert manager.rooms_for(socket) == set()
    assert manager.connection_count("team:7") == 0


def test_disconnect_keeps_other_sockets_in_shared_rooms() -> None:
    manager = RoomConnectionManager()
    first, second = FakeSocket(), FakeSocket()
    anyio.run(manager.connect, first, [user_room(1), team_room(7)])
    anyio.run(manager.connect, second, [user_room(2), team_room(7)])

    manager.disconnect(first)

    assert manager.connection_count("team:7") == 1
    assert manager.is_member(second, "team:7")
    assert not manager.is_member(first, "team:7")
    assert manager.connection_count("user:1") == 0


def test_send_to_room_skips_excluded_and_drops_broken_sockets() -> None:
    manager = RoomConnectionManager()
    sender, listener, broken = FakeSocket(), FakeSocket(), FakeSocket(broken=True)

    async def scenario() -> int:
        for socket in (sender, listener, broken):
            await manager.connect(socket, ["team:1"])
        return await manager.send_to_room("team:1", {"type": "ping"}, exclude=sender)

    assert anyio.run(scenario) == 1
    assert listener.sent == [{"type": "ping"}]
    assert sender.sent == []
    assert not manager.is_member(broken, "team:1")


def test_publisher_wraps_payload_in_envelope() -> None:
    manager = RoomConnectionManager()
    publisher = RealtimeEventPublisher(manager)
    socket = FakeSocket()
    payload = {"content": "hi"}

    async def scenario() -> bool:
        await manager.connect(socket, ["user:3"])
        published = publisher.publish("user:3", "new-message", payload)
        await anyio.sleep(0.01)
        return published

    assert anyio.run(scenario) is True
    assert socket.sent == [{"type": "new-message", "data": {"content": "hi"}}]


def test_publisher_without_event_loop_reports_failure() -> None:
    publisher = RealtimeEventPublisher(RoomConnectionManager())
    assert publisher.publish("user:1", "notification", {}) is False
