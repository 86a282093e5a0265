"""Websocket authentication, rooms and client events."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect


def _connect(client: TestClient, account):
    return client.websocket_connect(f"/ws?token={account.token}")


def _receive_until(websocket, event_type: str, limit: int = 5) -> dict:
    for _ in range(limit):
        message = websocket.receive_json()
        if message["type"] == event_type:
            return message
    raise AssertionError(f"{event_type} was not received")


def test_bad_token_closes_with_policy_violation(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws?token=not-a-jwt") as websocket:
            websocket.receive_json()
    assert excinfo.value.code == 1008


def test_missing_token_is_rejected(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
    assert excinfo.value.code == 1008


def test_ping_pong(client: TestClient, register) -> None:
    account = register("student")
    with _connect(client, account) as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json()["type"] == "pong"


def test_private_message_over_socket(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    with _connect(client, alice) as alice_ws, _connect(client, bob) as bob_ws:
        alice_ws.send_json(
            {"type": "private-message", "data": {"recipientId": bob.id, "content": "psst"}}
        )
        sent = alice_ws.receive_json()
        assert sent["type"] == "message-sent"
        assert sent["data"]["success"] is True

        received = _receive_until(bob_ws, "new-message")
        assert received["data"]["content"] == "psst"
        assert received["data"]["sender"] == alice.id
        assert received["data"]["id"] == sent["data"]["messageId"]

        notification = _receive_until(bob_ws, "notification")
        assert notification["data"]["title"] == "New Private Message"


def test_rest_message_is_pushed_to_recipient_socket(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    with _connect(client, alice) as alice_ws:
        response = client.post(
            f"/api/chats/private/{alice.id}", headers=bob.headers, json={"content": "over http"}
        )
        assert response.status_code == 201
        received = _receive_until(alice_ws, "new-message")
        assert received["data"]["content"] == "over http"


def test_team_message_and_typing_reach_other_members(
    client: TestClient, register, team_factory
) -> None:
    owner = register("student")
    member = register("student")
    team = team_factory(owner, member)

    with _connect(client, owner) as owner_ws, _connect(client, member) as member_ws:
        owner_ws.send_json({"type": "typing", "data": {"teamId": team["id"]}})
        typing = member_ws.receive_json()
        assert typing == {"type": "user-typing", "data": {"userId": owner.id}}

        owner_ws.send_json(
            {"type": "team-message", "data": {"teamId": team["id"], "content": "go"}}
        )
        assert owner_ws.receive_json()["type"] == "message-sent"
        pushed = _receive_until(member_ws, "new-team-message")
        assert pushed["data"]["team"] == team["id"]


def test_failed_events_answer_with_error(client: TestClient, register) -> None:
    alice = register("student")
    with _connect(client, alice) as websocket:
        websocket.send_json(
            {"type": "private-message", "data": {"recipientId": alice.id, "content": "me"}}
        )
        error = websocket.receive_json()
        assert error == {"type": "error", "data": {"message": "Cannot send a message to yourself"}}

        websocket.send_json({"type": "dance"})
        assert websocket.receive_json()["type"] == "error"

        websocket.send_text("not json")
        assert websocket.receive_json()["data"]["message"] == "Invalid event envelope"


def test_malformed_ids_answer_with_error_and_keep_the_socket(
    client: TestClient, register
) -> None:
    alice = register("student")
    malformed = [
        {"type": "private-message", "data": {"recipientId": [1], "content": "hi"}},
        {"type": "team-message", "data": {"teamId": {"id": 1}, "content": "hi"}},
        {"type": "project-update", "data": {"projectId": "abc", "updateType": "x", "content": "y"}},
        {"type": "typing", "data": {"recipientId": [2]}},
        {"type": "private-message", "data": {"recipientId": 2, "content": "hi", "type": ["text"]}},
    ]
    with _connect(client, alice) as websocket:
        for event in malformed:
            websocket.send_json(event)
            error = websocket.receive_json()
            assert error["type"] == "error", event

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json()["type"] == "pong"


def test_project_update_over_socket(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    with _connect(client, owner) as owner_ws, _connect(client, freelancer) as freelancer_ws:
        freelancer_ws.send_json(
            {
                "type": "project-update",
                "data": {"projectId": project["id"], "updateType": "milestone", "content": "done"},
            }
        )
        update = _receive_until(owner_ws, "project-updated")
        assert update["data"]["updateType"] == "milestone"
        assert update["data"]["user"]["id"] == freelancer.id
