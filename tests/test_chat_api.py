"""Direct, team and project chat over HTTP."""

from __future__ import annotations

from fastapi.testclient import TestClient

from cyberhunter.infrastructure.repositories import ChatRepository


def _send(client: TestClient, account, path: str, content: str = "hello", **fields) -> dict:
    response = client.post(
        f"/api/chats/{path}", headers=account.headers, json={"content": content, **fields}
    )
    assert response.status_code == 201, response.text
    return response.json()["message"]


def _inbox(client: TestClient, account) -> list[dict]:
    return client.get("/api/notifications/", headers=account.headers).json()["notifications"]


def test_private_message_is_sent_by_the_authenticated_actor(
    client: TestClient, register, db_session
) -> None:
    alice = register("student")
    bob = register("student")

    message = _send(client, alice, f"private/{bob.id}", "hi bob")
    assert message["sender_id"] == alice.id
    assert message["recipient_id"] == bob.id
    assert message["kind"] == "direct"
    assert message["is_read"] is False

    stored = ChatRepository(db_session).get(message["id"])
    assert stored.sender_id == alice.id
    assert stored.content == "hi bob"

    titles = [item["title"] for item in _inbox(client, bob) if item["type"] == "message"]
    assert titles == ["New Private Message"]


def test_private_message_to_unknown_user_or_self(client: TestClient, register) -> None:
    alice = register("student")
    missing = client.post("/api/chats/private/999", headers=alice.headers, json={"content": "x"})
    assert missing.status_code == 404
    own = client.post(
        f"/api/chats/private/{alice.id}", headers=alice.headers, json={"content": "x"}
    )
    assert own.status_code == 400
    history = client.get(f"/api/chats/private/{alice.id}", headers=alice.headers)
    assert history.status_code == 400
    assert history.json()["message"] == "Cannot open a conversation with yourself"


def test_marking_a_direct_message_read_is_idempotent(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    message = _send(client, alice, f"private/{bob.id}")

    for _ in range(3):
        response = client.put(
            "/api/chats/read", headers=bob.headers, json={"message_ids": [message["id"]]}
        )
        assert response.status_code == 200

    history = client.get(f"/api/chats/private/{bob.id}", headers=alice.headers).json()
    assert history["messages"][0]["is_read"] is True
    assert [marker["user_id"] for marker in history["messages"][0]["read_by"]] == [bob.id]


def test_mark_read_requires_ids(client: TestClient, register) -> None:
    alice = register("student")
    response = client.put("/api/chats/read", headers=alice.headers, json={"message_ids": []})
    assert response.status_code == 400
    assert response.json()["message"] == "Message IDs are required"


def test_group_read_markers_hold_each_user_once(
    client: TestClient, register, team_factory
) -> None:
    owner = register("student")
    member = register("student")
    team = team_factory(owner, member)
    message = _send(client, owner, f"team/{team['id']}", "sync at noon")

    for _ in range(2):
        client.get(f"/api/chats/team/{team['id']}", headers=member.headers)
        client.put("/api/chats/read", headers=member.headers, json={"message_ids": [message["id"]]})

    history = client.get(f"/api/chats/team/{team['id']}", headers=owner.headers).json()
    readers = [marker["user_id"] for marker in history["messages"][0]["read_by"]]
    assert readers.count(member.id) == 1
    assert owner.id not in readers


def test_reactions_toggle_and_replace(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    message = _send(client, alice, f"private/{bob.id}")
    url = f"/api/chats/{message['id']}/reactions"

    first = client.post(url, headers=bob.headers, json={"emoji": "👍"}).json()["reactions"]
    assert first == [{"user_id": bob.id, "emoji": "👍"}]
    replaced = client.post(url, headers=bob.headers, json={"emoji": "🔥"}).json()["reactions"]
    assert replaced == [{"user_id": bob.id, "emoji": "🔥"}]
    cleared = client.post(url, headers=bob.headers, json={"emoji": "🔥"}).json()["reactions"]
    assert cleared == []


def test_team_message_notifies_everyone_but_the_sender(
    client: TestClient, register, team_factory
) -> None:
    owner = register("student")
    members = [register("student") for _ in range(3)]
    team = team_factory(owner, *members)

    message = _send(client, members[0], f"team/{team['id']}", "report is ready")
    for account in [owner, *members]:
        received = [
            item
            for item in _inbox(client, account)
            if item["type"] == "message" and item["message_id"] == message["id"]
        ]
        assert len(received) == (0 if account is members[0] else 1)
        if received:
            assert received[0]["title"] == "New Team Message"


def test_non_members_are_kept_out_of_team_chat(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    outsider = register("student")
    team = team_factory(owner)

    read = client.get(f"/api/chats/team/{team['id']}", headers=outsider.headers)
    assert read.status_code == 403
    write = client.post(
        f"/api/chats/team/{team['id']}", headers=outsider.headers, json={"content": "let me in"}
    )
    assert write.status_code == 403
    missing = client.get("/api/chats/team/999", headers=owner.headers)
    assert missing.status_code == 404


def test_project_chat_is_for_participants(client: TestClient, register, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    outsider = register("student")

    message = _send(client, freelancer, f"project/{project['id']}", "status?")
    assert message["project_id"] == project["id"]
    titles = [item["title"] for item in _inbox(client, owner) if item["type"] == "message"]
    assert titles == ["New Project Message"]

    denied = client.post(
        f"/api/chats/project/{project['id']}", headers=outsider.headers, json={"content": "hi"}
    )
    assert denied.status_code == 403


def test_history_pages_newest_first_in_chronological_order(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    for index in range(5):
        _send(client, alice, f"private/{bob.id}", f"message {index}")

    first = client.get(f"/api/chats/private/{alice.id}?limit=2", headers=bob.headers).json()
    assert [item["content"] for item in first["messages"]] == ["message 3", "message 4"]
    assert first["total"] == 5
    assert first["pages"] == 3
    second = client.get(
        f"/api/chats/private/{alice.id}?limit=2&page=2", headers=bob.headers
    ).json()
    assert [item["content"] for item in second["messages"]] == ["message 1", "message 2"]


def test_reply_goes_to_the_other_party(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    original = _send(client, alice, f"private/{bob.id}", "ping")

    reply = client.post(
        f"/api/chats/{original['id']}/reply", headers=bob.headers, json={"content": "pong"}
    )
    assert reply.status_code == 201
    body = reply.json()["message"]
    assert body["recipient_id"] == alice.id
    assert body["reply_to_id"] == original["id"]
    titles = [item["title"] for item in _inbox(client, alice)]
    assert "New Reply to Message" in titles


def test_only_sender_deletes_message(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    message = _send(client, alice, f"private/{bob.id}")

    assert client.delete(f"/api/chats/{message['id']}", headers=bob.headers).status_code == 403
    assert client.delete(f"/api/chats/{message['id']}", headers=alice.headers).status_code == 200
    assert client.delete(f"/api/chats/{message['id']}", headers=alice.headers).status_code == 404


def test_unread_counts_and_conversations(client: TestClient, register, team_factory) -> None:
    alice = register("student")
    bob = register("student")
    team = team_factory(alice, bob)
    _send(client, alice, f"private/{bob.id}", "direct")
    _send(client, alice, f"team/{team['id']}", "group")

    unread = client.get("/api/chats/unread", headers=bob.headers).json()["unread"]
    assert unread == {"total": 2, "private": 1, "team": 1, "project": 0}

    conversations = client.get("/api/chats/conversations", headers=bob.headers).json()
    kinds = [item["kind"] for item in conversations["conversations"]]
    assert kinds == ["team", "direct"]
    assert all(item["unread"] == 1 for item in conversations["conversations"])


def test_attachments_are_limited(client: TestClient, register) -> None:
    alice = register("student")
    bob = register("student")
    url = f"/api/chats/private/{bob.id}"

    ok = client.post(
        url,
        headers=alice.headers,
        json={"message_type": "file", "file_url": "https://cdn/x.pdf", "file_name": "x.pdf",
              "file_size": 1024},
    )
    assert ok.status_code == 201
    assert ok.json()["message"]["file_name"] == "x.pdf"

    too_big = client.post(
        url,
        headers=alice.headers,
        json={"message_type": "file", "file_url": "https://cdn/y.bin", "file_size": 50 * 1024**2},
    )
    assert too_big.status_code == 400

    wrong_type = client.post(
        url, headers=alice.headers, json={"message_type": "text", "file_url": "https://cdn/z"}
    )
    assert wrong_type.status_code == 400
