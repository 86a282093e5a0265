"""Notification inbox, admin sends and delivery bookkeeping."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from cyberhunter.application.use_cases.notifications import queue_notification
from cyberhunter.config import get_settings
from cyberhunter.infrastructure.database import SessionLocal
from cyberhunter.infrastructure.models import NotificationModel
from cyberhunter.infrastructure.notifications import (
    deliver_notifications,
    flush_pending_notifications,
)
from cyberhunter.infrastructure.repositories import NotificationRepository


def _inbox(client: TestClient, account, query: str = "") -> dict:
    response = client.get(f"/api/notifications/{query}", headers=account.headers)
    assert response.status_code == 200
    return response.json()


def test_inbox_read_and_delete_flow(client: TestClient, register, admin) -> None:
    user = register("student")
    for index in range(3):
        client.post(
            f"/api/notifications/user/{user.id}",
            headers=admin.headers,
            json={"title": f"Notice {index}", "content": "Please read"},
        )

    inbox = _inbox(client, user)
    assert inbox["total"] == 3
    assert [item["title"] for item in inbox["notifications"]] == [
        "Notice 2",
        "Notice 1",
        "Notice 0",
    ]
    assert client.get("/api/notifications/unread-count", headers=user.headers).json()["count"] == 3

    first = inbox["notifications"][0]
    for _ in range(2):
        read = client.put(f"/api/notifications/{first['id']}/read", headers=user.headers)
        assert read.status_code == 200
        assert read.json()["notification"]["is_read"] is True
    assert _inbox(client, user, "?unread_only=true")["total"] == 2

    cleared = client.delete("/api/notifications/read", headers=user.headers)
    assert cleared.json()["count"] == 1
    all_read = client.put("/api/notifications/read-all", headers=user.headers)
    assert all_read.json()["count"] == 2
    assert client.get("/api/notifications/unread-count", headers=user.headers).json()["count"] == 0


def test_notifications_are_private_to_their_owner(client: TestClient, register, admin) -> None:
    owner = register("student")
    other = register("student")
    sent = client.post(
        f"/api/notifications/user/{owner.id}",
        headers=admin.headers,
        json={"title": "Yours", "content": "Only yours"},
    ).json()["notification"]

    assert client.put(f"/api/notifications/{sent['id']}/read", headers=other.headers).status_code == 403
    assert client.delete(f"/api/notifications/{sent['id']}", headers=other.headers).status_code == 403
    assert client.delete(f"/api/notifications/{sent['id']}", headers=owner.headers).status_code == 200
    assert client.delete(f"/api/notifications/{sent['id']}", headers=owner.headers).status_code == 404


def test_system_notification_reaches_all_active_users(client: TestClient, register, admin) -> None:
    users = [register("student"), register("client")]
    response = client.post(
        "/api/notifications/system",
        headers=admin.headers,
        json={"title": "Maintenance", "content": "Down at midnight", "priority": "high"},
    )
    assert response.status_code == 201
    for user in users:
        notification = _inbox(client, user)["notifications"][0]
        assert notification["type"] == "system"
        assert notification["priority"] == "high"


def test_admin_sends_are_admin_only(client: TestClient, register) -> None:
    user = register("student")
    response = client.post(
        "/api/notifications/system",
        headers=user.headers,
        json={"title": "Hi", "content": "All"},
    )
    assert response.status_code == 403


def test_expired_notifications_are_hidden(client: TestClient, register, admin) -> None:
    user = register("student")
    past = (datetime.now(timezone.utc) - timedelta(minutes=5)).isoformat()
    client.post(
        f"/api/notifications/user/{user.id}",
        headers=admin.headers,
        json={"title": "Stale", "content": "Gone", "expires_at": past},
    )
    assert _inbox(client, user)["total"] == 0


def test_completing_an_invitation_action(client: TestClient, register) -> None:
    owner = register("student")
    invitee = register("student")
    team = client.post("/api/teams/", headers=owner.headers, json={"name": "Blue"}).json()["team"]
    client.post(
        f"/api/teams/{team['id']}/invitations", headers=owner.headers, json={"user_id": invitee.id}
    )
    notification = _inbox(client, invitee)["notifications"][0]

    done = client.put(
        f"/api/notifications/{notification['id']}/actions/0", headers=invitee.headers
    )
    assert done.status_code == 200
    assert done.json()["notification"]["actions"][0]["completed"] is True

    invalid = client.put(
        f"/api/notifications/{notification['id']}/actions/5", headers=invitee.headers
    )
    assert invalid.status_code == 400


def test_delivery_without_event_loop_records_failure(db_session, register) -> None:
    user = register("student")
    notification = queue_notification(
        db_session,
        recipient_id=user.id,
        type="system",
        title="Offline",
        content="No loop here",
    )
    db_session.commit()

    assert deliver_notifications(db_session, [notification]) == 0
    stored = NotificationRepository(db_session).get(notification.id)
    assert stored.dispatch_status == "pending"
    assert stored.dispatch_attempts == 1


def _queue_offline(db_session, user) -> int:
    notification = queue_notification(
        db_session,
        recipient_id=user.id,
        type="system",
        title="Offline",
        content="Nobody is listening",
    )
    db_session.commit()
    return notification.id


def test_outbox_retries_then_gives_up(db_session, register) -> None:
    user = register("student")
    notification_id = _queue_offline(db_session, user)
    max_attempts = get_settings().outbox_max_attempts

    for attempt in range(1, max_attempts):
        assert flush_pending_notifications() == 0
        db_session.expire_all()
        stored = NotificationRepository(db_session).get(notification_id)
        assert stored.dispatch_status == "pending"
        assert stored.dispatch_attempts == attempt

    flush_pending_notifications()
    db_session.expire_all()
    stored = NotificationRepository(db_session).get(notification_id)
    assert stored.dispatch_status == "failed"
    assert stored.dispatch_attempts == max_attempts
    model = db_session.get(NotificationModel, notification_id)
    assert model.last_dispatch_error == "No event loop available"
    assert notification_id not in NotificationRepository(db_session).pending_ids()

    flush_pending_notifications()
    db_session.expire_all()
    assert NotificationRepository(db_session).get(notification_id).dispatch_attempts == max_attempts


def test_dispatch_failures_from_two_sessions_both_count(db_session, register) -> None:
    user = register("student")
    notification_id = _queue_offline(db_session, user)
    assert db_session.get(NotificationModel, notification_id).dispatch_attempts == 0

    other = SessionLocal()
    try:
        NotificationRepository(other).record_dispatch_failure(
            notification_id, error="first", max_attempts=5
        )
        other.commit()
    finally:
        other.close()

    gave_up = NotificationRepository(db_session).record_dispatch_failure(
        notification_id, error="second", max_attempts=2
    )
    db_session.commit()

    assert gave_up is True
    stored = NotificationRepository(db_session).get(notification_id)
    assert stored.dispatch_attempts == 2
    assert stored.dispatch_status == "failed"
    assert db_session.get(NotificationModel, notification_id).last_dispatch_error == "second"
