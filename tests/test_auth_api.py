"""Registration, login and account maintenance endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import PASSWORD


def test_register_login_and_me(client: TestClient, register) -> None:
    account = register("client", name="Ada Client")

    me = client.get("/api/auth/me", headers=account.headers)
    assert me.status_code == 200
    user = me.json()["user"]
    assert user["email"] == account.email
    assert user["role"] == "client"
    assert user["is_verified"] is False
    assert "password" not in user

    login = client.post("/api/auth/login", json={"email": account.email, "password": PASSWORD})
    assert login.status_code == 200
    assert login.json()["token"]


def test_register_rejects_admin_role_and_duplicates(client: TestClient, register) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@example.com", "password": PASSWORD, "role": "admin"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False

    account = register("student")
    duplicate = client.post(
        "/api/auth/register",
        json={"name": "Again", "email": account.email, "password": PASSWORD, "role": "student"},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "User already exists"


def test_login_with_wrong_password_is_unauthorized(client: TestClient, register) -> None:
    account = register("student")
    response = client.post("/api/auth/login", json={"email": account.email, "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_missing_token_is_rejected(client: TestClient) -> None:
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


def test_oauth_token_endpoint_returns_bearer_token(client: TestClient, register) -> None:
    account = register("student")
    response = client.post(
        "/api/auth/token", data={"username": account.email, "password": PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "student"


def test_password_change_invalidates_previous_token(client: TestClient, register) -> None:
    account = register("student")
    response = client.put(
        "/api/auth/password",
        headers=account.headers,
        json={"current_password": PASSWORD, "new_password": "Another456"},
    )
    assert response.status_code == 200
    new_token = response.json()["token"]

    assert client.get("/api/auth/me", headers=account.headers).status_code == 401
    fresh = client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"})
    assert fresh.status_code == 200


def test_profile_update_normalizes_skills(client: TestClient, register) -> None:
    account = register("student")
    response = client.put(
        "/api/auth/profile",
        headers=account.headers,
        json={"bio": "Blue teamer", "skills": [" python ", "", "forensics"]},
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["bio"] == "Blue teamer"
    assert user["skills"] == ["python", "forensics"]


def test_forgot_password_does_not_reveal_unknown_emails(client: TestClient, register) -> None:
    account = register("student")
    known = client.post("/api/auth/forgot-password", json={"email": account.email})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 202
    assert known.json() == unknown.json()


def test_reset_password_with_token(client: TestClient, register, monkeypatch) -> None:
    from cyberhunter.interfaces.api.routes import auth as auth_routes

    captured: dict[str, str] = {}

    def fake_send(email, name, token, expires_minutes):
        captured["token"] = token
        return True

    monkeypatch.setattr(auth_routes, "send_password_reset_email", fake_send)
    account = register("student")
    client.post("/api/auth/forgot-password", json={"email": account.email})

    response = client.post(
        f"/api/auth/reset-password/{captured['token']}", json={"password": "Brand-new-1"}
    )
    assert response.status_code == 200
    login = client.post(
        "/api/auth/login", json={"email": account.email, "password": "Brand-new-1"}
    )
    assert login.status_code == 200

    reused = client.post(
        f"/api/auth/reset-password/{captured['token']}", json={"password": "Brand-new-2"}
    )
    assert reused.status_code == 400


def test_verify_email_token(client: TestClient, monkeypatch) -> None:
    from cyberhunter.interfaces.api.routes import auth as auth_routes

    captured: dict[str, str] = {}

    def fake_send(email, name, token):
        captured["token"] = token
        return True

    monkeypatch.setattr(auth_routes, "send_verification_email", fake_send)
    registered = client.post(
        "/api/auth/register",
        json={"name": "Val", "email": "val@example.com", "password": PASSWORD, "role": "student"},
    ).json()

    response = client.get(f"/api/auth/verify-email/{captured['token']}")
    assert response.status_code == 200
    me = client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {registered['token']}"}
    ).json()
    assert me["user"]["is_verified"] is True

    assert client.get("/api/auth/verify-email/not-a-token").status_code == 400


def test_deactivated_user_token_is_rejected(client: TestClient, register, admin) -> None:
    account = register("student")
    response = client.put(
        f"/api/admin/users/{account.id}", headers=admin.headers, json={"is_active": False}
    )
    assert response.status_code == 200

    rejected = client.get("/api/auth/me", headers=account.headers)
    assert rejected.status_code == 401
