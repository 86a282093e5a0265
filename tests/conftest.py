"""Shared fixtures: a throwaway SQLite database and an authenticated client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pytest

TEST_DB_PATH = Path(__file__).parent / "test.db"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["OUTBOX_POLL_SECONDS"] = "0"
os.environ["ENVIRONMENT"] = "test"
for name in ("SENDGRID_API_KEY", "SENDGRID_SENDER"):
    os.environ.pop(name, None)

from fastapi.testclient import TestClient  # noqa: E402

from cyberhunter.application.use_cases.admin import create_admin  # noqa: E402
from cyberhunter.infrastructure import models  # noqa: E402,F401
from cyberhunter.infrastructure.database import Base, SessionLocal, engine  # noqa: E402

PASSWORD = "Secret123"


@dataclass
class Account:
    id: int
    name: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_database():
    """Give every test an empty schema."""

    Base.metadata.drop_all(bind=engine, checkfirst=True)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def register(client: TestClient):
    """Register a user through the API and return its credentials."""

    counter = {"value": 0}

    def _register(role: str = "student", name: str | None = None) -> Account:
        counter["value"] += 1
        name = name or f"{role.title()} {counter['value']}"
        email = f"{role}{counter['value']}@example.com"
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": PASSWORD, "role": role},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return Account(id=body["user"]["id"], name=name, email=email, token=body["token"])

    return _register


@pytest.fixture()
def admin(client: TestClient) -> Account:
    session = SessionLocal()
    try:
        user = create_admin(
            session, name="Site Admin", email="admin@example.com", password=PASSWORD
        )
    finally:
        session.close()
    response = client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return Account(id=user.id, name=user.name, email=user.email, token=response.json()["token"])


@pytest.fixture()
def open_project(client: TestClient, register):
    """A client with an open project."""

    owner = register("client")
    response = client.post(
        "/api/projects/",
        headers=owner.headers,
        json={
            "title": "Pentest our API",
            "description": "Find the holes before someone else does.",
            "category": "cybersecurity",
            "budget": 500,
            "skills": ["python", "burp"],
        },
    )
    assert response.status_code == 201, response.text
    return owner, response.json()["project"]


@pytest.fixture()
def staffed_project(client: TestClient, register, open_project):
    """An in-progress project with one accepted freelancer."""

    owner, project = open_project
    freelancer = register("student")
    proposal = client.post(
        f"/api/projects/{project['id']}/proposals",
        headers=freelancer.headers,
        json={"cover_letter": "I know this stack well.", "bid_amount": 450},
    ).json()["proposal"]
    response = client.put(
        f"/api/projects/{project['id']}/proposals/{proposal['id']}",
        headers=owner.headers,
        json={"status": "accepted"},
    )
    assert response.status_code == 200, response.text
    return owner, freelancer, response.json()["project"]


def make_team(client: TestClient, owner: Account, *members: Account, name: str = "Red Team") -> dict:
    """Create a team owned by ``owner`` and bring ``members`` in through invitations."""

    team = client.post("/api/teams/", headers=owner.headers, json={"name": name}).json()["team"]
    for member in members:
        invited = client.post(
            f"/api/teams/{team['id']}/invitations",
            headers=owner.headers,
            json={"user_id": member.id},
        )
        assert invited.status_code == 201, invited.text
        accepted = client.post(
            f"/api/teams/{team['id']}/invitations/accept", headers=member.headers
        )
        assert accepted.status_code == 200, accepted.text
        team = accepted.json()["team"]
    return team


@pytest.fixture()
def team_factory(client: TestClient):
    def _make(owner: Account, *members: Account, name: str = "Red Team") -> dict:
        return make_team(client, owner, *members, name=name)

    return _make
