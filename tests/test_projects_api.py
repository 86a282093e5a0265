"""Project, proposal, milestone and review endpoints."""

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm.exc import StaleDataError

from cyberhunter.domain.errors import ConflictError
from cyberhunter.infrastructure.repositories import ProjectRepository


def _notifications(client: TestClient, account) -> list[dict]:
    return client.get("/api/notifications/", headers=account.headers).json()["notifications"]


def test_only_clients_create_projects(client: TestClient, register) -> None:
    student = register("student")
    response = client.post(
        "/api/projects/",
        headers=student.headers,
        json={"title": "X", "description": "Y", "category": "cybersecurity", "budget": 10},
    )
    assert response.status_code == 403


def test_invalid_category_is_rejected(client: TestClient, register) -> None:
    owner = register("client")
    response = client.post(
        "/api/projects/",
        headers=owner.headers,
        json={"title": "X", "description": "Y", "category": "astrology", "budget": 10},
    )
    assert response.status_code == 400
    assert "Invalid category" in response.json()["message"]


def test_accepting_a_proposal_starts_the_project(client: TestClient, register, open_project) -> None:
    owner, project = open_project
    freelancer = register("student")

    submitted = client.post(
        f"/api/projects/{project['id']}/proposals",
        headers=freelancer.headers,
        json={"cover_letter": "Let me at it.", "bid_amount": 400},
    )
    assert submitted.status_code == 201
    proposal = submitted.json()["proposal"]
    assert proposal["status"] == "pending"

    client_inbox = _notifications(client, owner)
    assert [item["title"] for item in client_inbox] == ["New Proposal Received"]

    answered = client.put(
        f"/api/projects/{project['id']}/proposals/{proposal['id']}",
        headers=owner.headers,
        json={"status": "accepted"},
    )
    assert answered.status_code == 200
    body = answered.json()
    assert body["project"]["status"] == "in_progress"
    assert body["project"]["assigned_freelancer_ids"] == [freelancer.id]
    assert body["proposal"]["status"] == "accepted"

    inbox = _notifications(client, freelancer)
    accepted = [item for item in inbox if item["type"] == "proposal"]
    assert len(accepted) == 1
    assert "accepted" in accepted[0]["content"]


def test_duplicate_proposal_is_rejected(client: TestClient, register, open_project) -> None:
    _, project = open_project
    freelancer = register("student")
    payload = {"cover_letter": "Hi", "bid_amount": 100}
    url = f"/api/projects/{project['id']}/proposals"
    assert client.post(url, headers=freelancer.headers, json=payload).status_code == 201
    again = client.post(url, headers=freelancer.headers, json=payload)
    assert again.status_code == 400


def test_browse_lists_open_projects_with_envelope(client: TestClient, register, open_project) -> None:
    viewer = register("student")
    response = client.get("/api/projects/?search=pentest&limit=5", headers=viewer.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total"] == 1
    assert body["count"] == 1
    assert body["pages"] == 1
    assert body["currentPage"] == 1
    assert body["projects"][0]["title"] == "Pentest our API"


def test_project_detail_hides_proposals_from_strangers(
    client: TestClient, register, open_project
) -> None:
    owner, project = open_project
    stranger = register("student")

    as_owner = client.get(f"/api/projects/{project['id']}", headers=owner.headers).json()
    assert as_owner["project"]["proposals"] == []
    as_stranger = client.get(f"/api/projects/{project['id']}", headers=stranger.headers).json()
    assert as_stranger["project"]["proposals"] is None
    assert as_stranger["project"]["views"] == 2


def test_only_owner_updates_project(client: TestClient, register, open_project) -> None:
    owner, project = open_project
    other = register("client")
    url = f"/api/projects/{project['id']}"
    assert client.put(url, headers=other.headers, json={"budget": 1}).status_code == 403

    updated = client.put(url, headers=owner.headers, json={"budget": 750})
    assert updated.status_code == 200
    assert updated.json()["project"]["budget"] == 750


def test_milestones_lifecycle(client: TestClient, open_project) -> None:
    owner, project = open_project
    created = client.post(
        f"/api/projects/{project['id']}/milestones",
        headers=owner.headers,
        json={"title": "Recon", "amount": 100},
    )
    assert created.status_code == 201
    milestone = created.json()["milestone"]

    completed = client.put(
        f"/api/projects/{project['id']}/milestones/{milestone['id']}/complete",
        headers=owner.headers,
    )
    assert completed.status_code == 200
    assert completed.json()["milestone"]["status"] == "completed"

    again = client.put(
        f"/api/projects/{project['id']}/milestones/{milestone['id']}/complete",
        headers=owner.headers,
    )
    assert again.status_code == 400


def test_complete_and_review(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    url = f"/api/projects/{project['id']}"

    early = client.post(f"{url}/reviews", headers=owner.headers, json={"rating": 5})
    assert early.status_code == 400

    completed = client.put(f"{url}/complete", headers=owner.headers)
    assert completed.status_code == 200
    assert completed.json()["project"]["status"] == "completed"

    me = client.get("/api/auth/me", headers=freelancer.headers).json()["user"]
    assert me["points"] == 50
    assert me["completed_projects"] == 1

    review = client.post(
        f"{url}/reviews", headers=owner.headers, json={"rating": 5, "comment": "Great"}
    )
    assert review.status_code == 201
    assert review.json()["project"]["reviews"]["client"]["rating"] == 5
    twice = client.post(f"{url}/reviews", headers=owner.headers, json={"rating": 4})
    assert twice.status_code == 400

    freelancer_review = client.post(f"{url}/reviews", headers=freelancer.headers, json={"rating": 4})
    assert freelancer_review.status_code == 201


def test_in_progress_project_cannot_be_deleted(client: TestClient, staffed_project) -> None:
    owner, _, project = staffed_project
    response = client.delete(f"/api/projects/{project['id']}", headers=owner.headers)
    assert response.status_code == 400


def test_save_toggle(client: TestClient, register, open_project) -> None:
    _, project = open_project
    student = register("student")
    url = f"/api/projects/{project['id']}/save"

    assert client.post(url, headers=student.headers).json()["saved"] is True
    saved = client.get("/api/projects/saved", headers=student.headers).json()
    assert [item["id"] for item in saved["projects"]] == [project["id"]]
    assert client.post(url, headers=student.headers).json()["saved"] is False
    assert client.get("/api/projects/saved", headers=student.headers).json()["count"] == 0


def test_project_update_notifies_participants(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    response = client.post(
        f"/api/projects/{project['id']}/updates",
        headers=freelancer.headers,
        json={"update_type": "progress", "content": "Recon finished"},
    )
    assert response.status_code == 200
    assert response.json()["update"]["updateType"] == "progress"

    titles = [item["title"] for item in _notifications(client, owner)]
    assert "Project Update: progress" in titles


def test_unknown_project_is_404(client: TestClient, register) -> None:
    viewer = register("student")
    response = client.get("/api/projects/999", headers=viewer.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"


def test_stale_project_versions_are_rejected(
    client: TestClient, db_session, open_project
) -> None:
    owner, project = open_project
    repository = ProjectRepository(db_session)
    stale = repository.get(project["id"])

    renamed = client.put(
        f"/api/projects/{project['id']}",
        headers=owner.headers,
        json={"title": "Renamed elsewhere"},
    )
    assert renamed.status_code == 200

    # The cached row still has the old version, so the versioned UPDATE matches nothing.
    with pytest.raises(StaleDataError):
        repository.update(replace(stale, title="Mine"))
    db_session.rollback()

    # Once reloaded the row carries the new version and the entity no longer matches it.
    with pytest.raises(ConflictError):
        repository.update(replace(stale, title="Mine"))
    db_session.rollback()

    current = client.get(f"/api/projects/{project['id']}", headers=owner.headers).json()
    assert current["project"]["title"] == "Renamed elsewhere"
