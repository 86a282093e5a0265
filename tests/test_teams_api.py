"""Team, membership and invitation endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient


def _titles(client: TestClient, account) -> list[str]:
    inbox = client.get("/api/notifications/", headers=account.headers).json()
    return [item["title"] for item in inbox["notifications"]]


def test_creator_is_first_admin(client: TestClient, register) -> None:
    owner = register("student")
    response = client.post(
        "/api/teams/", headers=owner.headers, json={"name": "Blue Team", "skills": ["siem"]}
    )
    assert response.status_code == 201
    team = response.json()["team"]
    assert team["creator_id"] == owner.id
    assert [(m["user_id"], m["role"]) for m in team["members"]] == [(owner.id, "admin")]


def test_invitation_carries_actions_and_accept_joins(client: TestClient, register) -> None:
    owner = register("student")
    invitee = register("student")
    team = client.post("/api/teams/", headers=owner.headers, json={"name": "Blue"}).json()["team"]

    invited = client.post(
        f"/api/teams/{team['id']}/invitations",
        headers=owner.headers,
        json={"user_id": invitee.id},
    )
    assert invited.status_code == 201

    pending = client.get("/api/teams/invitations", headers=invitee.headers).json()
    assert [item["team_id"] for item in pending["invitations"]] == [team["id"]]

    inbox = client.get("/api/notifications/", headers=invitee.headers).json()["notifications"]
    invitation = next(item for item in inbox if item["title"] == "Team Invitation")
    assert [action["label"] for action in invitation["actions"]] == ["Accept", "Decline"]
    assert invitation["actions"][0]["value"] == f"/api/teams/{team['id']}/invitations/accept"

    accepted = client.post(
        f"/api/teams/{team['id']}/invitations/accept", headers=invitee.headers
    )
    assert accepted.status_code == 200
    member_ids = [member["user_id"] for member in accepted.json()["team"]["members"]]
    assert invitee.id in member_ids
    assert "Invitation Accepted" in _titles(client, owner)

    again = client.post(f"/api/teams/{team['id']}/invitations/accept", headers=invitee.headers)
    assert again.status_code == 400


def test_only_admins_invite(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    member = register("student")
    outsider = register("student")
    team = team_factory(owner, member)

    response = client.post(
        f"/api/teams/{team['id']}/invitations",
        headers=member.headers,
        json={"user_id": outsider.id},
    )
    assert response.status_code == 403


def test_decline_invitation(client: TestClient, register) -> None:
    owner = register("student")
    invitee = register("student")
    team = client.post("/api/teams/", headers=owner.headers, json={"name": "Blue"}).json()["team"]
    client.post(
        f"/api/teams/{team['id']}/invitations", headers=owner.headers, json={"user_id": invitee.id}
    )

    response = client.post(
        f"/api/teams/{team['id']}/invitations/decline", headers=invitee.headers
    )
    assert response.status_code == 200
    assert "Invitation Declined" in _titles(client, owner)
    assert client.get("/api/teams/mine", headers=invitee.headers).json()["count"] == 0


def test_creator_cannot_be_removed_or_leave(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    member = register("student")
    team = team_factory(owner, member)
    client.put(
        f"/api/teams/{team['id']}/members/{member.id}",
        headers=owner.headers,
        json={"role": "admin"},
    )

    removed = client.delete(
        f"/api/teams/{team['id']}/members/{owner.id}", headers=member.headers
    )
    assert removed.status_code == 400
    left = client.post(f"/api/teams/{team['id']}/leave", headers=owner.headers)
    assert left.status_code == 400


def test_member_can_leave_and_admin_is_told(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    member = register("student")
    team = team_factory(owner, member)

    response = client.post(f"/api/teams/{team['id']}/leave", headers=member.headers)
    assert response.status_code == 200
    assert "Member Left Team" in _titles(client, owner)
    members = client.get(f"/api/teams/{team['id']}", headers=owner.headers).json()["team"]["members"]
    assert [m["user_id"] for m in members] == [owner.id]


def test_transfer_ownership(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    member = register("student")
    outsider = register("student")
    team = team_factory(owner, member)
    url = f"/api/teams/{team['id']}/transfer-ownership"

    assert client.put(url, headers=member.headers, json={"new_owner_id": member.id}).status_code == 403
    assert client.put(url, headers=owner.headers, json={"new_owner_id": outsider.id}).status_code == 404

    response = client.put(url, headers=owner.headers, json={"new_owner_id": member.id})
    assert response.status_code == 200
    transferred = response.json()["team"]
    assert transferred["creator_id"] == member.id
    roles = {m["user_id"]: m["role"] for m in transferred["members"]}
    assert roles[member.id] == "admin"
    assert "Team Ownership Transferred" in _titles(client, member)


def test_assign_team_to_open_project(client: TestClient, register, open_project, team_factory) -> None:
    project_owner, project = open_project
    lead = register("student")
    member = register("student")
    team = team_factory(lead, member)

    response = client.post(
        f"/api/teams/{team['id']}/projects/{project['id']}", headers=lead.headers
    )
    assert response.status_code == 200
    assigned = response.json()["project"]
    assert assigned["status"] == "in_progress"
    assert assigned["assigned_team_id"] == team["id"]

    assert "Team Assigned to Project" in _titles(client, member)
    assert "Team Assigned to Your Project" in _titles(client, project_owner)

    again = client.post(f"/api/teams/{team['id']}/projects/{project['id']}", headers=lead.headers)
    assert again.status_code == 400


def test_team_notification_reaches_members_but_not_sender(
    client: TestClient, register, team_factory
) -> None:
    owner = register("student")
    first = register("student")
    second = register("student")
    team = team_factory(owner, first, second)

    response = client.post(
        f"/api/notifications/team/{team['id']}",
        headers=owner.headers,
        json={"title": "Standup", "content": "In five minutes"},
    )
    assert response.status_code == 201
    assert response.json()["count"] == 2
    assert "Standup" in _titles(client, first)
    assert "Standup" not in _titles(client, owner)

    denied = client.post(
        f"/api/notifications/team/{team['id']}",
        headers=first.headers,
        json={"title": "Nope", "content": "Members cannot broadcast"},
    )
    assert denied.status_code == 403


def test_delete_team_is_creator_only(client: TestClient, register, team_factory) -> None:
    owner = register("student")
    member = register("student")
    team = team_factory(owner, member)

    assert client.delete(f"/api/teams/{team['id']}", headers=member.headers).status_code == 403
    assert client.delete(f"/api/teams/{team['id']}", headers=owner.headers).status_code == 200
    assert client.get(f"/api/teams/{team['id']}", headers=owner.headers).status_code == 404
