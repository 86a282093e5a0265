"""Task endpoints: creation, status, assignment, comments and dependencies."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy import update

from cyberhunter.infrastructure.models import TaskTimeEntryModel
from cyberhunter.utils import now_in_app_naive_datetime


def _create_task(client: TestClient, account, project_id: int, **fields) -> dict:
    payload = {"project_id": project_id, "title": fields.pop("title", "Scan ports"), **fields}
    response = client.post("/api/tasks/", headers=account.headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["task"]


def test_create_task_notifies_assignee(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])
    assert task["assignee_ids"] == [freelancer.id]
    assert task["status"] == "not_started"

    inbox = client.get("/api/notifications/", headers=freelancer.headers).json()
    assert "New Task Assignment" in [item["title"] for item in inbox["notifications"]]

    mine = client.get("/api/tasks/mine", headers=freelancer.headers).json()
    assert [item["id"] for item in mine["tasks"]] == [task["id"]]


def test_outsiders_cannot_create_or_be_assigned(client: TestClient, register, staffed_project) -> None:
    owner, _, project = staffed_project
    outsider = register("student")

    denied = client.post(
        "/api/tasks/",
        headers=outsider.headers,
        json={"project_id": project["id"], "title": "Sneaky"},
    )
    assert denied.status_code == 403

    rejected = client.post(
        "/api/tasks/",
        headers=owner.headers,
        json={"project_id": project["id"], "title": "X", "assignee_ids": [outsider.id]},
    )
    assert rejected.status_code == 400


def test_deleting_a_task_removes_its_subtasks(client: TestClient, staffed_project) -> None:
    owner, _, project = staffed_project
    parent = _create_task(client, owner, project["id"], title="Parent")
    child = client.post(
        f"/api/tasks/{parent['id']}/subtasks", headers=owner.headers, json={"title": "Child"}
    ).json()["task"]
    grandchild = client.post(
        f"/api/tasks/{child['id']}/subtasks", headers=owner.headers, json={"title": "Grandchild"}
    ).json()["task"]
    sibling = _create_task(client, owner, project["id"], title="Sibling")

    assert client.get(f"/api/tasks/{parent['id']}", headers=owner.headers).json()["task"][
        "subtask_ids"
    ] == [child["id"]]

    response = client.delete(f"/api/tasks/{parent['id']}", headers=owner.headers)
    assert response.status_code == 200
    assert sorted(response.json()["deleted_ids"]) == sorted(
        [parent["id"], child["id"], grandchild["id"]]
    )

    remaining = client.get(f"/api/tasks/project/{project['id']}", headers=owner.headers).json()
    assert [item["id"] for item in remaining["tasks"]] == [sibling["id"]]
    assert client.get(f"/api/tasks/{child['id']}", headers=owner.headers).status_code == 404


def test_completing_a_task_awards_points(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])

    response = client.put(
        f"/api/tasks/{task['id']}", headers=freelancer.headers, json={"status": "done"}
    )
    assert response.status_code == 200
    done = response.json()["task"]
    assert done["progress"] == 100
    assert done["completed_at"] is not None

    me = client.get("/api/auth/me", headers=freelancer.headers).json()["user"]
    assert me["points"] == 10

    inbox = client.get("/api/notifications/", headers=owner.headers).json()["notifications"]
    assert "Task Status Updated" in [item["title"] for item in inbox]


def test_progress_of_100_marks_done(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])
    url = f"/api/tasks/{task['id']}/progress"

    halfway = client.put(url, headers=freelancer.headers, json={"progress": 50}).json()["task"]
    assert halfway["status"] == "not_started"
    finished = client.put(url, headers=freelancer.headers, json={"progress": 100}).json()["task"]
    assert finished["status"] == "done"

    assert client.put(url, headers=freelancer.headers, json={"progress": 101}).status_code == 400


def test_assign_and_unassign(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"])

    assigned = client.post(
        f"/api/tasks/{task['id']}/assign", headers=owner.headers, json={"user_id": freelancer.id}
    )
    assert assigned.status_code == 200
    assert assigned.json()["task"]["assignee_ids"] == [freelancer.id]
    duplicate = client.post(
        f"/api/tasks/{task['id']}/assign", headers=owner.headers, json={"user_id": freelancer.id}
    )
    assert duplicate.status_code == 400

    removed = client.delete(
        f"/api/tasks/{task['id']}/assign/{freelancer.id}", headers=owner.headers
    )
    assert removed.status_code == 200
    assert removed.json()["task"]["assignee_ids"] == []
    again = client.delete(f"/api/tasks/{task['id']}/assign/{freelancer.id}", headers=owner.headers)
    assert again.status_code == 400


def test_comments_are_added_and_deleted_by_author(client: TestClient, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])

    created = client.post(
        f"/api/tasks/{task['id']}/comments",
        headers=freelancer.headers,
        json={"content": "Port 22 is open"},
    )
    assert created.status_code == 201
    comment = created.json()["comment"]
    assert comment["user"] == freelancer.id

    inbox = client.get("/api/notifications/", headers=owner.headers).json()["notifications"]
    assert "New Comment on Task" in [item["title"] for item in inbox]

    url = f"/api/tasks/{task['id']}/comments/{comment['id']}"
    assert client.delete(url, headers=owner.headers).status_code == 403
    assert client.delete(url, headers=freelancer.headers).status_code == 200
    assert client.delete(url, headers=freelancer.headers).status_code == 404


def test_dependencies_reject_cycles(client: TestClient, staffed_project) -> None:
    owner, _, project = staffed_project
    first = _create_task(client, owner, project["id"], title="First")
    second = _create_task(client, owner, project["id"], title="Second")

    linked = client.post(
        f"/api/tasks/{second['id']}/dependencies",
        headers=owner.headers,
        json={"dependency_id": first["id"]},
    )
    assert linked.status_code == 200
    assert linked.json()["task"]["dependencies"] == [first["id"]]

    cycle = client.post(
        f"/api/tasks/{first['id']}/dependencies",
        headers=owner.headers,
        json={"dependency_id": second["id"]},
    )
    assert cycle.status_code == 400
    assert "circular" in cycle.json()["message"]

    unlinked = client.delete(
        f"/api/tasks/{second['id']}/dependencies/{first['id']}", headers=owner.headers
    )
    assert unlinked.status_code == 200
    assert unlinked.json()["task"]["dependencies"] == []


def test_project_tasks_require_participation(client: TestClient, register, staffed_project) -> None:
    _, _, project = staffed_project
    outsider = register("student")
    response = client.get(f"/api/tasks/project/{project['id']}", headers=outsider.headers)
    assert response.status_code == 403


def test_time_tracking_adds_sessions_to_actual_hours(
    client: TestClient, db_session, staffed_project
) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])
    url = f"/api/tasks/{task['id']}/time"

    started = client.post(
        f"{url}/start", headers=freelancer.headers, json={"description": "recon"}
    )
    assert started.status_code == 201, started.text
    session = started.json()["session"]
    assert session["ended_at"] is None

    again = client.post(f"{url}/start", headers=freelancer.headers)
    assert again.status_code == 400
    assert "active time tracking session" in again.json()["message"]

    started_at = now_in_app_naive_datetime() - timedelta(minutes=90)
    db_session.execute(
        update(TaskTimeEntryModel)
        .where(TaskTimeEntryModel.id == session["id"])
        .values(started_at=started_at)
    )
    db_session.commit()

    stopped = client.post(
        f"{url}/stop", headers=freelancer.headers, json={"description": "found open ports"}
    )
    assert stopped.status_code == 200, stopped.text
    body = stopped.json()
    assert body["session"]["duration_hours"] == 1.5
    assert body["session"]["description"] == "recon\nfound open ports"
    assert body["total_hours"] == 1.5

    assert client.post(f"{url}/stop", headers=freelancer.headers).status_code == 404

    restarted = client.post(f"{url}/start", headers=freelancer.headers)
    assert restarted.status_code == 201
    client.post(f"{url}/stop", headers=freelancer.headers)

    sessions = client.get(url, headers=owner.headers).json()
    assert sessions["count"] == 2
    refreshed = client.get(f"/api/tasks/{task['id']}", headers=owner.headers).json()["task"]
    assert refreshed["actual_hours"] >= 1.5


def test_only_assignees_track_time(client: TestClient, register, staffed_project) -> None:
    owner, freelancer, project = staffed_project
    task = _create_task(client, owner, project["id"], assignee_ids=[freelancer.id])
    url = f"/api/tasks/{task['id']}/time"

    assert client.post(f"{url}/start", headers=owner.headers).status_code == 403
    assert client.post("/api/tasks/9999/time/start", headers=freelancer.headers).status_code == 404
    assert client.get(url, headers=register("student").headers).status_code == 403
