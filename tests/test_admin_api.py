"""Administrator endpoints."""

from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from cyberhunter.application.use_cases.admin import get_system_stats


def test_admin_routes_require_admin_role(client: TestClient, register) -> None:
    student = register("student")
    for path in (
        "/api/admin/dashboard",
        "/api/admin/system",
        "/api/admin/users",
        "/api/admin/projects",
    ):
        assert client.get(path, headers=student.headers).status_code == 403
    assert client.get("/api/admin/dashboard").status_code == 401


def test_dashboard_counts(client: TestClient, admin, open_project) -> None:
    response = client.get("/api/admin/dashboard", headers=admin.headers)
    assert response.status_code == 200
    body = response.json()
    stats = body["stats"]
    assert stats["users"] == 2
    assert stats["usersByRole"]["client"] == 1
    assert stats["projects"] == 1
    assert stats["projectsByStatus"]["open"] == 1
    assert stats["totalProjectValue"] == 500
    assert stats["completedProjectValue"] == 0
    assert body["recentProjects"][0]["title"] == "Pentest our API"


def test_update_and_deactivate_user(client: TestClient, admin, register) -> None:
    student = register("student")

    listed = client.get(
        "/api/admin/users", headers=admin.headers, params={"role": "student"}
    ).json()
    assert listed["total"] == 1
    assert listed["users"][0]["email"] == student.email

    updated = client.put(
        f"/api/admin/users/{student.id}",
        headers=admin.headers,
        json={"is_verified": True, "is_active": False},
    )
    assert updated.status_code == 200
    assert updated.json()["user"]["is_verified"] is True

    assert client.get("/api/auth/me", headers=student.headers).status_code == 401


def test_delete_user_is_soft_and_spares_admins(client: TestClient, admin, register) -> None:
    student = register("student")

    assert client.delete(f"/api/admin/users/{admin.id}", headers=admin.headers).status_code == 400

    deleted = client.delete(f"/api/admin/users/{student.id}", headers=admin.headers)
    assert deleted.json()["message"] == "User deleted successfully"
    assert client.get(f"/api/admin/users/{student.id}", headers=admin.headers).status_code == 404
    assert client.delete(f"/api/admin/users/{student.id}", headers=admin.headers).status_code == 404


def test_admin_project_listing_and_removal(client: TestClient, admin, open_project) -> None:
    _, project = open_project

    listed = client.get(
        "/api/admin/projects", headers=admin.headers, params={"status": "open", "search": "pentest"}
    ).json()
    assert [item["id"] for item in listed["projects"]] == [project["id"]]

    removed = client.delete(f"/api/admin/projects/{project['id']}", headers=admin.headers)
    assert removed.status_code == 200
    assert client.get("/api/admin/projects", headers=admin.headers).json()["total"] == 0


def test_system_stats_cover_the_last_twelve_months(
    client: TestClient, admin, open_project
) -> None:
    response = client.get("/api/admin/system", headers=admin.headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["labels"]) == len(body["users"]) == len(body["projects"]) == 12
    assert body["users"][-1] == 2
    assert body["projects"][-1] == 1
    assert body["budgets"][-1] == 500
    assert sum(body["projects"][:-1]) == 0


def test_system_stats_months_span_year_end(db_session) -> None:
    stats = get_system_stats(db_session, months=3, today=date(2026, 2, 10))
    assert stats.labels == ["Dec 2025", "Jan 2026", "Feb 2026"]
    assert stats.users == [0, 0, 0]
