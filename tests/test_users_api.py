"""Profile browsing and personal figures."""

from __future__ import annotations

from fastapi.testclient import TestClient


def _set_skills(client: TestClient, account, skills: list[str]):
    return client.put("/api/users/skills", headers=account.headers, json={"skills": skills})


def test_freelancer_directory_filters_by_skill(client: TestClient, register) -> None:
    viewer = register("client")
    pentester = register("student", name="Pen Tester")
    analyst = register("student", name="Log Analyst")
    _set_skills(client, pentester, ["Burp", "python"])
    _set_skills(client, analyst, ["splunk"])

    everyone = client.get("/api/users/freelancers", headers=viewer.headers).json()
    assert everyone["total"] == 2
    assert all(user["role"] == "student" for user in everyone["users"])
    assert "email" not in everyone["users"][0]

    burp = client.get(
        "/api/users/freelancers", headers=viewer.headers, params={"skills": "burp, rust"}
    ).json()
    assert [user["name"] for user in burp["users"]] == ["Pen Tester"]

    searched = client.get(
        "/api/users/freelancers", headers=viewer.headers, params={"search": "analyst"}
    ).json()
    assert [user["id"] for user in searched["users"]] == [analyst.id]


def test_skills_replace_and_reject_empty_list(client: TestClient, register) -> None:
    student = register("student")

    response = _set_skills(client, student, ["Python", " python", "Rust "])
    assert response.status_code == 200
    assert response.json()["user"]["skills"] == ["Python", "Rust"]

    assert _set_skills(client, student, [" "]).status_code == 400


def test_public_profile_and_missing_user(client: TestClient, register) -> None:
    viewer = register("student")
    other = register("client")

    profile = client.get(f"/api/users/{other.id}", headers=viewer.headers)
    assert profile.status_code == 200
    assert profile.json()["user"]["name"] == other.name

    missing = client.get("/api/users/9999", headers=viewer.headers)
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "User not found"}


def test_stats_follow_project_lifecycle(client: TestClient, staffed_project, team_factory) -> None:
    owner, freelancer, project = staffed_project
    team_factory(freelancer)

    stats = client.get("/api/users/stats", headers=freelancer.headers).json()["stats"]
    assert stats == {
        "total_projects": 1,
        "completed_projects": 0,
        "active_projects": 1,
        "total_teams": 1,
        "total_earnings": 0.0,
    }

    client.put(f"/api/projects/{project['id']}/complete", headers=owner.headers)
    stats = client.get("/api/users/stats", headers=freelancer.headers).json()["stats"]
    assert stats["completed_projects"] == 1
    assert stats["total_earnings"] == 500.0

    owner_stats = client.get("/api/users/stats", headers=owner.headers).json()["stats"]
    assert owner_stats["total_earnings"] == 0.0


def test_education_entries_are_added_and_removed(client: TestClient, register) -> None:
    student = register("student")
    other = register("student")
    payload = {
        "school": "Open University",
        "degree": "BSc",
        "field_of_study": "Computer Security",
        "start_date": "2019-09-01",
        "end_date": "2022-06-30",
    }

    first = client.post("/api/users/education", headers=student.headers, json=payload)
    assert first.status_code == 201
    entry_id = first.json()["education"][0]["id"]

    second = client.post(
        "/api/users/education",
        headers=student.headers,
        json={**payload, "degree": "MSc", "start_date": "2023-09-01", "current": True},
    ).json()["education"]
    assert [item["degree"] for item in second] == ["MSc", "BSc"]
    assert second[0]["end_date"] is None

    foreign = client.delete(f"/api/users/education/{entry_id}", headers=other.headers)
    assert foreign.status_code == 404
    assert foreign.json()["message"] == "Education not found"

    removed = client.delete(f"/api/users/education/{entry_id}", headers=student.headers)
    assert removed.status_code == 200
    assert [item["degree"] for item in removed.json()["education"]] == ["MSc"]


def test_experience_rejects_inverted_period_and_blank_fields(
    client: TestClient, register
) -> None:
    student = register("student")
    payload = {"title": "SOC Analyst", "company": "Acme", "start_date": "2021-01-01"}

    inverted = client.post(
        "/api/users/experience",
        headers=student.headers,
        json={**payload, "end_date": "2020-12-31"},
    )
    assert inverted.status_code == 400
    assert inverted.json()["message"] == "End date cannot be before the start date"

    blank = client.post(
        "/api/users/experience", headers=student.headers, json={**payload, "company": "   "}
    )
    assert blank.status_code == 400

    created = client.post(
        "/api/users/experience",
        headers=student.headers,
        json={**payload, "location": " Remote ", "end_date": "2022-03-01"},
    )
    assert created.status_code == 201
    entry = created.json()["experience"][0]
    assert entry["location"] == "Remote"
    assert entry["end_date"] == "2022-03-01"

    missing = client.delete("/api/users/experience/9999", headers=student.headers)
    assert missing.status_code == 404


def test_public_profile_lists_history(client: TestClient, register) -> None:
    viewer = register("client")
    student = register("student")
    client.post(
        "/api/users/experience",
        headers=student.headers,
        json={"title": "Pentester", "company": "Red Co", "start_date": "2020-05-01"},
    )

    profile = client.get(f"/api/users/{student.id}", headers=viewer.headers).json()
    assert profile["education"] == []
    assert [item["company"] for item in profile["experience"]] == ["Red Co"]
