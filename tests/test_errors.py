"""Central error translation."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.orm.exc import StaleDataError

from cyberhunter.domain.errors import ConflictError, NotFoundError, PermissionDeniedError
from cyberhunter.interfaces.api.errors import register_exception_handlers


class _Counter(BaseModel):
    count: int


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    def missing():
        raise NotFoundError("Thing not found")

    @app.get("/forbidden")
    def forbidden():
        raise PermissionDeniedError("Not yours")

    @app.get("/conflict")
    def conflict():
        raise ConflictError("Changed underneath you")

    @app.get("/invalid")
    def invalid():
        raise ValueError("Bad value")

    @app.get("/stale")
    def stale():
        raise StaleDataError("UPDATE statement on table expected to update 1 row(s)")

    @app.get("/bad-output")
    def bad_output():
        return _Counter(count="not a number")

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaput")

    @app.get("/typed/{item_id}")
    def typed(item_id: int):
        return {"item_id": item_id}

    return app


def test_domain_errors_map_to_statuses() -> None:
    client = TestClient(_app())
    assert client.get("/missing").status_code == 404
    assert client.get("/forbidden").status_code == 403
    assert client.get("/conflict").status_code == 409
    assert client.get("/stale").status_code == 409
    response = client.get("/invalid")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Bad value"}


def test_validation_errors_are_400() -> None:
    response = TestClient(_app()).get("/typed/abc")
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid input data")


def test_unexpected_errors_include_stack_outside_production() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)
    response = client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Server Error"
    assert "RuntimeError" in body["stack"]


def test_unknown_route_uses_same_body() -> None:
    response = TestClient(_app()).get("/nowhere")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_model_errors_raised_by_server_code_are_500() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)
    response = client.get("/bad-output")
    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Server Error"
    assert "ValidationError" in body["stack"]
