from uuid import uuid4

from fastapi import APIRouter
from fastapi.testclient import TestClient

from main import app


def test_root_health_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Restaurant inventory API"


def test_unknown_route_renders_error_body(client):
    response = client.get(f"/api/nothing-here/{uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_malformed_json_is_a_validation_error(client, org_a):
    response = client.post(
        "/api/locations",
        content="{not json",
        headers={**org_a["headers"], "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_unexpected_failure_hides_details(client, monkeypatch):
    router = APIRouter()

    @router.get("/api/_boom")
    async def boom():
        raise RuntimeError("secret internals")

    monkeypatch.setattr(app.router, "routes", [*app.router.routes, *router.routes])

    with TestClient(app, raise_server_exceptions=False) as raw:
        response = raw.get("/api/_boom")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
