import pytest
from fastapi.testclient import TestClient

from api_hub_applications.main import create_app


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def test_ping(client):
    response = client.get("/api/v1/ping")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "pong"}


def test_ping_needs_no_authorization_header(client):
    response = client.get("/api/v1/ping", headers={"Authorization": ""})
    assert response.status_code == 200


def test_unknown_route(client):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
