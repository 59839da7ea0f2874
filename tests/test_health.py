import pytest
from fastapi.testclient import TestClient

from upilink.main import create_app


@pytest.fixture(scope="module")
def client():
    app = create_app()
    with TestClient(app) as client:
        yield client


def test_healthz(client):
    response = client.get("/v1/healthz")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_health_alias(client):
    response = client.get("/v1/health")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_version(client):
    response = client.get("/v1/version")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "upilink"
    assert "version" in data


def test_request_id_is_echoed(client):
    response = client.get("/v1/healthz", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"


def test_root_lists_links(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["links"]["limits"].endswith("/v1/upi/limits")
