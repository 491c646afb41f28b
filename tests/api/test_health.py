"""Tests for health and monitoring endpoints."""

import pytest
from fastapi.testclient import TestClient

from compat_gate import __version__
from compat_gate.api.health import format_uptime
from compat_gate.api.server import create_app


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def test_health_check_success(client):
    """Test: Health is reachable without any client version."""
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert isinstance(data["uptime"], str)
    assert isinstance(data["timestamp"], str)


def test_health_check_uptime_format():
    uptime = format_uptime(0)
    assert "d" in uptime and "h" in uptime and "m" in uptime and "s" in uptime


def test_gate_status(client):
    data = client.get("/health/gate").json()

    assert data["min_supported_version"] == "2.0.0"
    assert data["gate_path_prefix"] == "/api"
    assert "/api/auth/login" in data["bypass_paths"]
    assert data["templates"][0] == "/api/auth/profile"


def test_config_status(client):
    data = client.get("/config/status").json()

    assert data["environment"] == "development"
    assert data["min_supported_version"] == "2.0.0"
    assert data["latest_version"] == "2.3.0"
    assert data["metrics_enabled"] is True


def test_gated_api_path_on_service(client):
    """Test: The service app gates unknown /api paths like any other."""
    response = client.get("/api/products")

    assert response.status_code == 200
    assert response.json()["products"][0]["category"] == "update"


def test_synthetic_response_carries_cors_headers(client):
    """Test: Cross-origin web clients can read the update notice."""
    response = client.get(
        "/api/products",
        headers={"Origin": "https://www.devrekbenimmarketim.com", "Sec-Fetch-Site": "same-site"},
    )

    assert response.status_code == 200
    assert "_updateRequired" in response.json()
    assert "access-control-allow-origin" in response.headers
