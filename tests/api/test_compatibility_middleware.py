"""Tests for the compatibility gate middleware in front of a FastAPI app."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from compat_gate.api.middleware import CompatibilityGateMiddleware, build_gate_config
from compat_gate.gate.options import GateConfig


def build_downstream_app(**middleware_kwargs):
    """Stand-in for the real API: records every request that reaches a route."""
    app = FastAPI()
    app.state.calls = []

    @app.get("/api/products")
    async def products():
        app.state.calls.append("products")
        return {"success": True, "products": [{"name": "Milk", "category": "dairy"}]}

    @app.get("/api/orders")
    async def orders():
        app.state.calls.append("orders")
        return {"success": True, "orders": [{"_id": "o1"}]}

    @app.post("/api/auth/login")
    async def login():
        app.state.calls.append("login")
        return {"success": True, "token": "t"}

    @app.get("/api/admin/stats")
    async def admin_stats():
        app.state.calls.append("admin")
        return {"success": True}

    app.add_middleware(CompatibilityGateMiddleware, **middleware_kwargs)
    return app


@pytest.fixture
def app(gate_config):
    return build_downstream_app(config=gate_config)


@pytest.fixture
def client(app):
    return TestClient(app)


class TestScenarios:
    """End-to-end request scenarios."""

    def test_products_without_version(self, app, client):
        """Scenario: GET /api/products?x=1 without version gets the placeholder product."""
        response = client.get("/api/products?x=1")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["products"]) == 1
        assert body["products"][0]["category"] == "update"
        assert body["_updateRequired"]["isForceUpdate"] is True
        assert app.state.calls == []

    def test_outdated_settings(self, client):
        """Scenario: GET /api/settings from 1.5.0 gets maintenance settings."""
        response = client.get("/api/settings", headers={"X-App-Version": "1.5.0"})

        assert response.status_code == 200
        body = response.json()
        assert body["maintenanceMode"] is True
        assert body["minimumOrderAmount"] == 999999999

    def test_login_reaches_route_once(self, app, client):
        """Scenario: POST /api/auth/login without version is forwarded exactly once."""
        response = client.post("/api/auth/login")

        assert response.status_code == 200
        assert response.json() == {"success": True, "token": "t"}
        assert app.state.calls == ["login"]

    def test_unknown_endpoint_gets_default(self, client):
        """Scenario: Unknown endpoints get the generic default body."""
        response = client.get("/api/unknown-endpoint-xyz")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] is None
        assert "message" in body
        assert "_updateRequired" in body


class TestForwarding:
    """Requests the gate must leave untouched."""

    def test_current_client_gets_real_response(self, app, client):
        response = client.get("/api/orders", headers={"X-App-Version": "2.0.0"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "orders": [{"_id": "o1"}]}
        assert "_updateRequired" not in response.json()
        assert app.state.calls == ["orders"]

    def test_client_identifier_version(self, app, client):
        response = client.get(
            "/api/products", headers={"User-Agent": "BenimMarketim/2.3.0 (Build 41)"}
        )
        assert response.json()["products"][0]["name"] == "Milk"

    def test_old_client_identifier_is_intercepted(self, app, client):
        response = client.get(
            "/api/orders", headers={"User-Agent": "BenimMarketim/1.9.0 (Build 10)"}
        )
        assert response.json()["orders"] == []
        assert response.json()["_updateRequired"]["reason"] == "outdated"
        assert app.state.calls == []

    def test_admin_path(self, app, client):
        assert client.get("/api/admin/stats").status_code == 200
        assert app.state.calls == ["admin"]

    def test_same_origin_xhr(self, app, client):
        response = client.get("/api/orders", headers={"X-Requested-With": "XMLHttpRequest"})
        assert response.json()["orders"] == [{"_id": "o1"}]

    def test_admin_origin(self, app, client):
        response = client.get("/api/orders", headers={"Origin": "https://admin.benimmarketim.com"})
        assert response.json()["orders"] == [{"_id": "o1"}]

    def test_non_api_path_is_not_gated(self, client):
        assert client.get("/not-api").status_code == 404


class TestNamedOptions:
    """The alternate integration mode: options passed as named fields."""

    def test_named_min_version(self):
        client = TestClient(build_downstream_app(min_supported_version="3.0.0"))

        response = client.get("/api/orders", headers={"X-App-Version": "2.5.0"})
        assert response.json()["orders"] == []

        response = client.get("/api/orders", headers={"X-App-Version": "3.0.0"})
        assert response.json()["orders"] == [{"_id": "o1"}]

    def test_named_bypass_paths(self):
        client = TestClient(build_downstream_app(bypass_paths=("/api/orders",)))
        assert client.get("/api/orders").json()["orders"] == [{"_id": "o1"}]

    def test_options_override_injected_config(self):
        config = build_gate_config(GateConfig(min_supported_version="1.0.0"), force_update=False)
        assert config.min_supported_version == "1.0.0"
        assert config.force_update is False

    def test_unknown_option(self):
        with pytest.raises(TypeError, match="no_such_option"):
            build_gate_config(no_such_option=True)
