"""Unit tests for gate orchestration over the minimal host interface."""

import logging
from unittest.mock import MagicMock

import pytest

from compat_gate.gate.classifier import RequestClassification
from compat_gate.gate.core import CompatibilityGate, GateDecision
from compat_gate.gate.options import GateConfig, GateConfigurationError
from compat_gate.gate.templates import NOTICE_KEY
from compat_gate.gate.versioning import Version


class FakeExchange:
    """In-memory GateExchange used to observe what the gate does."""

    def __init__(self, path, method="GET", headers=None):
        self.path = path
        self.method = method
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.responses = []
        self.proceed_calls = 0

    def get_header(self, name):
        return self._headers.get(name.lower())

    def respond_json(self, status, body):
        self.responses.append((status, body))

    def proceed(self):
        self.proceed_calls += 1


@pytest.fixture
def gate(gate_config):
    return CompatibilityGate(gate_config)


class TestHandle:
    """Test that exactly one of respond_json / proceed is called."""

    def test_products_without_version(self, gate):
        exchange = FakeExchange("/api/products?x=1")
        decision = gate.handle(exchange)

        assert decision.classification == RequestClassification.MISSING_VERSION
        assert exchange.proceed_calls == 0
        assert len(exchange.responses) == 1
        status, body = exchange.responses[0]
        assert status == 200
        assert body["success"] is True
        assert body["products"][0]["category"] == "update"
        assert body[NOTICE_KEY]["isForceUpdate"] is True

    def test_outdated_settings(self, gate):
        exchange = FakeExchange("/api/settings", headers={"X-App-Version": "1.5.0"})
        gate.handle(exchange)

        status, body = exchange.responses[0]
        assert status == 200
        assert body["maintenanceMode"] is True
        assert body["minimumOrderAmount"] >= 999999999

    def test_login_passes_through(self, gate):
        exchange = FakeExchange("/api/auth/login", method="POST")
        decision = gate.handle(exchange)

        assert decision.classification == RequestClassification.BYPASSED
        assert exchange.responses == []
        assert exchange.proceed_calls == 1

    def test_current_client_passes_through(self, gate):
        exchange = FakeExchange("/api/orders", headers={"X-App-Version": "2.0.0"})
        decision = gate.handle(exchange)

        assert decision.classification == RequestClassification.CURRENT
        assert decision.body is None
        assert exchange.proceed_calls == 1

    def test_unknown_endpoint_gets_default(self, gate):
        exchange = FakeExchange("/api/unknown-endpoint-xyz")
        gate.handle(exchange)

        status, body = exchange.responses[0]
        assert status == 200
        assert body["success"] is True
        assert body["data"] is None
        assert "message" in body


class TestEvaluate:
    """Test GateDecision contents, observer and logging."""

    def test_decision_fields(self, gate):
        decision = gate.evaluate("/api/orders/", "GET", lambda name: None)

        assert isinstance(decision, GateDecision)
        assert decision.path == "/api/orders"
        assert decision.version is None
        assert decision.intercepted is True
        assert decision.status_code == 200

    def test_forwarded_decision_has_no_status(self, gate):
        decision = gate.evaluate("/health", "GET", lambda name: None)
        assert decision.intercepted is False
        assert decision.status_code is None

    def test_client_version_is_padded(self, gate):
        headers = {"x-app-version": "1.4"}
        decision = gate.evaluate("/api/cart", "GET", lambda name: headers.get(name.lower()))

        assert decision.version == "1.4"
        assert decision.client_version == Version(1, 4, 0)
        assert str(decision.client_version) == "1.4.0"

    def test_client_version_absent(self, gate):
        decision = gate.evaluate("/api/cart", "GET", lambda name: None)
        assert decision.client_version is None

    def test_observer_sees_every_decision(self, gate_config):
        observer = MagicMock()
        gate = CompatibilityGate(gate_config, observer=observer)

        gate.evaluate("/api/orders", "GET", lambda name: None)
        gate.evaluate("/api/auth/login", "POST", lambda name: None)

        assert observer.call_count == 2
        first = observer.call_args_list[0].args[0]
        assert first.classification == RequestClassification.MISSING_VERSION

    def test_intercept_is_logged(self, gate, caplog):
        headers = {"x-app-version": "1.0.0", "x-app-platform": "ios"}
        with caplog.at_level(logging.WARNING, logger="compat_gate.gate.core"):
            gate.evaluate("/api/cart", "GET", lambda name: headers.get(name.lower()))

        assert "version=1.0.0" in caplog.text
        assert "platform=ios" in caplog.text
        assert "/api/cart" in caplog.text

    def test_default_config(self):
        gate = CompatibilityGate()
        assert gate.config.min_supported_version == "2.1.0"


class TestGateConfig:
    """Test construction-time validation."""

    def test_invalid_min_version(self):
        with pytest.raises(GateConfigurationError):
            GateConfig(min_supported_version="latest")

    def test_relative_bypass_path(self):
        with pytest.raises(GateConfigurationError):
            GateConfig(bypass_paths=("api/auth/login",))

    def test_bypass_paths_are_normalized(self):
        config = GateConfig(bypass_paths=["/api/auth/login/"])
        assert config.bypass_paths == ("/api/auth/login",)

    def test_config_is_immutable(self):
        config = GateConfig()
        with pytest.raises(AttributeError):
            config.min_supported_version = "9.0.0"
