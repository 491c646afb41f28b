import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from compat_gate.api.config import GateSettings
from compat_gate.gate.options import GateConfig


@pytest.fixture
def gate_config():
    """Gate configuration with a 2.0.0 minimum, as used by most scenarios."""
    return GateConfig(min_supported_version="2.0.0")


@pytest.fixture
def settings():
    """Service settings isolated from any local .env file."""
    return GateSettings(_env_file=None, min_supported_version="2.0.0", latest_version="2.3.0")


@pytest.fixture
def make_getter():
    """Build a case-insensitive header accessor over a plain dict."""

    def header_getter(headers):
        lowered = {name.lower(): value for name, value in headers.items()}
        return lambda name: lowered.get(name.lower())

    return header_getter
