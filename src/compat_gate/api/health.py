"""Health check endpoints for the compatibility gate service."""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from .models import HealthResponse

router = APIRouter()

_start_time = time.time()


def format_uptime(start_time: float) -> str:
    """Format uptime as human readable string."""
    uptime_seconds = int(time.time() - start_time)
    days = uptime_seconds // 86400
    hours = (uptime_seconds % 86400) // 3600
    minutes = (uptime_seconds % 3600) // 60
    seconds = uptime_seconds % 60

    return f"{days}d {hours}h {minutes}m {seconds}s"


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Simple health check endpoint.

    Returns service status, version, uptime and current timestamp.
    Lives outside the gated prefix so probes never need a client version.
    """
    from .. import __version__

    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime=format_uptime(_start_time),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/gate")
async def gate_status(request: Request) -> Dict[str, Any]:
    """Active gate policy (non-sensitive information only)."""
    gate_config = request.app.state.gate_config
    return {
        "status": "ok",
        "min_supported_version": gate_config.min_supported_version,
        "gate_path_prefix": gate_config.gate_path_prefix,
        "bypass_paths": list(gate_config.bypass_paths),
        "templates": list(gate_config.templates.prefixes),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
