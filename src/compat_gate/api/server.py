"""FastAPI application setup and routing for the compatibility gate service."""

import logging
import sys
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import health, version
from .config import ConfigManager, GateSettings
from .metrics import MetricsCollector
from .middleware import CompatibilityGateMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[GateSettings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Explicit settings; loaded from the environment when omitted
    """
    from .. import __version__

    app = FastAPI(
        title="Compatibility Gate",
        description="Client version gate for the grocery delivery mobile API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings is None:
        config_manager = ConfigManager()
        settings = config_manager.load_config()
        app.state.config_manager = config_manager
    else:
        app.state.config_manager = None

    gate_config = settings.to_gate_config()
    app.state.settings = settings
    app.state.gate_config = gate_config
    app.state.metrics_collector = MetricsCollector()

    app.add_middleware(
        CompatibilityGateMiddleware,
        config=gate_config,
        observer=app.state.metrics_collector.record_decision if settings.enable_metrics else None,
    )

    # Added after the gate so synthetic responses also get CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware for metrics collection
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)

        duration = time.perf_counter() - start_time
        endpoint = f"{request.method} {request.url.path}"
        success = 200 <= response.status_code < 400

        if settings.enable_metrics:
            app.state.metrics_collector.record_api_request(endpoint, duration, success)

        return response

    app.include_router(health.router, tags=["health"])
    app.include_router(version.router, prefix="/api", tags=["version"])

    @app.get("/metrics", tags=["monitoring"])
    async def get_metrics() -> Dict[str, Any]:
        """Get gate decision and request metrics."""
        return app.state.metrics_collector.get_summary()

    @app.get("/config/status", tags=["monitoring"])
    async def config_status() -> Dict[str, Any]:
        """Get configuration status (non-sensitive information only)."""
        return {
            "environment": settings.environment,
            "debug": settings.debug,
            "log_level": settings.log_level,
            "host": settings.host,
            "port": settings.port,
            "min_supported_version": gate_config.min_supported_version,
            "latest_version": settings.effective_latest_version,
            "metrics_enabled": settings.enable_metrics,
        }

    logger.info(
        f"Compatibility gate active on {gate_config.gate_path_prefix} "
        f"(minimum client version {gate_config.min_supported_version})"
    )
    return app


def main(settings: Optional[GateSettings] = None):
    """Entry point for the compat-gate command."""
    import uvicorn

    settings = settings or ConfigManager().load_config()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info(f"Starting compatibility gate server on {settings.host}:{settings.port}")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Minimum supported client version: {settings.min_supported_version}")

    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Server startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
