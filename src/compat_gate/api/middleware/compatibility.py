"""Starlette middleware that runs the compatibility gate in front of the app."""

from dataclasses import fields, replace
from typing import Any, Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ...gate.core import CompatibilityGate, GateDecision
from ...gate.options import GateConfig

GATE_OPTION_NAMES = frozenset(f.name for f in fields(GateConfig))


def build_gate_config(config: Optional[GateConfig] = None, **options: Any) -> GateConfig:
    """Apply named option overrides on top of an injected (or default) config.

    Raises:
        TypeError: If an option is not a GateConfig field
    """
    base = config or GateConfig()
    unknown = sorted(set(options) - GATE_OPTION_NAMES)
    if unknown:
        raise TypeError(f"Unknown compatibility gate option(s): {', '.join(unknown)}")
    return replace(base, **options) if options else base


class CompatibilityGateMiddleware(BaseHTTPMiddleware):
    """Answers unsupported clients with synthetic HTTP 200 bodies.

    Either pass a ready ``GateConfig``::

        app.add_middleware(CompatibilityGateMiddleware, config=settings.to_gate_config())

    or name the options directly::

        app.add_middleware(CompatibilityGateMiddleware, min_supported_version="2.1.0")
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[GateConfig] = None,
        observer: Optional[Callable[[GateDecision], None]] = None,
        **options: Any,
    ):
        super().__init__(app)
        self.gate = CompatibilityGate(build_gate_config(config, **options), observer=observer)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        decision = self.gate.evaluate(request.url.path, request.method, request.headers.get)
        if decision.intercepted:
            return JSONResponse(status_code=decision.status_code, content=decision.body)
        return await call_next(request)
