"""Per-request orchestration of the compatibility gate.

The gate is stateless: extract a version, classify, then either forward the
request or answer it with a synthetic HTTP 200 body. Host frameworks plug in
through ``GateExchange`` (or call ``evaluate`` directly from async code).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

from .classifier import RequestClassification, RequestMeta, classify_request
from .extractor import HeaderGetter, extract_version
from .options import GateConfig
from .paths import normalize_path
from .templates import synthesize_response
from .versioning import Version

logger = logging.getLogger(__name__)

SYNTHETIC_STATUS_CODE = 200


class GateExchange(Protocol):
    """Minimal view of a host request/response pair."""

    path: str
    method: str

    def get_header(self, name: str) -> Optional[str]: ...

    def respond_json(self, status: int, body: Dict[str, Any]) -> None: ...

    def proceed(self) -> None: ...


@dataclass(frozen=True)
class GateDecision:
    """Result of running the gate on one request."""

    classification: RequestClassification
    path: str
    version: Optional[str] = None
    body: Optional[Dict[str, Any]] = None

    @property
    def intercepted(self) -> bool:
        return self.body is not None

    @property
    def status_code(self) -> Optional[int]:
        return SYNTHETIC_STATUS_CODE if self.intercepted else None

    @property
    def client_version(self) -> Optional[Version]:
        """Extracted version as a major.minor.patch triple, if any."""
        return Version.parse(self.version) if self.version is not None else None


class CompatibilityGate:
    """Detects stale clients and short-circuits them with synthetic responses."""

    def __init__(
        self,
        config: Optional[GateConfig] = None,
        observer: Optional[Callable[[GateDecision], None]] = None,
    ):
        self.config = config or GateConfig()
        self.observer = observer

    def evaluate(self, path: str, method: str, get_header: HeaderGetter) -> GateDecision:
        """Classify a request and build the synthetic body if it is intercepted."""
        meta = RequestMeta.from_headers(path, method, get_header)
        version = extract_version(get_header, self.config)
        classification = classify_request(version, meta, self.config)

        body = None
        if classification.intercepts:
            platform = get_header(self.config.platform_header) or "unknown"
            logger.warning(
                f"Unsupported client ({classification.value}): version={version or 'none'} "
                f"platform={platform} endpoint={meta.method} {meta.path}"
            )
            body = synthesize_response(meta.path, classification, self.config)
        elif classification == RequestClassification.BYPASSED:
            logger.debug(f"Bypassing version gate for {meta.method} {meta.path}")

        decision = GateDecision(
            classification=classification,
            path=normalize_path(path),
            version=version,
            body=body,
        )
        if self.observer is not None:
            self.observer(decision)
        return decision

    def handle(self, exchange: GateExchange) -> GateDecision:
        """Run the gate against a host exchange.

        Calls exactly one of ``exchange.respond_json`` or ``exchange.proceed``.
        """
        decision = self.evaluate(exchange.path, exchange.method, exchange.get_header)
        if decision.intercepted:
            exchange.respond_json(SYNTHETIC_STATUS_CODE, decision.body)
        else:
            exchange.proceed()
        return decision
