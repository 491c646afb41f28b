"""Gate decision and request metrics for the compatibility gate API."""

import time
from collections import Counter as CounterType
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Deque, Dict

from ..gate.classifier import RequestClassification
from ..gate.core import GateDecision

# Most recent response times kept for the average
RESPONSE_TIME_WINDOW = 1000


@dataclass
class Metrics:
    """Application metrics collection."""

    # Gate Metrics
    decisions_total: int = 0
    decisions_by_classification: CounterType[str] = field(default_factory=CounterType)
    intercepted_by_path: CounterType[str] = field(default_factory=CounterType)
    outdated_versions: CounterType[str] = field(default_factory=CounterType)

    # API Metrics
    api_requests_total: int = 0
    api_response_times: Deque[float] = field(
        default_factory=lambda: deque(maxlen=RESPONSE_TIME_WINDOW)
    )
    api_errors_by_endpoint: Dict[str, int] = field(default_factory=dict)

    _lock: Lock = field(default_factory=Lock, init=False)


class MetricsCollector:
    """Collects and manages application metrics."""

    def __init__(self):
        self.metrics = Metrics()
        self.start_time = time.time()

    def record_decision(self, decision: GateDecision) -> None:
        """Record one gate decision; usable as a gate observer."""
        with self.metrics._lock:
            self.metrics.decisions_total += 1
            self.metrics.decisions_by_classification[decision.classification.value] += 1
            if decision.intercepted:
                self.metrics.intercepted_by_path[decision.path] += 1
            if decision.classification == RequestClassification.OUTDATED and decision.version:
                self.metrics.outdated_versions[str(decision.client_version)] += 1

    def record_api_request(self, endpoint: str, response_time: float, success: bool) -> None:
        """Record API request metrics."""
        with self.metrics._lock:
            self.metrics.api_requests_total += 1
            self.metrics.api_response_times.append(response_time)

            if not success:
                self.metrics.api_errors_by_endpoint[endpoint] = (
                    self.metrics.api_errors_by_endpoint.get(endpoint, 0) + 1
                )

    def get_summary(self) -> Dict[str, Any]:
        """Get comprehensive metrics summary."""
        with self.metrics._lock:
            avg_response_time = (
                sum(self.metrics.api_response_times) / len(self.metrics.api_response_times)
                if self.metrics.api_response_times
                else 0
            )

            by_classification = {c.value: 0 for c in RequestClassification}
            by_classification.update(self.metrics.decisions_by_classification)
            intercepted = sum(
                by_classification[c.value] for c in RequestClassification if c.intercepts
            )

            return {
                "gate_metrics": {
                    "decisions_total": self.metrics.decisions_total,
                    "intercepted_total": intercepted,
                    "by_classification": by_classification,
                    "intercepted_by_path": dict(self.metrics.intercepted_by_path),
                    "outdated_versions": dict(self.metrics.outdated_versions),
                },
                "api_metrics": {
                    "requests_total": self.metrics.api_requests_total,
                    "response_time_samples": len(self.metrics.api_response_times),
                    "average_response_time_ms": avg_response_time * 1000,
                    "errors_by_endpoint": dict(self.metrics.api_errors_by_endpoint),
                },
                "uptime_seconds": time.time() - self.start_time,
            }

    def reset_metrics(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self.metrics._lock:
            self.metrics = Metrics()
            self.start_time = time.time()
