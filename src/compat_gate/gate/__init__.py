"""
Compatibility gate core.

Framework-free pieces that run per request:
- versioning.py: dotted version parsing and comparison
- extractor.py: version signal extraction from headers
- classifier.py: bypassed / current / missing-version / outdated
- templates.py: endpoint-shaped synthetic responses
- core.py: orchestration behind a minimal host interface
"""

from .classifier import RequestClassification, RequestMeta, classify_request
from .core import CompatibilityGate, GateDecision, GateExchange
from .extractor import extract_version
from .options import GateConfig, GateConfigurationError, StoreUrls
from .templates import (
    NOTICE_KEY,
    RouteResponseTemplate,
    TemplateTable,
    default_template_table,
    synthesize_response,
)
from .versioning import Version, compare_versions, is_older_than

__all__ = [
    "CompatibilityGate",
    "GateConfig",
    "GateConfigurationError",
    "GateDecision",
    "GateExchange",
    "NOTICE_KEY",
    "RequestClassification",
    "RequestMeta",
    "RouteResponseTemplate",
    "StoreUrls",
    "TemplateTable",
    "Version",
    "classify_request",
    "compare_versions",
    "default_template_table",
    "extract_version",
    "is_older_than",
    "synthesize_response",
]
