"""
Middleware package for the compatibility gate API.

Provides:
- compatibility.py: version gate middleware with synthetic responses
"""

from .compatibility import CompatibilityGateMiddleware, build_gate_config

__all__ = ["CompatibilityGateMiddleware", "build_gate_config"]
