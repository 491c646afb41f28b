"""
Compat Gate - Client compatibility gate for the grocery delivery mobile API.

This package provides:
- Version extraction and comparison for mobile clients
- Request classification (bypassed, current, missing-version, outdated)
- Endpoint-shaped synthetic responses with an update notice
- A FastAPI service and Starlette middleware hosting the gate
"""

__version__ = "0.1.0"
