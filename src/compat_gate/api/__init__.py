"""
Compatibility Gate HTTP API Service

This package hosts the compatibility gate in front of a FastAPI application
and exposes the version-check endpoints the mobile app calls on startup.

Architecture:
- server.py: FastAPI application setup
- models.py: Pydantic response models
- config.py: Service configuration management
- health.py: Health check endpoints
- version.py: Version check endpoints
- metrics.py: Gate decision metrics
- middleware/: Starlette middleware running the gate
"""
