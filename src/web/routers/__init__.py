"""
FastAPI Routers that sit outside the core API.

- health: liveness and database status
"""

from .health import router as health_router

__all__ = ["health_router"]
