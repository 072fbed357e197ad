"""
Core API

- Authentication (/register, /login, /profile)
- Tasks (/tasks, /tasks/{id})
"""

from .router import core_router, API_TAGS

__all__ = ["core_router", "API_TAGS"]
