"""
Core Services

- Authentication (registration, login, token validation, profile)
- Owner-scoped task access
"""

from .auth_service import CoreAuthService, extract_bearer_token, validate_access_token
from .task_service import TaskService

__all__ = [
    "CoreAuthService",
    "extract_bearer_token",
    "validate_access_token",
    "TaskService",
]
