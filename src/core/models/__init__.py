"""
Core Models

Account and task models shared by the API, the services and the client.
"""

from .user import (
    RegisterRequest,
    LoginRequest,
    User,
    UserContext,
    AuthResponse,
    ProfileResponse,
)
from .task import (
    TaskPriority,
    TaskStatus,
    TaskCreate,
    TaskUpdate,
    Task,
    next_status,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "User",
    "UserContext",
    "AuthResponse",
    "ProfileResponse",
    "TaskPriority",
    "TaskStatus",
    "TaskCreate",
    "TaskUpdate",
    "Task",
    "next_status",
]
