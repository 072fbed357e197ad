"""
Database Layer for the task manager.

This module provides:
- SQLAlchemy ORM models for users and tasks
- Async database engine and request-scoped sessions
- Owner-scoped repositories
"""

from .models import Base, UserRecord, TaskRecord

from .async_engine import (
    get_async_engine,
    get_async_session,
    get_async_session_factory,
    check_database_connection,
    init_database,
    close_database,
)

__all__ = [
    "Base",
    "UserRecord",
    "TaskRecord",
    "get_async_engine",
    "get_async_session",
    "get_async_session_factory",
    "check_database_connection",
    "init_database",
    "close_database",
]
