"""
FastAPI Dependency Injection.

Provides per-request:
- AsyncSession (commit on success, rollback on error)
- Repositories and services bound to that session
- The authenticated caller (auth gate)

Usage in endpoints:
    @router.get("/tasks")
    async def list_tasks(
        user: UserContext = Depends(get_current_user),
        service: TaskService = Depends(get_task_service),
    ):
        ...
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import AuthSettings, get_auth_settings
from core.models.user import UserContext
from core.services.auth_service import CoreAuthService, extract_bearer_token, validate_access_token
from core.services.task_service import TaskService
from database.async_engine import get_async_session
from database.repositories import TaskRepository, UserRepository


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; the transaction spans the whole request."""
    async with get_async_session() as session:
        yield session


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_settings: AuthSettings = Depends(get_auth_settings),
) -> UserContext:
    """
    Auth gate: extract and verify the bearer token.

    Returns UserContext for authenticated users. Raises 401 for a missing
    header and 400 for a malformed, forged or expired token.
    """
    token = extract_bearer_token(authorization)
    return validate_access_token(token, auth_settings)


def get_auth_service(
    session: AsyncSession = Depends(get_db_session),
    auth_settings: AuthSettings = Depends(get_auth_settings),
) -> CoreAuthService:
    return CoreAuthService(UserRepository(session), auth_settings)


def get_task_service(session: AsyncSession = Depends(get_db_session)) -> TaskService:
    return TaskService(TaskRepository(session))
