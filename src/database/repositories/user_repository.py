"""User Repository Implementation.

Credential store: persists accounts and looks them up by email (for login)
or by ID (for the profile endpoint). Emails are compared in their stored,
lowercased form.
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import utc_now
from database.query_helpers import as_datetime, typed_text

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when an email is already registered."""


class UserRepository:
    """Repository for user account operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(self, username: str, email: str, password_hash: str) -> Dict[str, Any]:
        """
        Insert a new user.

        Args:
            username: Display name.
            email: Lowercased email address.
            password_hash: bcrypt hash of the password.

        Returns:
            Stored user data dict (without the password hash).

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        email = email.lower()
        if await self.email_exists(email):
            raise DuplicateEmailError(email)

        user_id = str(uuid4())
        now = utc_now()

        params = {
            "user_id": user_id,
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": now,
            "updated_at": now,
        }
        query = typed_text("""
            INSERT INTO users (user_id, username, email, password_hash, created_at, updated_at)
            VALUES (:user_id, :username, :email, :password_hash, :created_at, :updated_at)
        """, params)
        try:
            await self._session.execute(query, params)
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await self._session.rollback()
            raise DuplicateEmailError(email) from e

        logger.info(f"Created user {user_id}")
        return {"id": user_id, "username": username, "email": email, "created_at": now}

    async def email_exists(self, email: str) -> bool:
        query = text("SELECT 1 FROM users WHERE email = :email LIMIT 1")
        result = await self._session.execute(query, {"email": email.lower()})
        return result.fetchone() is not None

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Get a user by email, including the password hash.

        Returns:
            User data dict or None if not found.
        """
        query = text("""
            SELECT user_id, username, email, password_hash, created_at
            FROM users
            WHERE email = :email
        """)
        result = await self._session.execute(query, {"email": email.lower()})
        row = result.fetchone()
        return self._row_to_dict(row) if row else None

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user by ID, including the password hash."""
        query = text("""
            SELECT user_id, username, email, password_hash, created_at
            FROM users
            WHERE user_id = :user_id
        """)
        result = await self._session.execute(query, {"user_id": user_id})
        row = result.fetchone()
        return self._row_to_dict(row) if row else None

    async def delete(self, user_id: str) -> bool:
        """Delete a user; their tasks go with them via the foreign key."""
        query = text("DELETE FROM users WHERE user_id = :user_id")
        result = await self._session.execute(query, {"user_id": user_id})
        return result.rowcount > 0

    def _row_to_dict(self, row) -> Dict[str, Any]:
        return {
            "id": row.user_id,
            "username": row.username,
            "email": row.email,
            "password_hash": row.password_hash,
            "created_at": as_datetime(row.created_at),
        }
