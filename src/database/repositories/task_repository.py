"""Task Repository Implementation.

Task store. Every read, update and delete takes the owner's user ID and
filters on (task_id AND user_id); there is deliberately no lookup by task
ID alone. A task owned by someone else is indistinguishable from a task
that does not exist.
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any, List
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import utc_now
from database.query_helpers import as_date, as_datetime, typed_text

logger = logging.getLogger(__name__)

_TASK_COLUMNS = """
    task_id, user_id, title, description, due_date, priority, status,
    category, created_at, updated_at
"""

# Columns a caller may change through update(); owner and ID are excluded
UPDATABLE_COLUMNS = ("title", "description", "due_date", "priority", "status", "category")


class TaskRepository:
    """Repository for owner-scoped task operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a task owned by ``user_id``.

        Args:
            user_id: Owner; any owner in ``fields`` is ignored.
            fields: title, description, due_date, priority, status, category.

        Returns:
            The stored task row as a dict.
        """
        task_id = str(uuid4())
        now = utc_now()

        params = {column: fields.get(column) for column in UPDATABLE_COLUMNS}
        params.update({
            "task_id": task_id,
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        })

        query = typed_text("""
            INSERT INTO tasks (
                task_id, user_id, title, description, due_date, priority, status,
                category, created_at, updated_at
            ) VALUES (
                :task_id, :user_id, :title, :description, :due_date, :priority, :status,
                :category, :created_at, :updated_at
            )
        """, params)
        await self._session.execute(query, params)

        task = await self.get(user_id, task_id)
        logger.info(f"Created task {task_id} for user {user_id}")
        return task

    async def get(self, user_id: str, task_id: str) -> Optional[Dict[str, Any]]:
        """Get one task by ID, only if it belongs to ``user_id``."""
        query = text(f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks
            WHERE task_id = :task_id AND user_id = :user_id
        """)
        result = await self._session.execute(query, {"task_id": task_id, "user_id": user_id})
        row = result.fetchone()
        return self._row_to_dict(row) if row else None

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """
        All tasks owned by ``user_id``.

        Returned in creation order; display ordering is the client's job.
        """
        query = text(f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks
            WHERE user_id = :user_id
            ORDER BY created_at, task_id
        """)
        result = await self._session.execute(query, {"user_id": user_id})
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def update(
        self, user_id: str, task_id: str, changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Apply ``changes`` to a task owned by ``user_id``.

        Unknown keys are dropped. Returns the updated task, or None when no
        task matches both the ID and the owner.
        """
        params = {
            column: value
            for column, value in changes.items()
            if column in UPDATABLE_COLUMNS
        }
        assignments = [f"{column} = :{column}" for column in params]
        assignments.append("updated_at = :updated_at")

        params.update({
            "task_id": task_id,
            "user_id": user_id,
            "updated_at": utc_now(),
        })

        # Column names come from UPDATABLE_COLUMNS, never from the request
        query = typed_text(f"""
            UPDATE tasks SET {", ".join(assignments)}
            WHERE task_id = :task_id AND user_id = :user_id
        """, params)
        result = await self._session.execute(query, params)
        if result.rowcount == 0:
            return None

        return await self.get(user_id, task_id)

    async def delete(self, user_id: str, task_id: str) -> bool:
        """Delete a task owned by ``user_id``. Returns False if nothing matched."""
        query = text("DELETE FROM tasks WHERE task_id = :task_id AND user_id = :user_id")
        result = await self._session.execute(query, {"task_id": task_id, "user_id": user_id})
        return result.rowcount > 0

    def _row_to_dict(self, row) -> Dict[str, Any]:
        return {
            "id": row.task_id,
            "user_id": row.user_id,
            "title": row.title,
            "description": row.description,
            "due_date": as_date(row.due_date),
            "priority": row.priority,
            "status": row.status,
            "category": row.category,
            "created_at": as_datetime(row.created_at),
            "updated_at": as_datetime(row.updated_at),
        }
