"""
Task Service

Owner-scoped create/list/update/delete. The caller's identity always comes
from the verified token, never from the payload.
"""

import logging
from typing import List

from core.models.task import Task, TaskCreate, TaskUpdate
from core.models.user import UserContext
from database.repositories.task_repository import TaskRepository
from security.api_errors import APIError, ErrorCode

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_MESSAGE = "Task not found"


class TaskService:
    """Task access API over a TaskRepository."""

    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    async def create_task(self, context: UserContext, payload: TaskCreate) -> Task:
        fields = payload.model_dump()
        fields["priority"] = payload.priority.value
        fields["status"] = payload.status.value

        record = await self._tasks.create(context.user_id, fields)
        return Task(**record)

    async def list_tasks(self, context: UserContext) -> List[Task]:
        records = await self._tasks.list_for_user(context.user_id)
        return [Task(**record) for record in records]

    async def update_task(self, context: UserContext, task_id: str, payload: TaskUpdate) -> Task:
        """
        Apply a partial update.

        Raises:
            APIError: RESOURCE_NOT_FOUND when no task has this ID *and*
                belongs to the caller.
        """
        record = await self._tasks.update(context.user_id, task_id, payload.changes())
        if record is None:
            raise APIError(ErrorCode.RESOURCE_NOT_FOUND, TASK_NOT_FOUND_MESSAGE)

        logger.info(f"Updated task {task_id}", extra={"fields": sorted(payload.changes())})
        return Task(**record)

    async def delete_task(self, context: UserContext, task_id: str) -> None:
        """
        Raises:
            APIError: RESOURCE_NOT_FOUND under the same rule as update_task.
        """
        if not await self._tasks.delete(context.user_id, task_id):
            raise APIError(ErrorCode.RESOURCE_NOT_FOUND, TASK_NOT_FOUND_MESSAGE)

        logger.info(f"Deleted task {task_id}")
