"""
Task API Routes

All endpoints require a bearer token and only ever see the caller's tasks.

- POST   /tasks       : create a task
- GET    /tasks       : list all of the caller's tasks
- PUT    /tasks/{id}  : partial update
- DELETE /tasks/{id}  : delete
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from core.models.task import Task, TaskCreate, TaskUpdate
from core.models.user import UserContext
from core.services.task_service import TaskService
from web.dependencies import get_current_user, get_task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    user: UserContext = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller. Title and due_date are required."""
    return await service.create_task(user, payload)


@router.get("", response_model=List[Task])
async def list_tasks(
    user: UserContext = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """
    List the caller's tasks.

    The full set is returned on every call; filtering and ordering happen
    client-side.
    """
    return await service.list_tasks(user)


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    user: UserContext = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Update the fields present in the body. 404 if the caller has no such task."""
    return await service.update_task(user, task_id, payload)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: UserContext = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task. 404 if the caller has no such task."""
    await service.delete_task(user, task_id)
    return {"message": "Task deleted successfully"}
