"""Repositories over the users and tasks tables."""

from .user_repository import UserRepository, DuplicateEmailError
from .task_repository import TaskRepository

__all__ = [
    "UserRepository",
    "DuplicateEmailError",
    "TaskRepository",
]
