"""
Client-side library for the Task Manager.

- api_client: HTTP wrapper with explicit per-request credentials
- task_view: filter and order a user's tasks for display
- analytics: status / priority distribution
"""

from .analytics import TaskSummary, summarize
from .api_client import AuthSession, TaskClient, TaskClientError
from .task_view import FilterCriteria, categories, view

__all__ = [
    "TaskSummary",
    "summarize",
    "AuthSession",
    "TaskClient",
    "TaskClientError",
    "FilterCriteria",
    "categories",
    "view",
]
