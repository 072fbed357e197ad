"""
Core API Router

Combines the auth and task routes into a single router. The routes are
mounted at the application root (/register, /login, /profile, /tasks).
"""

import logging

from fastapi import APIRouter

from .auth_routes import router as auth_router
from .task_routes import router as task_router

logger = logging.getLogger(__name__)

core_router = APIRouter()

core_router.include_router(auth_router)
core_router.include_router(task_router)

API_TAGS = [
    {"name": "Authentication", "description": "Registration, login and profile"},
    {"name": "Tasks", "description": "Owner-scoped task CRUD"},
    {"name": "Health", "description": "Liveness and database status"},
]
