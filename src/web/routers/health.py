"""
Health Check Endpoints

1. /health      - liveness plus database reachability
2. /health/live - simple liveness probe
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config.settings import get_settings
from database.async_engine import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = datetime.now(timezone.utc)


@router.get("/health/live")
async def liveness():
    return {"status": "alive"}


@router.get("/health")
async def health_check():
    """Report application version, uptime and whether the database answers."""
    settings = get_settings()
    database_ok = await check_database_connection()

    body = {
        "status": "healthy" if database_ok else "degraded",
        "service": settings.name,
        "version": settings.version,
        "environment": settings.environment,
        "uptime_seconds": int((datetime.now(timezone.utc) - _start_time).total_seconds()),
        "database": "connected" if database_ok else "unavailable",
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)
