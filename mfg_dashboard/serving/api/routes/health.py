"""
Health Check Endpoints

Liveness and readiness probes. The dashboard has a single dependency, the
relational data store, so readiness is the database check.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.connection import check_database_health

router = APIRouter()

STARTED_AT = time.monotonic()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    uptime_seconds: float
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(response: Response) -> HealthResponse:
    """Service status with the database check; 503 while the store is unreachable"""
    settings = get_settings()
    database = await check_database_health()
    healthy = database.get("status") == "healthy"
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.monotonic() - STARTED_AT, 1),
        checks={"database": database},
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Process is up; never touches the database"""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response) -> Dict[str, str]:
    db_health = await check_database_health()
    if db_health.get("status") != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not_ready", "reason": "database_unavailable"}
    return {"status": "ready"}
