"""
Health check endpoints
"""

from fastapi import APIRouter

from feedsync.core.config import settings
from feedsync.core.database import check_database_health
from feedsync.schemas.common import HealthCheckResponse
from feedsync.utils.timestamps import utcnow


router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Basic health check"""
    return HealthCheckResponse(
        status="ok",
        timestamp=utcnow().isoformat(),
        version=settings.version,
    )


@router.get("/health/ready", response_model=HealthCheckResponse)
async def readiness_check() -> HealthCheckResponse:
    """Readiness check - verifies the catalog store"""
    database = await check_database_health()
    healthy = database["status"] == "healthy"
    return HealthCheckResponse(
        status="ok" if healthy else "degraded",
        timestamp=utcnow().isoformat(),
        version=settings.version,
        database=database["status"],
    )
