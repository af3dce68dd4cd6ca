"""
Health Check Endpoints
"""

from fastapi import APIRouter
import structlog

from kanbancord.core.database import check_database_health
from kanbancord.schemas.base import HealthCheck, HealthStatus

logger = structlog.get_logger()
router = APIRouter()


@router.get("/", response_model=HealthCheck)
async def health_check() -> HealthCheck:
    """Service health with a database connectivity check"""
    db_healthy = await check_database_health()
    if not db_healthy:
        logger.warning("Health check degraded: database unreachable")

    return HealthCheck(
        status=HealthStatus.HEALTHY if db_healthy else HealthStatus.UNHEALTHY,
        service="kanbancord-api",
        version="1.0.0",
        checks={"database": {"status": "healthy" if db_healthy else "unhealthy"}},
    )
