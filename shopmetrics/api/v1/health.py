"""Health check endpoints."""

from fastapi import APIRouter
from sqlalchemy import text

from shopmetrics.core.config import settings
from shopmetrics.core.deps import DBSession, RedisClient
from shopmetrics.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DBSession, redis: RedisClient) -> HealthResponse:
    """
    Health check endpoint.

    Checks database and Redis connectivity and returns service status.
    Redis backs the sync leases, so a store cannot be synced without it.
    """
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {e}"

    try:
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {e}"

    healthy = all(state == "healthy" for state in checks.values())
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.version,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe: the process is up."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(db: DBSession) -> dict[str, str]:
    """Readiness probe: the database answers."""
    await db.execute(text("SELECT 1"))
    return {"status": "ready"}
