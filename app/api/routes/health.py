"""
Health check routes.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import redis.asyncio as redis

from app.core.database import get_db
from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.base import BaseSchema

router = APIRouter(tags=["health"])

logger = get_logger(__name__)


class HealthResponse(BaseSchema):
    status: str
    version: str
    timestamp: str
    checks: dict


async def _check_database(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("health_database_unreachable", error=str(e))
        return "unhealthy"
    return "healthy"


async def _check_redis() -> str:
    client = redis.from_url(settings.redis_url)
    try:
        await client.ping()
    except Exception as e:
        logger.error("health_redis_unreachable", error=str(e))
        return "unhealthy"
    finally:
        await client.aclose()
    return "healthy"


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Liveness / readiness probe.

    Always 200; `status` is "degraded" when a dependency is down so the
    probe can tell the difference between a dead process and a sick one.
    """
    checks = {
        "database": await _check_database(db),
        "redis": await _check_redis(),
    }
    return HealthResponse(
        status="healthy" if all(v == "healthy" for v in checks.values()) else "degraded",
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
    )
