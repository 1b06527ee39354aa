"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_redis_client
from core.redis import RedisClient
from db.session import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    cache: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    redis_client: RedisClient = Depends(get_redis_client),
) -> HealthResponse:
    """
    Check application, database and cache health.

    An unreachable cache only degrades the service: resolution still works
    from the database, just without caching.
    """
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    cache_status = "healthy" if await redis_client.ping() else "unavailable"

    return HealthResponse(
        status="healthy" if db_status == "healthy" and cache_status == "healthy" else "degraded",
        database=db_status,
        cache=cache_status,
    )
