"""FastAPI dependencies for injection."""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.command_cache import CommandCache
from core.config import Settings, get_settings
from core.redis import RedisClient
from db.session import get_async_session
from services.resolver import Resolver
from services.store import SqlStore, Store


def get_redis_client(request: Request) -> RedisClient:
    """Return the Redis client created by the application lifespan."""
    return request.app.state.redis_client


def get_store(db: AsyncSession = Depends(get_async_session)) -> Store:
    """Return a store bound to the request's database session."""
    return SqlStore(db)


def get_command_cache(
    redis_client: RedisClient = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> CommandCache:
    """Return the per-account command cache."""
    return CommandCache(redis_client, ttl=settings.command_cache_ttl)


def get_resolver(
    store: Store = Depends(get_store),
    cache: CommandCache = Depends(get_command_cache),
    settings: Settings = Depends(get_settings),
) -> Resolver:
    """Return a resolver wired to the request's store and the shared cache."""
    return Resolver(
        store,
        cache,
        search_url_template=settings.default_search_url,
        timeout=settings.request_timeout_seconds,
    )


__all__ = [
    "get_async_session",
    "get_command_cache",
    "get_redis_client",
    "get_resolver",
    "get_settings",
    "get_store",
]
