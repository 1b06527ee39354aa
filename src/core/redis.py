"""Redis client backing the command cache."""
import logging
from collections.abc import Awaitable

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from services.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Async Redis client with connection pooling.

    Reads and writes fail differently:
    - a disabled client, or one whose server was unreachable at startup,
      reads as an always-empty cache;
    - once connected, a failed GET raises CacheUnavailableError, because a
      read error is not the same answer as a missing key;
    - SETEX and DELETE failures are logged and reported as False, since the
      cache is only ever populated on a best-effort basis.
    """

    def __init__(
        self,
        url: str,
        enabled: bool = True,
        pool_size: int = 20,
        socket_timeout: float | None = None,
    ) -> None:
        self._url = url
        self._enabled = enabled
        self._pool_size = pool_size
        self._socket_timeout = socket_timeout
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    async def connect(self) -> None:
        """Create the connection pool and ping once; stay disconnected on failure."""
        if not self._enabled:
            logger.info("Redis disabled by configuration, command cache is off")
            return
        self._pool = ConnectionPool.from_url(
            self._url,
            max_connections=self._pool_size,
            socket_timeout=self._socket_timeout,
        )
        self._client = Redis(connection_pool=self._pool)
        try:
            await self._client.ping()
        except RedisError as e:
            logger.warning("Redis connection failed, command cache is off: %s", e)
            await self.close()
            return
        logger.info("Redis connected")

    async def close(self) -> None:
        """Close the client and release its pool."""
        client, self._client, self._pool = self._client, None, None
        if client is not None:
            await client.aclose()
            logger.info("Redis connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._client is not None

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def get(self, key: str) -> bytes | None:
        """
        Get a value. None means the key is absent or the cache is off.

        Raises:
            CacheUnavailableError: If the connected server fails the read.
        """
        if self._client is None:
            return None
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning("Redis GET failed key=%s: %s", key, e)
            raise CacheUnavailableError("GET", str(e)) from e

    async def setex(self, key: str, seconds: int, value: str | bytes) -> bool:
        """Set value with expiry, returns False if Redis unavailable."""
        if self._client is None:
            return False
        return await self._best_effort("SETEX", self._client.setex(key, seconds, value))

    async def delete(self, *keys: str) -> bool:
        """Delete key(s), returns False if Redis unavailable."""
        if self._client is None:
            return False
        return await self._best_effort("DELETE", self._client.delete(*keys))

    async def _best_effort(self, command: str, call: Awaitable[object]) -> bool:
        try:
            await call
        except RedisError as e:
            logger.warning("Redis %s failed: %s", command, e)
            return False
        return True
