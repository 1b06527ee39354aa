"""Per-account command mapping cache."""
import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.redis import RedisClient

logger = logging.getLogger(__name__)

# Cache schema version - included in all cache keys (e.g., "cmds:v1:<api key>")
#
# Bump this version when the cached value shape changes. New code then looks
# for "cmds:v2:..." keys, and old entries are never read and expire via TTL.
CACHE_SCHEMA_VERSION = 1


class CommandCache:
    """
    Cache of each account's full command mapping.

    One entry holds every command of an account, so a single miss warms all
    subsequent lookups for that account until the TTL expires.
    """

    def __init__(self, redis_client: "RedisClient", ttl: int = 60) -> None:
        """Initialize command cache with Redis client and entry TTL in seconds."""
        self._redis = redis_client
        self._ttl = ttl

    @property
    def ttl(self) -> int:
        """Entry lifetime in seconds."""
        return self._ttl

    def _cache_key(self, api_key: str) -> str:
        """Generate cache key for an account's command mapping."""
        return f"cmds:v{CACHE_SCHEMA_VERSION}:{api_key}"

    async def get(self, api_key: str) -> dict[str, str] | None:
        """
        Get the cached command mapping for an account.

        Args:
            api_key: The account's API key.

        Returns:
            The full command mapping on a hit, None on a miss.

        Raises:
            CacheUnavailableError: If Redis fails the read.
        """
        data = await self._redis.get(self._cache_key(api_key))
        if data is None:
            logger.debug("command_cache_miss api_key=%s", api_key)
            return None
        cmds = self._deserialize(data)
        if cmds is None:
            logger.warning("command_cache_corrupt api_key=%s", api_key)
            return None
        logger.debug("command_cache_hit api_key=%s", api_key)
        return cmds

    async def set(self, api_key: str, cmds: dict[str, str]) -> bool:
        """
        Cache an account's full command mapping.

        Best-effort: returns False instead of raising when Redis is unavailable.
        """
        stored = await self._redis.setex(
            self._cache_key(api_key),
            self._ttl,
            json.dumps(cmds),
        )
        if stored:
            logger.debug("command_cache_set api_key=%s count=%d", api_key, len(cmds))
        else:
            logger.warning("command_cache_set_failed api_key=%s", api_key)
        return stored

    async def invalidate(self, api_key: str) -> bool:
        """
        Drop an account's cached mapping.

        Called after a command is added or removed so the next lookup reads the store.
        """
        deleted = await self._redis.delete(self._cache_key(api_key))
        logger.debug("command_cache_invalidate api_key=%s ok=%s", api_key, deleted)
        return deleted

    def _deserialize(self, data: bytes | str) -> dict[str, str] | None:
        """Deserialize cached data, returns None if it is not a JSON object."""
        try:
            cmds = json.loads(data)
        except ValueError:
            return None
        if not isinstance(cmds, dict):
            return None
        return cmds
