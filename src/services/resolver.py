"""Resolve short commands to URLs with a cache-aside lookup."""
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

from services.exceptions import CacheUnavailableError, StoreUnavailableError
from services.utils import with_deadline

if TYPE_CHECKING:
    from core.command_cache import CommandCache
    from services.store import Store

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "http://www.google.com/search?q={query}"


class ResolutionOrigin(StrEnum):
    """Where a resolved URL came from."""

    CACHE_HIT = "cache-hit"
    STORE_HIT = "store-hit"
    DEFAULT_FALLBACK = "default-fallback"


class MissReason(StrEnum):
    """Why a lookup degraded to the default search URL."""

    ACCOUNT_NOT_FOUND = "account-not-found"
    COMMAND_NOT_FOUND = "command-not-found"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a command. miss_reason is set only for the fallback."""

    url: str
    origin: ResolutionOrigin
    miss_reason: MissReason | None = None


def default_search_url(cmd: str, template: str = DEFAULT_SEARCH_URL) -> str:
    """Build the search URL for an unresolved command. Pure and deterministic."""
    return template.format(query=quote_plus(cmd))


def format_url(url: str) -> str:
    """Prefix http:// when a stored command URL has no scheme (e.g. "github.com")."""
    if "://" in url:
        return url
    return "http://" + url


class Resolver:
    """
    Answers "which URL does this command map to for this account".

    Reads the account's whole command mapping from the cache, falling back to
    the store on a miss and backfilling the cache. Unknown commands resolve to
    a search URL rather than an error. Store and cache failures raise
    TransientError and never resolve to the search URL.

    Concurrent misses for the same account are not coalesced. Each one reads
    the store and rewrites the cache entry.
    """

    def __init__(
        self,
        store: "Store",
        cache: "CommandCache",
        search_url_template: str = DEFAULT_SEARCH_URL,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._search_url_template = search_url_template
        self._timeout = timeout

    def _fallback(self, cmd: str, reason: MissReason) -> Resolution:
        return Resolution(
            url=default_search_url(cmd, self._search_url_template),
            origin=ResolutionOrigin.DEFAULT_FALLBACK,
            miss_reason=reason,
        )

    async def resolve(self, api_key: str, cmd: str) -> Resolution:
        """
        Resolve cmd for the account identified by api_key.

        Raises:
            CacheUnavailableError: If the cache read failed or timed out.
            StoreUnavailableError: If the store read failed or timed out.
        """
        cached = await with_deadline(
            self._cache.get(api_key),
            self._timeout,
            lambda reason: CacheUnavailableError("GET", reason),
        )
        if cached is not None:
            url = cached.get(cmd)
            if url is None:
                # A cached mapping is authoritative until it expires
                logger.debug("resolve_unregistered api_key=%s cmd=%s source=cache", api_key, cmd)
                return self._fallback(cmd, MissReason.COMMAND_NOT_FOUND)
            return Resolution(url=format_url(url), origin=ResolutionOrigin.CACHE_HIT)

        cmds = await with_deadline(
            self._store.fetch_account_commands(api_key),
            self._timeout,
            lambda reason: StoreUnavailableError("fetch_account_commands", reason),
        )
        if cmds is None:
            logger.info("resolve_account_not_found api_key=%s", api_key)
            return self._fallback(cmd, MissReason.ACCOUNT_NOT_FOUND)

        await self._backfill(api_key, cmds)

        url = cmds.get(cmd)
        if url is None:
            logger.debug("resolve_unregistered api_key=%s cmd=%s source=store", api_key, cmd)
            return self._fallback(cmd, MissReason.COMMAND_NOT_FOUND)
        return Resolution(url=format_url(url), origin=ResolutionOrigin.STORE_HIT)

    async def _backfill(self, api_key: str, cmds: dict[str, str]) -> None:
        """Write the mapping to the cache. Failures are logged, never raised."""
        try:
            await with_deadline(
                self._cache.set(api_key, cmds),
                self._timeout,
                lambda reason: CacheUnavailableError("SET", reason),
            )
        except Exception:
            logger.warning("resolve_backfill_failed api_key=%s", api_key, exc_info=True)
