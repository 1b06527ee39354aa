"""Service layer for an account's commands."""
import logging
from typing import TYPE_CHECKING

from services.exceptions import AccountNotFoundError, StoreUnavailableError
from services.utils import with_deadline

if TYPE_CHECKING:
    from core.command_cache import CommandCache
    from services.store import Store

logger = logging.getLogger(__name__)


async def _commit(store: "Store", timeout: float | None) -> None:
    await with_deadline(
        store.commit(),
        timeout,
        lambda reason: StoreUnavailableError("commit", reason),
    )


async def list_commands(
    store: "Store",
    api_key: str,
    timeout: float | None = None,
) -> dict[str, str]:
    """
    Get every command registered for an account.

    Reads the store directly: listing is a management view and should not
    serve a mapping up to one TTL old.

    Raises:
        AccountNotFoundError: If no account has this API key.
    """
    cmds = await with_deadline(
        store.fetch_account_commands(api_key),
        timeout,
        lambda reason: StoreUnavailableError("fetch_account_commands", reason),
    )
    if cmds is None:
        raise AccountNotFoundError(api_key)
    return cmds


async def add_command(
    store: "Store",
    cache: "CommandCache",
    api_key: str,
    cmd: str,
    url: str,
    timeout: float | None = None,
) -> int:
    """
    Register cmd -> url, replacing any previous URL for cmd.

    Only this one key of the account's mapping is written. The write is
    committed before the account's cache entry is dropped, so a resolve that
    misses right after the drop reads the new mapping, not the old one.

    Returns:
        Number of accounts updated (1).

    Raises:
        AccountNotFoundError: If no account has this API key.
    """
    num_updated = await with_deadline(
        store.set_command(api_key, cmd, url),
        timeout,
        lambda reason: StoreUnavailableError("set_command", reason),
    )
    if num_updated == 0:
        raise AccountNotFoundError(api_key)
    await _commit(store, timeout)
    await cache.invalidate(api_key)
    logger.info("command_added api_key=%s cmd=%s", api_key, cmd)
    return num_updated


async def delete_command(
    store: "Store",
    cache: "CommandCache",
    api_key: str,
    cmd: str,
    timeout: float | None = None,
) -> int:
    """
    Remove cmd from the account's mapping.

    Returns:
        Number of accounts modified, 0 if the account or command does not exist.
    """
    num_deleted = await with_deadline(
        store.remove_command(api_key, cmd),
        timeout,
        lambda reason: StoreUnavailableError("remove_command", reason),
    )
    if num_deleted:
        await _commit(store, timeout)
        await cache.invalidate(api_key)
        logger.info("command_deleted api_key=%s cmd=%s", api_key, cmd)
    return num_deleted
