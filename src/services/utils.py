"""Shared utility functions for service layer."""
import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from services.exceptions import TransientError

T = TypeVar("T")


def escape_like(value: str) -> str:
    r"""
    Escape special LIKE characters for safe use in prefix patterns.

    PostgreSQL LIKE treats these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is the escape character

    This function escapes them so a bookmark path like "/100%_done" matches literally.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def with_deadline(
    awaitable: Awaitable[T],
    timeout: float | None,
    on_timeout: Callable[[str], TransientError],
) -> T:
    """
    Await a store or cache call, bounded by timeout seconds.

    A deadline overrun is raised as the TransientError built by on_timeout, so
    callers can tell "could not determine" apart from "not found". Task
    cancellation is not caught.
    """
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError as e:
        raise on_timeout(f"timed out after {timeout}s") from e
