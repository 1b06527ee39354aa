"""Persistence boundary for accounts, commands and bookmarks."""
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Protocol

from sqlalchemy import String, bindparam, delete, insert, or_, select, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from models.account import Account
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkRecord
from services.exceptions import StoreUnavailableError
from services.hierarchy import descendant_prefix
from services.utils import escape_like

logger = logging.getLogger(__name__)


class Store(Protocol):
    """
    Operations the resolver, importer and tree builder need from persistence.

    All lookups are scoped by API key. Implementations raise
    StoreUnavailableError when the backend cannot answer.
    """

    async def fetch_account_commands(self, api_key: str) -> dict[str, str] | None:
        """Return the account's command mapping, or None if no such account."""
        ...

    async def fetch_account_bookmarks(
        self, api_key: str, path_prefix: str | None = None,
    ) -> list[BookmarkRecord]:
        """Return the account's bookmarks in insertion order, optionally under path_prefix."""
        ...

    async def insert_bookmarks(self, records: Sequence[BookmarkRecord]) -> int:
        """Insert records as one batch and return how many were inserted."""
        ...

    async def set_command(self, api_key: str, cmd: str, url: str) -> int:
        """Add or replace a single command. Returns the number of accounts updated."""
        ...

    async def remove_command(self, api_key: str, cmd: str) -> int:
        """Remove a single command. Returns the number of accounts modified."""
        ...

    async def delete_bookmark(self, api_key: str, bookmark_id: int) -> int:
        """Delete one bookmark owned by the account. Returns the number deleted."""
        ...

    async def commit(self) -> None:
        """Make every write so far visible to other requests."""
        ...


def _to_record(bookmark: Bookmark) -> BookmarkRecord:
    return BookmarkRecord(
        api_key=bookmark.api_key,
        name=bookmark.name,
        path=bookmark.path,
        url=bookmark.url,
        id=bookmark.id,
    )


class SqlStore:
    """
    Store backed by the SQLAlchemy async session of the current request.

    Writes stay in the request transaction until commit() or the end of the
    request, when the session generator commits.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        """Re-raise connectivity failures as StoreUnavailableError."""
        try:
            yield
        except (OperationalError, InterfaceError, OSError) as e:
            logger.warning("store_unavailable operation=%s error=%s", operation, e)
            raise StoreUnavailableError(operation, str(e)) from e

    async def fetch_account_commands(self, api_key: str) -> dict[str, str] | None:
        """Return the account's command mapping, or None if no such account."""
        async with self._translate_errors("fetch_account_commands"):
            result = await self._db.execute(
                select(Account.cmds).where(Account.api_key == api_key),
            )
            row = result.one_or_none()
        if row is None:
            return None
        return dict(row.cmds or {})

    async def fetch_account_bookmarks(
        self, api_key: str, path_prefix: str | None = None,
    ) -> list[BookmarkRecord]:
        """
        Return the account's bookmarks in insertion order.

        With path_prefix, only bookmarks at that path or below it are returned.
        The match is on whole segments: "/work" does not match "/workshop".
        """
        stmt = select(Bookmark).where(Bookmark.api_key == api_key)
        if path_prefix is not None:
            descendants = descendant_prefix(path_prefix)
            stmt = stmt.where(
                or_(
                    Bookmark.path == path_prefix,
                    Bookmark.path.like(escape_like(descendants) + "%", escape="\\"),
                ),
            )
        stmt = stmt.order_by(Bookmark.id)

        async with self._translate_errors("fetch_account_bookmarks"):
            result = await self._db.execute(stmt)
            bookmarks = result.scalars().all()
        return [_to_record(b) for b in bookmarks]

    async def insert_bookmarks(self, records: Sequence[BookmarkRecord]) -> int:
        """
        Insert records as one batch and return how many were inserted.

        No duplicate detection: records identical to existing rows are inserted again.
        """
        if not records:
            return 0
        rows = [
            {"api_key": r.api_key, "name": r.name, "path": r.path, "url": r.url}
            for r in records
        ]
        async with self._translate_errors("insert_bookmarks"):
            result = await self._db.scalars(insert(Bookmark).returning(Bookmark.id), rows)
            inserted_ids = result.all()
        logger.info("bookmarks_inserted count=%d of=%d", len(inserted_ids), len(records))
        return len(inserted_ids)

    async def set_command(self, api_key: str, cmd: str, url: str) -> int:
        """
        Add or replace a single command.

        Merges {cmd: url} into the stored mapping in one statement, so concurrent
        writes to other commands of the same account are preserved.
        """
        entry = bindparam("cmd_entry", {cmd: url}, type_=JSONB)
        stmt = (
            update(Account)
            .where(Account.api_key == api_key)
            .values(cmds=Account.cmds.op("||")(entry))
            .execution_options(synchronize_session=False)
        )
        async with self._translate_errors("set_command"):
            result = await self._db.execute(stmt)
        return result.rowcount

    async def remove_command(self, api_key: str, cmd: str) -> int:
        """Remove a single command. Returns 0 if the account or command does not exist."""
        key = bindparam("cmd_key", cmd, type_=String)
        stmt = (
            update(Account)
            .where(Account.api_key == api_key, Account.cmds.has_key(cmd))
            .values(cmds=Account.cmds.op("-")(key))
            .execution_options(synchronize_session=False)
        )
        async with self._translate_errors("remove_command"):
            result = await self._db.execute(stmt)
        return result.rowcount

    async def delete_bookmark(self, api_key: str, bookmark_id: int) -> int:
        """Delete one bookmark owned by the account. Returns the number deleted."""
        stmt = delete(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.api_key == api_key,
        )
        async with self._translate_errors("delete_bookmark"):
            result = await self._db.execute(stmt)
        return result.rowcount

    async def commit(self) -> None:
        """Commit the request transaction early, before dependent side effects run."""
        async with self._translate_errors("commit"):
            await self._db.commit()
