"""SqlStore against PostgreSQL: JSONB command updates and path-prefix queries."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.account import Account
from schemas.bookmark import BookmarkRecord
from services.store import SqlStore
from tests.conftest import API_KEY, OTHER_API_KEY


@pytest.fixture
async def account(pg_session: AsyncSession) -> Account:
    account = Account(name="conal", api_key=API_KEY, cmds={"gh": "https://github.com"})
    other = Account(name="other", api_key=OTHER_API_KEY, cmds={})
    pg_session.add_all([account, other])
    await pg_session.flush()
    return account


def _records(*paths: str, api_key: str = API_KEY) -> list[BookmarkRecord]:
    return [
        BookmarkRecord(api_key=api_key, name=f"b{i}", path=path, url=f"https://e.com/{i}")
        for i, path in enumerate(paths)
    ]


class TestCommands:
    async def test__fetch_account_commands__returns_mapping(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.fetch_account_commands(API_KEY) == {"gh": "https://github.com"}

    async def test__fetch_account_commands__unknown_account_is_none(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.fetch_account_commands("unknown") is None

    async def test__set_command__merges_single_key(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.set_command(API_KEY, "py", "https://python.org") == 1

        assert await sql_store.fetch_account_commands(API_KEY) == {
            "gh": "https://github.com",
            "py": "https://python.org",
        }

    async def test__set_command__unknown_account_updates_nothing(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.set_command("unknown", "py", "https://python.org") == 0

    async def test__set_command__replaces_existing_url(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.set_command(API_KEY, "gh", "https://gitlab.com")

        assert await sql_store.fetch_account_commands(API_KEY) == {"gh": "https://gitlab.com"}

    async def test__remove_command__drops_only_that_key(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.set_command(API_KEY, "py", "https://python.org")

        assert await sql_store.remove_command(API_KEY, "gh") == 1
        assert await sql_store.fetch_account_commands(API_KEY) == {"py": "https://python.org"}

    async def test__remove_command__missing_key_is_zero(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.remove_command(API_KEY, "nope") == 0

    async def test__commit__keeps_writes_visible(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.set_command(API_KEY, "py", "https://python.org")
        await sql_store.commit()

        assert (await sql_store.fetch_account_commands(API_KEY))["py"] == "https://python.org"


class TestBookmarks:
    async def test__insert_bookmarks__returns_count_and_assigns_ids(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        assert await sql_store.insert_bookmarks(_records("/", "/a")) == 2

        stored = await sql_store.fetch_account_bookmarks(API_KEY)
        assert [b.path for b in stored] == ["/", "/a"]
        assert all(b.id is not None for b in stored)

    async def test__insert_bookmarks__duplicates_are_kept(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/a"))
        await sql_store.insert_bookmarks(_records("/a"))

        assert len(await sql_store.fetch_account_bookmarks(API_KEY)) == 2

    async def test__insert_bookmarks__empty_batch(self, sql_store: SqlStore) -> None:
        assert await sql_store.insert_bookmarks([]) == 0

    async def test__fetch_account_bookmarks__scoped_to_account(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/a") + _records("/a", api_key=OTHER_API_KEY))

        stored = await sql_store.fetch_account_bookmarks(API_KEY)

        assert [b.api_key for b in stored] == [API_KEY]

    async def test__fetch_account_bookmarks__prefix_matches_whole_segments(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/work", "/work/x", "/workshop", "/"))

        stored = await sql_store.fetch_account_bookmarks(API_KEY, path_prefix="/work")

        assert [b.path for b in stored] == ["/work", "/work/x"]

    async def test__fetch_account_bookmarks__trailing_slash_prefix_is_literal(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/a/", "/a//b", "/a/x", "/a"))

        stored = await sql_store.fetch_account_bookmarks(API_KEY, path_prefix="/a/")

        assert [b.path for b in stored] == ["/a/", "/a//b"]

    async def test__fetch_account_bookmarks__prefix_escapes_like_wildcards(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/a_b/x", "/aXb/x"))

        stored = await sql_store.fetch_account_bookmarks(API_KEY, path_prefix="/a_b")

        assert [b.path for b in stored] == ["/a_b/x"]

    async def test__delete_bookmark__scoped_to_account(
        self, sql_store: SqlStore, account: Account,
    ) -> None:
        await sql_store.insert_bookmarks(_records("/a"))
        bookmark_id = (await sql_store.fetch_account_bookmarks(API_KEY))[0].id
        assert bookmark_id is not None

        assert await sql_store.delete_bookmark(OTHER_API_KEY, bookmark_id) == 0
        assert await sql_store.delete_bookmark(API_KEY, bookmark_id) == 1
        assert await sql_store.fetch_account_bookmarks(API_KEY) == []
