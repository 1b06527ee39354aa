"""Service layer for browsing, adding and deleting bookmarks."""
import logging
from typing import TYPE_CHECKING

from schemas.bookmark import BOOKMARKS_BASE_PATH, PATH_SEPARATOR, BookmarkCreate, BookmarkRecord
from schemas.folder import Folder
from services.exceptions import StoreUnavailableError
from services.hierarchy import build_folder
from services.utils import with_deadline

if TYPE_CHECKING:
    from services.store import Store

logger = logging.getLogger(__name__)

ROOT_FOLDER_LABEL = "root"


async def get_all_bookmarks(
    store: "Store",
    api_key: str,
    timeout: float | None = None,
) -> Folder:
    """Get the account's full bookmark tree, rooted at the base path."""
    records = await with_deadline(
        store.fetch_account_bookmarks(api_key),
        timeout,
        lambda reason: StoreUnavailableError("fetch_account_bookmarks", reason),
    )
    return build_folder(records, BOOKMARKS_BASE_PATH, ROOT_FOLDER_LABEL)


async def get_bookmarks_folder(
    store: "Store",
    api_key: str,
    path: str,
    timeout: float | None = None,
) -> Folder:
    """
    Get the bookmark tree rooted at path.

    The root folder is labelled with the last segment of path ("research" for
    "/work/research", "" for "/work/"). An unknown path gives an empty folder,
    not an error.
    """
    records = await with_deadline(
        store.fetch_account_bookmarks(api_key, path_prefix=path),
        timeout,
        lambda reason: StoreUnavailableError("fetch_account_bookmarks", reason),
    )
    if path == BOOKMARKS_BASE_PATH:
        label = ROOT_FOLDER_LABEL
    else:
        label = path.rsplit(PATH_SEPARATOR, 1)[-1]
    return build_folder(records, path, label)


async def add_bookmark(
    store: "Store",
    api_key: str,
    data: BookmarkCreate,
    timeout: float | None = None,
) -> int:
    """
    Add a single bookmark for an account.

    Returns:
        Number of bookmarks inserted.
    """
    record = BookmarkRecord(api_key=api_key, name=data.name, path=data.path, url=data.url)
    return await with_deadline(
        store.insert_bookmarks([record]),
        timeout,
        lambda reason: StoreUnavailableError("insert_bookmarks", reason),
    )


async def delete_bookmark(
    store: "Store",
    api_key: str,
    bookmark_id: int,
    timeout: float | None = None,
) -> int:
    """
    Delete a bookmark, scoped to the account.

    Returns:
        Number of bookmarks deleted, 0 if not found or owned by another account.
    """
    num_deleted = await with_deadline(
        store.delete_bookmark(api_key, bookmark_id),
        timeout,
        lambda reason: StoreUnavailableError("delete_bookmark", reason),
    )
    if num_deleted:
        logger.info("bookmark_deleted api_key=%s id=%d", api_key, bookmark_id)
    return num_deleted
