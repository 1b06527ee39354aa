"""Parse browser bookmark exports and bulk-insert them."""
import logging
import re
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Tag

from schemas.bookmark import BOOKMARKS_BASE_PATH, PATH_SEPARATOR, BookmarkRecord
from services.exceptions import MalformedImportError, StoreUnavailableError
from services.utils import with_deadline

if TYPE_CHECKING:
    from services.store import Store

logger = logging.getLogger(__name__)

# Multipart form field carrying the export file
BOOKMARKS_FILE_KEY = "bookmarks_file"

_WS_RE = re.compile(r"\s+")


def _clean_text(element: Tag) -> str:
    return _WS_RE.sub(" ", element.get_text(strip=True))


def _folder_name(dl: Tag) -> str | None:
    """
    Name of the folder a <DL> list belongs to, or None for the top-level list.

    Exports write each folder as <DT><H3>name</H3><DL>...</DL>. Depending on
    how the unclosed <DT>/<p> tags were nested by the parser, the heading is
    either a preceding sibling of the <DL> or sits in the preceding <DT>.
    """
    h3 = dl.find_previous_sibling("h3")
    if h3 is None:
        dt = dl.find_previous_sibling("dt")
        if dt is not None:
            h3 = dt.find("h3", recursive=False)
    if h3 is None:
        return None
    return _clean_text(h3)


def _folder_path(link: Tag, root: Tag) -> str:
    """Slash-delimited path of the folders enclosing a link, outermost first."""
    names: list[str] = []
    for dl in link.find_parents("dl"):
        if dl is root:
            break
        name = _folder_name(dl)
        if name is not None:
            names.append(name)
    names.reverse()
    return BOOKMARKS_BASE_PATH + PATH_SEPARATOR.join(names)


def _decode(document: bytes | str) -> str:
    if isinstance(document, str):
        return document
    try:
        return document.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedImportError(f"Bookmark file is not valid UTF-8: {e}") from e


def parse_import_file(document: bytes | str, api_key: str) -> list[BookmarkRecord]:
    """
    Parse a Netscape bookmark file (the HTML export every browser produces).

    Folder nesting is flattened into each record's path: a link inside
    "Work" > "Research" gets the path "/Work/Research", top-level links get "/".
    Links without an href are skipped. Every record is stamped with api_key.

    Raises:
        MalformedImportError: If the document is empty, undecodable, or has no <DL> list.
    """
    text = _decode(document)
    if not text.strip():
        raise MalformedImportError("Bookmark file is empty")

    soup = BeautifulSoup(text, "html.parser")
    root = soup.find("dl")
    if root is None:
        raise MalformedImportError("Could not find <DL> root in bookmarks file")

    records: list[BookmarkRecord] = []
    for link in root.find_all("a"):
        url = link.get("href")
        if not url:
            continue
        records.append(
            BookmarkRecord(
                api_key=api_key,
                name=_clean_text(link),
                path=_folder_path(link, root),
                url=url.strip(),
            ),
        )
    logger.info("bookmark_file_parsed api_key=%s count=%d", api_key, len(records))
    return records


async def import_bookmarks(
    store: "Store",
    api_key: str,
    document: bytes | str,
    timeout: float | None = None,
) -> int:
    """
    Parse an export document and insert every bookmark in one batch.

    Nothing is deduplicated: importing the same file twice stores each
    bookmark twice. The return value is the count the store confirmed, which
    may be lower than the parsed count if the batch partially failed.

    Raises:
        MalformedImportError: Before any store call, if the document cannot be parsed.
    """
    records = parse_import_file(document, api_key)
    if not records:
        return 0
    inserted = await with_deadline(
        store.insert_bookmarks(records),
        timeout,
        lambda reason: StoreUnavailableError("insert_bookmarks", reason),
    )
    if inserted < len(records):
        logger.warning(
            "bookmark_import_partial api_key=%s inserted=%d parsed=%d",
            api_key,
            inserted,
            len(records),
        )
    return inserted
