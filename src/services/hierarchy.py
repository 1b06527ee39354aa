"""Build nested folder trees from flat, path-tagged bookmark records."""
from collections.abc import Iterable

from schemas.bookmark import BOOKMARKS_BASE_PATH, PATH_SEPARATOR, BookmarkRecord
from schemas.folder import Folder


def descendant_prefix(target_path: str) -> str:
    """
    Prefix every strict descendant path of target_path starts with.

    Only the base path already ends in the separator. Any other trailing slash
    is an empty segment of its own, so "/a/" has descendants under "/a//".
    """
    if target_path == BOOKMARKS_BASE_PATH:
        return target_path
    return target_path + PATH_SEPARATOR


def relative_segments(path: str, target_path: str) -> list[str] | None:
    """
    Split a path into its segments below target_path.

    Returns [] when path is target_path itself, None when path is outside it.
    Empty segments are kept as-is: "/a//b" below "/a" is ["", "b"].
    """
    if path == target_path:
        return []
    prefix = descendant_prefix(target_path)
    if not path.startswith(prefix):
        return None
    return path[len(prefix):].split(PATH_SEPARATOR)


def build_folder(
    records: Iterable[BookmarkRecord],
    target_path: str,
    root_label: str,
) -> Folder:
    """
    Reconstruct the folder tree rooted at target_path.

    Records at target_path land in the root's bookmarks in input order. Deeper
    records create every intermediate folder along their path, even when no
    bookmark sits at an intermediate level. Records outside target_path are
    ignored.

    Pure and never raises: callers hand it whatever the store returned.

    Args:
        records: Flat bookmark records, in store order.
        target_path: Path of the folder to build, e.g. "/" or "/work".
        root_label: Display name for the returned root folder.

    Returns:
        The populated root Folder.
    """
    root = Folder(name=root_label, path=target_path)
    prefix = descendant_prefix(target_path)

    for record in records:
        path = getattr(record, "path", None)
        if not isinstance(path, str):
            continue
        segments = relative_segments(path, target_path)
        if segments is None:
            continue

        node = root
        for depth, segment in enumerate(segments):
            child = node.sub_folders.get(segment)
            if child is None:
                # Path taken from the record itself so empty segments survive verbatim
                child_path = prefix + PATH_SEPARATOR.join(segments[: depth + 1])
                child = Folder(name=segment, path=child_path)
                node.sub_folders[segment] = child
            node = child
        node.bookmarks.append(record)

    return root
