"""Folder tree type and its response schema."""
from dataclasses import dataclass, field

from pydantic import BaseModel

from schemas.bookmark import BookmarkRecord, BookmarkResponse


@dataclass
class Folder:
    """
    A node of the bookmark tree, derived from flat records on every read.

    Never persisted. bookmarks holds the records whose path equals this
    folder's path exactly, in store order. sub_folders is keyed by the next
    path segment.
    """

    name: str
    path: str
    bookmarks: list[BookmarkRecord] = field(default_factory=list)
    sub_folders: dict[str, "Folder"] = field(default_factory=dict)

    def count_folders(self) -> int:
        """Number of folder nodes in this subtree, including this one."""
        return 1 + sum(child.count_folders() for child in self.sub_folders.values())

    def count_bookmarks(self) -> int:
        """Number of bookmarks in this subtree."""
        return len(self.bookmarks) + sum(
            child.count_bookmarks() for child in self.sub_folders.values()
        )


class FolderResponse(BaseModel):
    """Schema for a folder tree in responses."""

    name: str
    path: str
    bookmarks: list[BookmarkResponse]
    folders: dict[str, "FolderResponse"]

    @classmethod
    def from_folder(cls, folder: Folder) -> "FolderResponse":
        """Convert a Folder tree into its response shape."""
        return cls(
            name=folder.name,
            path=folder.path,
            bookmarks=[BookmarkResponse.model_validate(b) for b in folder.bookmarks],
            folders={
                segment: cls.from_folder(child)
                for segment, child in folder.sub_folders.items()
            },
        )


FolderResponse.model_rebuild()
