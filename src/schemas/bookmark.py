"""Bookmark record type and pydantic schemas for bookmark endpoints."""
from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Path of the root folder. Every bookmark path starts with it, e.g. "/work/research".
BOOKMARKS_BASE_PATH = "/"
PATH_SEPARATOR = "/"


@dataclass
class BookmarkRecord:
    """
    A bookmark as it crosses the store boundary.

    Decoupled from the ORM so the resolver, importer and tree builder work the
    same against any Store implementation. id is None until the store assigns one.
    """

    api_key: str
    name: str
    path: str
    url: str
    id: int | None = None


def validate_bookmark_path(path: str) -> str:
    """
    Validate that a path is rooted at the base path.

    No other normalization is applied: "/a//b" and "/a/" are stored verbatim.
    """
    if not path.startswith(BOOKMARKS_BASE_PATH):
        raise ValueError(
            f"Bookmark path must start with '{BOOKMARKS_BASE_PATH}' (got '{path}').",
        )
    return path


class BookmarkCreate(BaseModel):
    """Schema for adding a single bookmark."""

    name: str = Field(default="", max_length=500)
    path: str = Field(default=BOOKMARKS_BASE_PATH, min_length=1)
    # Stored as given: no scheme or trailing-slash normalization
    url: str = Field(..., min_length=1)

    @field_validator("path")
    @classmethod
    def check_path(cls, v: str) -> str:
        """Validate path is rooted."""
        return validate_bookmark_path(v)


class BookmarkResponse(BaseModel):
    """Schema for a bookmark in responses, using the stored field names."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int | None = None
    api_key: str = Field(
        validation_alias=AliasChoices("api_key", "APIKey"),
        serialization_alias="APIKey",
    )
    name: str
    path: str
    url: str


class BookmarksAddedResponse(BaseModel):
    """Number of bookmarks the store confirmed as inserted."""

    model_config = ConfigDict(populate_by_name=True)

    num_added: int = Field(alias="numAdded")


class BookmarksDeletedResponse(BaseModel):
    """Number of bookmarks removed."""

    model_config = ConfigDict(populate_by_name=True)

    num_deleted: int = Field(alias="numDeleted")
