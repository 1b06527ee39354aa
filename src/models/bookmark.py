"""Bookmark model: a path-tagged URL belonging to one account."""
from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Bookmark(Base):
    """
    Bookmark model - stores a named URL under a slash-delimited folder path.

    Column names match the stored document fields (APIKey, name, path, url).
    (APIKey, name, path) is not unique: imports may insert duplicates.
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        Index("ix_bookmarks_apikey_path", "APIKey", "path"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    api_key: Mapped[str] = mapped_column("APIKey", String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    path: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
