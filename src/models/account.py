"""Account model: the owner of commands and bookmarks."""
from sqlalchemy import String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Account(Base):
    """
    Account model - identified externally by its API key.

    Commands are embedded as a flat JSONB object (command -> URL). Writes to it
    must touch a single key at a time, see SqlStore.set_command.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)
    api_key: Mapped[str] = mapped_column(
        "APIKey",
        String(64),
        unique=True,
        index=True,
        comment="Opaque per-account key scoping every command and bookmark",
    )
    cmds: Mapped[dict[str, str]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
        default=dict,
    )
