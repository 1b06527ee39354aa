"""Pydantic schemas for command endpoints."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Commands become a key inside the account's JSONB mapping, and are typed as
# the first word of a search box query.
MAX_COMMAND_LENGTH = 100


class CommandCreate(BaseModel):
    """Schema for registering (or replacing) a command."""

    cmd: str = Field(..., min_length=1, max_length=MAX_COMMAND_LENGTH)
    url: str = Field(..., min_length=1)

    @field_validator("cmd")
    @classmethod
    def check_cmd(cls, v: str) -> str:
        """Commands are single tokens."""
        if v != v.strip() or any(ch.isspace() for ch in v):
            raise ValueError(f"Command must not contain whitespace (got '{v}').")
        return v


class CommandAddedResponse(BaseModel):
    """Result of registering a command."""

    model_config = ConfigDict(populate_by_name=True)

    num_updated: int = Field(alias="numUpdated")
    cmd: str
    url: str


class CommandDeletedResponse(BaseModel):
    """Result of removing a command."""

    model_config = ConfigDict(populate_by_name=True)

    num_deleted: int = Field(alias="numDeleted")
    cmd: str
