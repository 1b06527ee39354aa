"""Command management endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_command_cache, get_settings, get_store
from core.command_cache import CommandCache
from core.config import Settings
from schemas.command import CommandAddedResponse, CommandCreate, CommandDeletedResponse
from services import command_service
from services.exceptions import AccountNotFoundError
from services.store import Store

router = APIRouter(prefix="/users/{api_key}/cmds", tags=["commands"])


@router.get("/", response_model=dict[str, str])
async def list_commands(
    api_key: str,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> dict[str, str]:
    """Get every command registered for the account."""
    try:
        return await command_service.list_commands(
            store, api_key, timeout=settings.request_timeout_seconds,
        )
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")


@router.put("/", response_model=CommandAddedResponse)
async def add_command(
    api_key: str,
    data: CommandCreate,
    store: Store = Depends(get_store),
    cache: CommandCache = Depends(get_command_cache),
    settings: Settings = Depends(get_settings),
) -> CommandAddedResponse:
    """Register a command, replacing its URL if it already exists."""
    try:
        num_updated = await command_service.add_command(
            store, cache, api_key, data.cmd, data.url,
            timeout=settings.request_timeout_seconds,
        )
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")
    return CommandAddedResponse(num_updated=num_updated, cmd=data.cmd, url=data.url)


@router.delete("/{cmd}", response_model=CommandDeletedResponse)
async def delete_command(
    api_key: str,
    cmd: str,
    store: Store = Depends(get_store),
    cache: CommandCache = Depends(get_command_cache),
    settings: Settings = Depends(get_settings),
) -> CommandDeletedResponse:
    """Remove a command from the account."""
    num_deleted = await command_service.delete_command(
        store, cache, api_key, cmd, timeout=settings.request_timeout_seconds,
    )
    if num_deleted == 0:
        raise HTTPException(status_code=404, detail=f"Command not found: {cmd}")
    return CommandDeletedResponse(num_deleted=num_deleted, cmd=cmd)
