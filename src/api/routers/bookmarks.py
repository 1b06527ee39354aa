"""Bookmark browsing, creation, import and deletion endpoints."""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from api.dependencies import get_settings, get_store
from core.config import Settings
from schemas.bookmark import (
    BookmarkCreate,
    BookmarksAddedResponse,
    BookmarksDeletedResponse,
    validate_bookmark_path,
)
from schemas.folder import FolderResponse
from services import bookmark_service
from services.bookmark_import import BOOKMARKS_FILE_KEY, import_bookmarks
from services.exceptions import MalformedImportError
from services.store import Store

router = APIRouter(prefix="/users/{api_key}/bookmarks", tags=["bookmarks"])


@router.get("/", response_model=FolderResponse)
async def get_all_bookmarks(
    api_key: str,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> FolderResponse:
    """Get the account's whole bookmark tree."""
    folder = await bookmark_service.get_all_bookmarks(
        store, api_key, timeout=settings.request_timeout_seconds,
    )
    return FolderResponse.from_folder(folder)


@router.get("/folder", response_model=FolderResponse)
async def get_bookmarks_folder(
    api_key: str,
    path: str = Query(..., min_length=1, description="Folder path, e.g. /work/research"),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> FolderResponse:
    """Get the bookmark tree rooted at one folder."""
    try:
        validate_bookmark_path(path)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    folder = await bookmark_service.get_bookmarks_folder(
        store, api_key, path, timeout=settings.request_timeout_seconds,
    )
    return FolderResponse.from_folder(folder)


@router.post("/", response_model=BookmarksAddedResponse, status_code=201)
async def add_bookmark(
    api_key: str,
    data: BookmarkCreate,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BookmarksAddedResponse:
    """Add a single bookmark."""
    num_added = await bookmark_service.add_bookmark(
        store, api_key, data, timeout=settings.request_timeout_seconds,
    )
    return BookmarksAddedResponse(num_added=num_added)


@router.post("/file", response_model=BookmarksAddedResponse, status_code=201)
async def add_bookmarks_from_file(
    api_key: str,
    bookmarks_file: UploadFile = File(
        ..., alias=BOOKMARKS_FILE_KEY, description="Browser bookmark export (HTML)",
    ),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BookmarksAddedResponse:
    """
    Import a browser bookmark export.

    Every link in the file is added, including ones already stored.
    """
    document = await bookmarks_file.read()
    try:
        num_added = await import_bookmarks(
            store, api_key, document, timeout=settings.request_timeout_seconds,
        )
    except MalformedImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookmarksAddedResponse(num_added=num_added)


@router.delete("/{bookmark_id}", response_model=BookmarksDeletedResponse)
async def delete_bookmark(
    api_key: str,
    bookmark_id: int,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BookmarksDeletedResponse:
    """Delete a bookmark."""
    num_deleted = await bookmark_service.delete_bookmark(
        store, api_key, bookmark_id, timeout=settings.request_timeout_seconds,
    )
    if num_deleted == 0:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarksDeletedResponse(num_deleted=num_deleted)
