"""Command search endpoint: redirects a command to its URL."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from api.dependencies import get_resolver
from services.resolver import Resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/{api_key}/{cmd}", response_class=RedirectResponse, status_code=307)
async def search(
    api_key: str,
    cmd: str,
    resolver: Resolver = Depends(get_resolver),
) -> RedirectResponse:
    """
    Redirect to the URL registered for cmd.

    Unknown commands (or unknown accounts) redirect to a web search for cmd.
    The X-Resolution-Origin header reports cache-hit, store-hit or default-fallback.
    """
    resolution = await resolver.resolve(api_key, cmd)
    response = RedirectResponse(url=resolution.url, status_code=307)
    response.headers["X-Resolution-Origin"] = resolution.origin.value
    if resolution.miss_reason is not None:
        response.headers["X-Resolution-Miss"] = resolution.miss_reason.value
    return response
