"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import bookmarks, commands, health, search
from core.config import get_settings
from core.redis import RedisClient
from db.session import init_db
from services.exceptions import TransientError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()

    # Startup: Create tables
    await init_db()

    # Startup: Connect to Redis. The client is shared by every request via app.state.
    redis_client = RedisClient(
        url=app_settings.redis_url,
        enabled=app_settings.redis_enabled,
        pool_size=app_settings.redis_pool_size,
        socket_timeout=app_settings.request_timeout_seconds,
    )
    await redis_client.connect()
    app.state.redis_client = redis_client

    yield

    # Shutdown: Close Redis
    await redis_client.close()
    app.state.redis_client = None


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


app_settings = get_settings()

app = FastAPI(
    title="Bookshelf API",
    description="Short commands that redirect to URLs, and bookmarks organized in folders.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(TransientError)
async def transient_error_handler(
    _request: Request, exc: TransientError,
) -> JSONResponse:
    """Report unavailable or timed-out backends as 503 rather than a wrong answer."""
    logger.warning("transient_error: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Service temporarily unavailable. Please try again."},
        headers={"Retry-After": "1"},
    )


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(search.router)
app.include_router(commands.router)
app.include_router(bookmarks.router)
