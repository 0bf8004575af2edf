"""Send the Song - Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware

from sendthesong.api import (
    health_router,
    live_router,
    page_router,
    preview_router,
    songs_router,
)
from sendthesong.config import get_settings
from sendthesong.db.session import dispose_engine, init_db
from sendthesong.logging import setup_logging
from sendthesong.store import get_repository
from sendthesong.web import STATIC_DIR
from sendthesong.youtube import TitleService, YouTubeClient, get_title_cache

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent clickjacking attacks
        response.headers["X-Frame-Options"] = "DENY"

        # Content Security Policy - thumbnails come from img.youtube.com,
        # live updates arrive over a same-origin websocket
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self'; "
            "img-src 'self' data: https://img.youtube.com; "
            "font-src 'self'; "
            "connect-src 'self' ws: wss:; "
            "frame-ancestors 'none'"
        )

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    settings = get_settings()
    setup_logging(settings)

    # Startup
    if settings.store_backend == "sql":
        await init_db()
    app.state.repository = get_repository(settings)

    redis = None
    if settings.title_cache_backend == "redis":
        redis = Redis.from_url(settings.redis_url, decode_responses=False)
    client = YouTubeClient(
        settings.youtube_api_key,
        base_url=settings.youtube_api_base,
        timeout=settings.youtube_timeout_seconds,
    )
    if not client.enabled:
        logger.warning("YouTube API key not configured; previews will use a generic title")
    app.state.titles = TitleService(client, get_title_cache(settings, redis))

    logger.info(
        f"Started with store={settings.store_backend} "
        f"title_cache={settings.title_cache_backend}"
    )
    yield

    # Shutdown
    if redis is not None:
        await redis.aclose()
    if settings.store_backend == "sql":
        await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Send the Song",
        description="Share YouTube songs with someone, anonymously",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)

    # Configure CORS - restrict to specific methods and headers for security
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],  # Methods used by the API
        allow_headers=["Content-Type", "Accept"],  # Only necessary headers
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(page_router)
    app.include_router(songs_router)
    app.include_router(preview_router)
    app.include_router(live_router)

    # Stylesheet and page script for the shell
    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
