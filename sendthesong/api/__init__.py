"""API routers for Send the Song."""

from sendthesong.api.routes_health import router as health_router
from sendthesong.api.routes_live import router as live_router
from sendthesong.api.routes_page import router as page_router
from sendthesong.api.routes_preview import router as preview_router
from sendthesong.api.routes_songs import router as songs_router

__all__ = [
    "health_router",
    "live_router",
    "page_router",
    "preview_router",
    "songs_router",
]
