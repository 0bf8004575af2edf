"""FastAPI dependencies for API routers."""

from starlette.requests import HTTPConnection

from sendthesong.store.base import SongRepository
from sendthesong.youtube.titles import TitleService


def get_repository(conn: HTTPConnection) -> SongRepository:
    """Dependency returning the song repository created at startup."""
    return conn.app.state.repository


def get_title_service(conn: HTTPConnection) -> TitleService:
    """Dependency returning the process-wide title service."""
    return conn.app.state.titles
