"""Persistence backends for shared songs."""

from sendthesong.config import Settings
from sendthesong.db.session import get_sessionmaker

from .base import SongRepository, StoreError
from .sql import SqlSongRepository
from .supabase import SupabaseSongRepository


def get_repository(settings: Settings) -> SongRepository:
    """
    Factory function to get the configured song repository.

    Args:
        settings: Application settings

    Returns:
        Configured repository instance
    """
    if settings.store_backend == "sql":
        return SqlSongRepository(get_sessionmaker())
    elif settings.store_backend == "supabase":
        return SupabaseSongRepository(settings.supabase_url, settings.supabase_key)
    else:
        raise ValueError(f"Unknown store backend: {settings.store_backend}")


__all__ = [
    "SongRepository",
    "SqlSongRepository",
    "StoreError",
    "SupabaseSongRepository",
    "get_repository",
]
