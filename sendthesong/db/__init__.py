"""Database module for Send the Song."""

from sendthesong.db.models import Base, SentSongRow
from sendthesong.db.session import dispose_engine, get_engine, get_sessionmaker, init_db

__all__ = [
    "Base",
    "SentSongRow",
    "dispose_engine",
    "get_engine",
    "get_sessionmaker",
    "init_db",
]
