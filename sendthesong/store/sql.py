"""SQLAlchemy-backed song repository."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sendthesong.db.models import SentSongRow
from sendthesong.songs.models import SentSong, SentSongCreate

from .base import SongRepository, StoreError

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_song(row: SentSongRow) -> SentSong:
    return SentSong(
        id=row.id,
        recipient_name=row.recipient_name,
        youtube_url=row.youtube_url,
        message=row.message,
        timestamp=row.timestamp,
    )


_NEWEST_FIRST = (SentSongRow.timestamp.desc(), SentSongRow.id.desc())


class SqlSongRepository(SongRepository):
    """Song repository over an async SQLAlchemy session maker."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def insert(self, new: SentSongCreate) -> SentSong:
        row = SentSongRow(
            recipient_name=new.recipient_name,
            youtube_url=new.youtube_url,
            message=new.message,
        )
        try:
            async with self._sessionmaker() as db:
                db.add(row)
                await db.commit()
                # Read back the server-assigned timestamp
                await db.refresh(row)
        except SQLAlchemyError as e:
            logger.error("Failed to insert sent song", exc_info=True)
            raise StoreError(str(e)) from e

        logger.info(f"Stored sent song id={row.id}")
        return _to_song(row)

    async def list_recent(self, limit: int) -> list[SentSong]:
        query = select(SentSongRow).order_by(*_NEWEST_FIRST).limit(limit)
        return await self._fetch(query)

    async def search_by_recipient(
        self, query: str, limit: int | None = None
    ) -> list[SentSong]:
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(SentSongRow)
            .where(SentSongRow.recipient_name.ilike(pattern, escape="\\"))
            .order_by(*_NEWEST_FIRST)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._fetch(stmt)

    async def _fetch(self, stmt) -> list[SentSong]:
        try:
            async with self._sessionmaker() as db:
                result = await db.execute(stmt)
                rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to read sent songs", exc_info=True)
            raise StoreError(str(e)) from e
        return [_to_song(row) for row in rows]
