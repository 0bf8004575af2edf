"""Shared test fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from sendthesong.songs.models import SentSong, SentSongCreate
from sendthesong.store.base import SongRepository, StoreError


class FakeSongRepository(SongRepository):
    """In-memory repository that records every call it receives."""

    def __init__(self, songs: list[SentSong] | None = None):
        self.songs = list(songs or [])
        self.inserts: list[SentSongCreate] = []
        self.searches: list[str] = []
        self.list_calls: list[int] = []
        self.fail_reads = False
        self.fail_writes = False
        self.search_delays: dict[str, float] = {}
        self._next_id = max((s.id or 0 for s in self.songs), default=0) + 1

    async def insert(self, new: SentSongCreate) -> SentSong:
        self.inserts.append(new)
        if self.fail_writes:
            raise StoreError("insert failed")
        song = SentSong(
            id=self._next_id,
            recipient_name=new.recipient_name,
            youtube_url=new.youtube_url,
            message=new.message,
            timestamp=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self.songs.insert(0, song)
        return song

    async def list_recent(self, limit: int) -> list[SentSong]:
        self.list_calls.append(limit)
        if self.fail_reads:
            raise StoreError("connection refused")
        return self.songs[:limit]

    async def search_by_recipient(
        self, query: str, limit: int | None = None
    ) -> list[SentSong]:
        self.searches.append(query)
        delay = self.search_delays.get(query)
        if delay:
            await asyncio.sleep(delay)
        if self.fail_reads:
            raise StoreError("connection refused")
        needle = query.lower()
        return [s for s in self.songs if needle in s.recipient_name.lower()]


def make_song(
    song_id: int,
    recipient: str,
    url: str = "https://youtu.be/dQw4w9WgXcQ",
    message: str = "",
    minutes_ago: int = 0,
) -> SentSong:
    """Helper to create a stored SentSong for testing."""
    return SentSong(
        id=song_id,
        recipient_name=recipient,
        youtube_url=url,
        message=message,
        timestamp=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def seeded_songs() -> list[SentSong]:
    """Three stored songs, newest first."""
    return [
        make_song(3, "Alex", "https://youtu.be/abc12345678", "for you", minutes_ago=1),
        make_song(2, "Sam", "https://www.youtube.com/watch?v=dQw4w9WgXcQ", minutes_ago=5),
        make_song(1, "alexandra", "not a link", minutes_ago=90),
    ]


@pytest.fixture
def fake_repository(seeded_songs) -> FakeSongRepository:
    """Fake repository pre-loaded with the seeded songs."""
    return FakeSongRepository(seeded_songs)
