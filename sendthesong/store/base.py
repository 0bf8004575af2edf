"""Repository interface for shared songs."""

from abc import ABC, abstractmethod

from sendthesong.songs.models import SentSong, SentSongCreate


class StoreError(Exception):
    """Raised when the song store cannot complete a read or write."""

    pass


class SongRepository(ABC):
    """Narrow persistence interface: append one song, list recent, search by name."""

    @abstractmethod
    async def insert(self, new: SentSongCreate) -> SentSong:
        """
        Persist a new song.

        Args:
            new: Validated submission; id and timestamp are assigned by the store

        Returns:
            The stored song, including its server-assigned id and timestamp

        Raises:
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def list_recent(self, limit: int) -> list[SentSong]:
        """
        List the most recently sent songs, newest first.

        Raises:
            StoreError: If the read fails
        """
        pass

    @abstractmethod
    async def search_by_recipient(
        self, query: str, limit: int | None = None
    ) -> list[SentSong]:
        """
        Case-insensitive substring search on recipient name, newest first.

        Raises:
            StoreError: If the read fails
        """
        pass
