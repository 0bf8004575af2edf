"""Feed state for one page view: recent songs, search and submissions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from sendthesong.store.base import SongRepository, StoreError

from .models import SentSong, Toast, fetch_error_toast

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], Awaitable[None]]
ToastCallback = Callable[[Toast], Awaitable[None]]


class SongFeedController:
    """Owns the full feed, the search query and the displayed list.

    While the query is empty the displayed list *is* the feed. A non-empty
    query triggers a debounced recipient search; each search is numbered and
    only the newest one may update the displayed list, so a slow response
    can never overwrite a newer result. In-flight requests are not aborted.
    """

    def __init__(
        self,
        repository: SongRepository,
        *,
        page_size: int = 10,
        debounce_seconds: float = 0.5,
        on_change: ChangeCallback | None = None,
        on_toast: ToastCallback | None = None,
    ):
        self.repository = repository
        self.page_size = page_size
        self.debounce_seconds = debounce_seconds
        self.on_change = on_change
        self.on_toast = on_toast

        self.feed: list[SentSong] = []
        self.query = ""
        self.loading = False
        self._results: list[SentSong] = []
        self._seq = 0
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def displayed(self) -> list[SentSong]:
        return self._results if self.query else self.feed

    @property
    def most_recent(self) -> SentSong | None:
        return self.feed[0] if self.feed else None

    async def load_initial(self) -> None:
        """Load the most recent page of songs, newest first."""
        try:
            self.feed = await self.repository.list_recent(self.page_size)
        except StoreError as e:
            self.feed = []
            await self._toast(fetch_error_toast(str(e)))
        await self._changed()

    async def set_query(self, query: str) -> None:
        """Record a new search query and (re)start the debounce timer."""
        if query == self.query:
            return

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if query and not self.query:
            # Keep showing the current list until the first result arrives
            self._results = list(self.feed)

        self.query = query
        self._seq += 1

        if query:
            self._timer = self._spawn(self._debounced_search(query, self._seq))
        else:
            self.loading = False
        await self._changed()

    async def add_submitted(self, song: SentSong) -> None:
        """Put a freshly stored song at the head of the feed without re-fetching."""
        self.feed = [song, *self.feed]
        await self._changed()

    async def settle(self) -> None:
        """Wait until no debounce timer or search is pending."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel pending work; responses still in flight are ignored."""
        self._seq += 1
        for task in list(self._tasks):
            task.cancel()
        await self.settle()
        self._timer = None

    def snapshot(self) -> dict[str, Any]:
        most_recent = self.most_recent
        return {
            "query": self.query,
            "loading": self.loading,
            "feed": [_dump(s) for s in self.feed],
            "displayed": [_dump(s) for s in self.displayed],
            "mostRecent": _dump(most_recent) if most_recent else None,
        }

    async def _debounced_search(self, query: str, seq: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self._timer is asyncio.current_task():
            # Timer fired; from here on the request runs to completion
            self._timer = None

        self.loading = True
        await self._changed()

        try:
            songs = await self.repository.search_by_recipient(query)
        except StoreError as e:
            if seq != self._seq:
                logger.info(f"Ignoring failure of superseded search for {query!r}")
                return
            self.loading = False
            await self._toast(fetch_error_toast(str(e)))
            await self._changed()
            return

        if seq != self._seq:
            logger.debug(f"Discarding stale search result for {query!r}")
            return

        self._results = songs
        self.loading = False
        await self._changed()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Feed background task failed", exc_info=task.exception())

    async def _changed(self) -> None:
        if self.on_change is not None:
            await self.on_change()

    async def _toast(self, toast: Toast) -> None:
        if self.on_toast is not None:
            await self.on_toast(toast)


def _dump(song: SentSong) -> dict[str, Any]:
    return song.model_dump(mode="json", by_alias=True)
