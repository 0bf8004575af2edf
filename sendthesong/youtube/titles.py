"""Process-wide video title cache shared by every song preview."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import OrderedDict

from redis.asyncio import Redis
from redis.exceptions import RedisError

from sendthesong.config import Settings

from .client import YouTubeClient

logger = logging.getLogger(__name__)


class TitleCache(ABC):
    """Abstract store for resolved video titles, keyed by video id."""

    @abstractmethod
    async def get(self, video_id: str) -> str | None:
        """Return the cached title, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, video_id: str, title: str) -> None:
        """Remember a resolved title."""
        pass


class MemoryTitleCache(TitleCache):
    """Bounded in-process LRU cache."""

    def __init__(self, max_entries: int = 1024):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, str] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, video_id: str) -> str | None:
        title = self._entries.get(video_id)
        if title is not None:
            self._entries.move_to_end(video_id)
        return title

    async def set(self, video_id: str, title: str) -> None:
        self._entries[video_id] = title
        self._entries.move_to_end(video_id)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)


def _key(video_id: str) -> str:
    """Generate Redis key for a video's cached title."""
    return f"sts:title:{video_id}"


class RedisTitleCache(TitleCache):
    """Redis-backed cache; entries expire after ``ttl_seconds``.

    Redis outages degrade to cache misses rather than failing the lookup.
    """

    def __init__(self, redis: Redis, ttl_seconds: int = 86400):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def get(self, video_id: str) -> str | None:
        try:
            raw = await self.redis.get(_key(video_id))
        except RedisError:
            logger.warning(f"Redis unavailable reading title for {video_id}", exc_info=True)
            return None
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes) else raw

    async def set(self, video_id: str, title: str) -> None:
        try:
            await self.redis.setex(_key(video_id), self.ttl_seconds, title)
        except RedisError:
            logger.warning(f"Redis unavailable caching title for {video_id}", exc_info=True)


def get_title_cache(settings: Settings, redis: Redis | None = None) -> TitleCache:
    """
    Factory function to get the configured title cache.

    Args:
        settings: Application settings
        redis: Optional Redis client; created from ``redis_url`` if omitted

    Returns:
        Configured title cache instance
    """
    if settings.title_cache_backend == "memory":
        return MemoryTitleCache(settings.title_cache_max_entries)
    elif settings.title_cache_backend == "redis":
        if redis is None:
            redis = Redis.from_url(settings.redis_url, decode_responses=False)
        return RedisTitleCache(redis, settings.title_cache_ttl_seconds)
    else:
        raise ValueError(f"Unknown title cache backend: {settings.title_cache_backend}")


class TitleService:
    """Resolves video titles through the cache, fetching each id at most once at a time.

    Concurrent callers asking for the same id await the same in-flight
    request. Only successful lookups are cached, so a failed id is retried
    on the next call.
    """

    def __init__(self, client: YouTubeClient, cache: TitleCache):
        self.client = client
        self.cache = cache
        self._inflight: dict[str, asyncio.Task] = {}

    async def resolve(self, video_id: str) -> str | None:
        cached = await self.cache.get(video_id)
        if cached is not None:
            return cached

        task = self._inflight.get(video_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(video_id))
            self._inflight[video_id] = task
            task.add_done_callback(lambda _: self._inflight.pop(video_id, None))

        # One caller going away must not cancel the lookup for the others
        return await asyncio.shield(task)

    async def _fetch(self, video_id: str) -> str | None:
        title = await self.client.resolve_title(video_id)
        if title is not None:
            await self.cache.set(video_id, title)
        return title
