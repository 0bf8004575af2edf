"""Tests for the shared title cache and title service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from sendthesong.config import Settings
from sendthesong.youtube.client import YouTubeClient
from sendthesong.youtube.titles import (
    MemoryTitleCache,
    RedisTitleCache,
    TitleService,
    get_title_cache,
)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock(spec=Redis)
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock()
    return redis


@pytest.fixture
def mock_client():
    client = MagicMock(spec=YouTubeClient)
    client.resolve_title = AsyncMock(return_value="Never Gonna Give You Up")
    return client


class TestMemoryTitleCache:
    """Tests for the in-process LRU cache."""

    @pytest.mark.asyncio
    async def test_get_and_set(self):
        cache = MemoryTitleCache(max_entries=4)
        assert await cache.get("dQw4w9WgXcQ") is None

        await cache.set("dQw4w9WgXcQ", "Title")
        assert await cache.get("dQw4w9WgXcQ") == "Title"

    @pytest.mark.asyncio
    async def test_evicts_least_recently_used(self):
        """The oldest untouched entry is evicted once the cache is full."""
        cache = MemoryTitleCache(max_entries=2)
        await cache.set("aaaaaaaaaaa", "A")
        await cache.set("bbbbbbbbbbb", "B")

        # Touch A so B becomes least recently used
        await cache.get("aaaaaaaaaaa")
        await cache.set("ccccccccccc", "C")

        assert len(cache) == 2
        assert await cache.get("bbbbbbbbbbb") is None
        assert await cache.get("aaaaaaaaaaa") == "A"
        assert await cache.get("ccccccccccc") == "C"

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            MemoryTitleCache(max_entries=0)


class TestRedisTitleCache:
    """Tests for the Redis-backed cache."""

    @pytest.mark.asyncio
    async def test_set_uses_ttl(self, mock_redis):
        cache = RedisTitleCache(mock_redis, ttl_seconds=600)
        await cache.set("dQw4w9WgXcQ", "Title")

        mock_redis.setex.assert_called_once_with("sts:title:dQw4w9WgXcQ", 600, "Title")

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, mock_redis):
        mock_redis.get.return_value = "Título".encode()
        cache = RedisTitleCache(mock_redis)

        assert await cache.get("dQw4w9WgXcQ") == "Título"
        mock_redis.get.assert_called_once_with("sts:title:dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_outage_degrades_to_miss(self, mock_redis):
        """Redis errors are treated as cache misses."""
        mock_redis.get.side_effect = RedisConnectionError("down")
        mock_redis.setex.side_effect = RedisConnectionError("down")
        cache = RedisTitleCache(mock_redis)

        assert await cache.get("dQw4w9WgXcQ") is None
        await cache.set("dQw4w9WgXcQ", "Title")


class TestGetTitleCache:
    def test_memory_backend(self):
        settings = Settings(title_cache_backend="memory", title_cache_max_entries=7)
        cache = get_title_cache(settings)

        assert isinstance(cache, MemoryTitleCache)
        assert cache.max_entries == 7

    def test_redis_backend(self, mock_redis):
        settings = Settings(title_cache_backend="redis", title_cache_ttl_seconds=60)
        cache = get_title_cache(settings, mock_redis)

        assert isinstance(cache, RedisTitleCache)
        assert cache.redis is mock_redis
        assert cache.ttl_seconds == 60


class TestTitleService:
    """Tests for cached, de-duplicated title resolution."""

    @pytest.mark.asyncio
    async def test_second_lookup_hits_cache(self, mock_client):
        service = TitleService(mock_client, MemoryTitleCache())

        assert await service.resolve("dQw4w9WgXcQ") == "Never Gonna Give You Up"
        assert await service.resolve("dQw4w9WgXcQ") == "Never Gonna Give You Up"

        mock_client.resolve_title.assert_called_once_with("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_request(self, mock_client):
        """The same video on several cards is fetched once."""
        release = asyncio.Event()

        async def slow_title(video_id):
            await release.wait()
            return "Shared"

        mock_client.resolve_title = AsyncMock(side_effect=slow_title)
        service = TitleService(mock_client, MemoryTitleCache())

        lookups = [asyncio.create_task(service.resolve("dQw4w9WgXcQ")) for _ in range(3)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*lookups)

        assert results == ["Shared", "Shared", "Shared"]
        assert mock_client.resolve_title.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_title_is_not_cached(self, mock_client):
        """A failed lookup is retried on the next call."""
        mock_client.resolve_title = AsyncMock(side_effect=[None, "Later"])
        cache = MemoryTitleCache()
        service = TitleService(mock_client, cache)

        assert await service.resolve("dQw4w9WgXcQ") is None
        assert len(cache) == 0
        assert await service.resolve("dQw4w9WgXcQ") == "Later"
        assert mock_client.resolve_title.call_count == 2
