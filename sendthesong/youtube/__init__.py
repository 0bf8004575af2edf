"""YouTube link parsing and metadata lookup."""

from .client import YouTubeClient
from .links import canonical_url, extract_video_id, short_url, thumbnail_url
from .titles import (
    MemoryTitleCache,
    RedisTitleCache,
    TitleCache,
    TitleService,
    get_title_cache,
)

__all__ = [
    "MemoryTitleCache",
    "RedisTitleCache",
    "TitleCache",
    "TitleService",
    "YouTubeClient",
    "canonical_url",
    "extract_video_id",
    "get_title_cache",
    "short_url",
    "thumbnail_url",
]
