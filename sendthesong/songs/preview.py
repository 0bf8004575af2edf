"""Link preview for a shared song: thumbnail, title and link-out."""

import asyncio
from collections.abc import Iterable
from enum import Enum
from typing import Any

from sendthesong.youtube.links import extract_video_id, thumbnail_url
from sendthesong.youtube.titles import TitleService

FALLBACK_LABEL = "YouTube Video"


class PreviewState(str, Enum):
    IDLE = "idle"  # not a recognisable video link
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FALLBACK = "fallback"


class SongPreview:
    """Renderable preview of one shared link.

    The starting state is decided from the URL alone: links without a video
    id stay IDLE and are shown as plain text links, everything else starts
    RESOLVING until :meth:`resolve` has asked the title service.
    """

    def __init__(self, url: str):
        self.url = url
        self.video_id = extract_video_id(url)
        self.title: str | None = None
        self.state = PreviewState.IDLE if self.video_id is None else PreviewState.RESOLVING

    @property
    def loading(self) -> bool:
        return self.state is PreviewState.RESOLVING

    @property
    def label(self) -> str:
        if self.state is PreviewState.IDLE:
            return self.url
        return self.title or FALLBACK_LABEL

    @property
    def thumbnail(self) -> str | None:
        return thumbnail_url(self.video_id) if self.video_id else None

    @property
    def href(self) -> str:
        return self.url

    async def resolve(self, titles: TitleService) -> PreviewState:
        """Look up the title once; later calls keep the settled state."""
        if self.state is not PreviewState.RESOLVING:
            return self.state

        title = await titles.resolve(self.video_id)
        if title is not None:
            self.title = title
            self.state = PreviewState.RESOLVED
        else:
            self.state = PreviewState.FALLBACK
        return self.state

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "videoId": self.video_id,
            "state": self.state.value,
            "title": self.title,
            "label": self.label,
            "thumbnail": self.thumbnail,
            "href": self.href,
            "loading": self.loading,
        }


async def resolve_previews(previews: Iterable[SongPreview], titles: TitleService) -> None:
    """Resolve a batch of previews concurrently."""
    await asyncio.gather(*(p.resolve(titles) for p in previews))
