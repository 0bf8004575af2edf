"""YouTube Data API v3 client for looking up video titles."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class YouTubeClient:
    """Client for interacting with YouTube Data API v3.

    Title lookups never raise: any failure is logged and reported as ``None``
    so callers can fall back to a generic label.
    """

    BASE = "https://www.googleapis.com/youtube/v3"

    def __init__(self, api_key: str, base_url: str = BASE, timeout: float = 15):
        """Initialize the YouTube client with an API key.

        Args:
            api_key: YouTube Data API key; an empty key disables lookups
            base_url: API root, overridable for testing
            timeout: Per-request timeout in seconds
        """
        self._api_key = api_key
        self._base = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def resolve_title(self, video_id: str) -> str | None:
        """Fetch the title of a single video.

        A single attempt is made; there is no retry and no caching here.

        Args:
            video_id: 11-character YouTube video identifier

        Returns:
            The video title, or None if the key is missing, the request
            fails, or the response carries no title
        """
        if not self._api_key:
            return None

        params = {"part": "snippet", "id": video_id, "key": self._api_key}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.get(f"{self._base}/videos", params=params)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"YouTube API returned {e.response.status_code} for video {video_id}"
            )
            return None
        except httpx.HTTPError as e:
            logger.warning(f"YouTube API request failed for video {video_id}: {e!r}")
            return None
        except ValueError:
            logger.warning(f"YouTube API returned invalid JSON for video {video_id}")
            return None

        title = _first_title(data)
        if title is None:
            logger.info(f"No title available for video {video_id}")
        return title


def _first_title(data: Any) -> str | None:
    """Read ``items[0].snippet.title`` from a videos.list response."""
    if not isinstance(data, dict):
        return None
    items = data.get("items")
    if not isinstance(items, list) or not items:
        return None
    first = items[0]
    snippet = first.get("snippet") if isinstance(first, dict) else None
    if not isinstance(snippet, dict):
        return None
    title = snippet.get("title")
    return title if isinstance(title, str) and title else None
