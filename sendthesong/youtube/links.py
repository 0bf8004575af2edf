"""Pure helpers for recognising YouTube links and building YouTube URLs."""

import re
from urllib.parse import parse_qs, urlsplit

VIDEO_ID_LENGTH = 11

# Group 7 holds the candidate id for youtu.be/, /v/, /u/<n>/, embed/ and watch? forms
_LINK_PATTERN = re.compile(
    r"^.*((youtu\.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*"
)


def extract_video_id(url: str | None) -> str | None:
    """Extract the 11-character video identifier from a YouTube URL.

    Supports:
    - https://youtu.be/VIDEO_ID
    - https://www.youtube.com/v/VIDEO_ID
    - https://www.youtube.com/u/1/VIDEO_ID
    - https://www.youtube.com/embed/VIDEO_ID
    - https://www.youtube.com/watch?v=VIDEO_ID
    - https://www.youtube.com/watch?feature=share&v=VIDEO_ID

    Args:
        url: Arbitrary text, usually a URL pasted by a user

    Returns:
        The video identifier, or None if the text does not name a video
    """
    if not url:
        return None

    match = _LINK_PATTERN.match(url)
    if not match:
        return None

    token = match.group(7)
    if len(token) != VIDEO_ID_LENGTH and match.group(6):
        # watch?foo=bar&v=ID puts other parameters in front of v=
        token = _query_video_id(url) or token

    return token if len(token) == VIDEO_ID_LENGTH else None


def _query_video_id(url: str) -> str | None:
    try:
        query = urlsplit(url).query
    except ValueError:
        # Malformed netloc, e.g. an unbalanced IPv6 bracket
        return None
    values = parse_qs(query).get("v")
    return values[0] if values else None


def canonical_url(video_id: str) -> str:
    """Build the canonical watch URL for a video."""
    return f"https://www.youtube.com/watch?v={video_id}"


def short_url(video_id: str) -> str:
    """Build the youtu.be short link for a video."""
    return f"https://youtu.be/{video_id}"


def thumbnail_url(video_id: str) -> str:
    """Build the static thumbnail image URL for a video."""
    return f"https://img.youtube.com/vi/{video_id}/default.jpg"
