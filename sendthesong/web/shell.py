"""Page layout rendering utilities."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sendthesong.songs.controller import SongFeedController
from sendthesong.songs.models import SentSong, Toast
from sendthesong.songs.preview import SongPreview
from sendthesong.songs.timefmt import format_timestamp

_WEB_DIR = Path(__file__).resolve().parent
_TEMPLATE_DIR = _WEB_DIR / "templates"
STATIC_DIR = _WEB_DIR / "static"

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html", "jinja")),
)
_env.filters["relative_time"] = format_timestamp


def build_previews(songs: Iterable[SentSong | None]) -> dict[str, SongPreview]:
    """One preview per distinct link among the given songs."""
    previews: dict[str, SongPreview] = {}
    for song in songs:
        if song is not None and song.youtube_url not in previews:
            previews[song.youtube_url] = SongPreview(song.youtube_url)
    return previews


def render_page(
    controller: SongFeedController,
    previews: dict[str, SongPreview],
    toasts: list[Toast] | None = None,
) -> str:
    """Render the single page: header, hero, feed, call to action and footer."""
    template = _env.get_template("index.html.jinja")
    return template.render(
        query=controller.query,
        loading=controller.loading,
        songs=controller.displayed,
        most_recent=controller.most_recent,
        previews=previews,
        toasts=toasts or [],
    )
