"""The single page served at the site root."""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from sendthesong.api.dependencies import get_repository, get_title_service
from sendthesong.config import get_settings
from sendthesong.songs.controller import SongFeedController
from sendthesong.songs.models import Toast
from sendthesong.songs.preview import resolve_previews
from sendthesong.store.base import SongRepository
from sendthesong.web.shell import build_previews, render_page
from sendthesong.youtube.titles import TitleService

router = APIRouter(tags=["page"])


@router.get("/", response_class=HTMLResponse)
async def index(
    repository: SongRepository = Depends(get_repository),
    titles: TitleService = Depends(get_title_service),
):
    """
    Render the page with the most recent songs already in place.

    Live search and sharing then run over the ``/ws/feed`` websocket.
    """
    toasts: list[Toast] = []

    async def collect(toast: Toast) -> None:
        toasts.append(toast)

    controller = SongFeedController(
        repository, page_size=get_settings().feed_page_size, on_toast=collect
    )
    await controller.load_initial()

    previews = build_previews([controller.most_recent, *controller.displayed])
    await resolve_previews(previews.values(), titles)

    return HTMLResponse(render_page(controller, previews, toasts))
