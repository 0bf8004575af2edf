"""Live feed websocket: one controller and share dialog per browser tab."""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from sendthesong.api.dependencies import get_repository, get_title_service
from sendthesong.config import get_settings
from sendthesong.songs.composer import ShareComposer
from sendthesong.songs.controller import SongFeedController
from sendthesong.songs.models import Toast
from sendthesong.songs.preview import PreviewState, SongPreview
from sendthesong.songs.timefmt import format_timestamp
from sendthesong.store.base import SongRepository
from sendthesong.web.shell import build_previews
from sendthesong.youtube.titles import TitleService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


class LiveFeedSession:
    """Binds a feed controller and share composer to one websocket.

    Client messages:
        {"type": "query", "value": str}
        {"type": "open"} / {"type": "close"}
        {"type": "compose", "youtubeUrl": str, "recipientName": str, "message": str}

    Server messages: ``state``, ``title``, ``toast`` and ``composer``.
    """

    def __init__(
        self,
        websocket: WebSocket,
        repository: SongRepository,
        titles: TitleService,
        page_size: int = 10,
        debounce_seconds: float = 0.5,
    ):
        self.websocket = websocket
        self.titles = titles
        self.controller = SongFeedController(
            repository,
            page_size=page_size,
            debounce_seconds=debounce_seconds,
            on_change=self.push_state,
            on_toast=self.push_toast,
        )
        self.composer = ShareComposer(
            repository, controller=self.controller, on_toast=self.push_toast
        )
        self._send_lock = asyncio.Lock()
        self._title_tasks: set[asyncio.Task] = set()
        # Previews by URL for the lifetime of the connection
        self._previews: dict[str, SongPreview] = {}

    async def run(self) -> None:
        """Send the initial feed, then serve client messages until disconnect."""
        await self.controller.load_initial()
        await self.push_composer()
        while True:
            try:
                data = await self.websocket.receive_json()
            except ValueError:
                logger.warning("Ignoring malformed websocket message")
                continue
            await self.handle(data)

    async def handle(self, data: Any) -> None:
        if not isinstance(data, dict):
            logger.warning("Ignoring non-object websocket message")
            return

        kind = data.get("type")
        if kind == "query":
            await self.controller.set_query(str(data.get("value") or ""))
        elif kind == "open":
            self.composer.open()
            await self.push_composer()
        elif kind == "close":
            self.composer.close()
            await self.push_composer()
        elif kind == "compose":
            self.composer.open()
            self.composer.update(
                youtube_url=str(data.get("youtubeUrl") or ""),
                recipient_name=str(data.get("recipientName") or ""),
                message=str(data.get("message") or ""),
            )
            await self.composer.submit()
            await self.push_composer()
        else:
            logger.warning(f"Ignoring unknown websocket message type: {kind!r}")

    async def push_state(self) -> None:
        controller = self.controller
        visible = build_previews([controller.most_recent, *controller.displayed])
        fresh = [p for url, p in visible.items() if url not in self._previews]
        for preview in fresh:
            self._previews[preview.url] = preview

        state = controller.snapshot()
        for payload, song in zip(state["displayed"], controller.displayed):
            payload["relativeTime"] = format_timestamp(song.timestamp)
        state["previews"] = {url: self._previews[url].to_dict() for url in visible}
        await self._send({"type": "state", **state})

        for preview in fresh:
            if preview.state is PreviewState.RESOLVING:
                task = asyncio.create_task(self._resolve_title(preview))
                self._title_tasks.add(task)
                task.add_done_callback(self._title_tasks.discard)

    async def push_toast(self, toast: Toast) -> None:
        await self._send({"type": "toast", **toast.model_dump()})

    async def push_composer(self) -> None:
        await self._send({"type": "composer", **self.composer.to_dict()})

    async def close(self) -> None:
        await self.controller.close()
        for task in list(self._title_tasks):
            task.cancel()
        await asyncio.gather(*self._title_tasks, return_exceptions=True)

    async def _resolve_title(self, preview: SongPreview) -> None:
        await preview.resolve(self.titles)
        await self._send(
            {"type": "title", "videoId": preview.video_id, "preview": preview.to_dict()}
        )

    async def _send(self, message: dict[str, Any]) -> None:
        async with self._send_lock:
            await self.websocket.send_json(message)


@router.websocket("/ws/feed")
async def feed_socket(
    websocket: WebSocket,
    repository: SongRepository = Depends(get_repository),
    titles: TitleService = Depends(get_title_service),
):
    """Serve one live feed session for the lifetime of the connection."""
    settings = get_settings()
    await websocket.accept()
    session = LiveFeedSession(
        websocket,
        repository,
        titles,
        page_size=settings.feed_page_size,
        debounce_seconds=settings.search_debounce_seconds,
    )
    try:
        await session.run()
    except WebSocketDisconnect:
        logger.info("Live feed client disconnected")
    finally:
        await session.close()
