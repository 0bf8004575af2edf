"""The share dialog: collects a link, a recipient and an optional message."""

import logging
from typing import Any

from pydantic import ValidationError

from sendthesong.store.base import SongRepository, StoreError

from .controller import SongFeedController, ToastCallback
from .models import (
    SentSong,
    SentSongCreate,
    Toast,
    missing_fields_toast,
    send_error_toast,
    sent_toast,
)

logger = logging.getLogger(__name__)


class ShareComposer:
    """Form state and submission flow for sharing a song.

    Failed submissions leave the dialog open with the entered values intact
    so the user can correct them or simply try again.
    """

    def __init__(
        self,
        repository: SongRepository,
        controller: SongFeedController | None = None,
        on_toast: ToastCallback | None = None,
    ):
        self.repository = repository
        self.controller = controller
        self.on_toast = on_toast
        self.is_open = False
        self.youtube_url = ""
        self.recipient_name = ""
        self.message = ""

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def update(
        self,
        youtube_url: str | None = None,
        recipient_name: str | None = None,
        message: str | None = None,
    ) -> None:
        if youtube_url is not None:
            self.youtube_url = youtube_url
        if recipient_name is not None:
            self.recipient_name = recipient_name
        if message is not None:
            self.message = message

    def clear(self) -> None:
        self.youtube_url = ""
        self.recipient_name = ""
        self.message = ""

    async def submit(self) -> SentSong | None:
        """
        Validate and persist the form.

        Returns:
            The stored song, or None if validation or the write failed
        """
        try:
            new = SentSongCreate(
                youtube_url=self.youtube_url,
                recipient_name=self.recipient_name,
                message=self.message,
            )
        except ValidationError:
            await self._toast(missing_fields_toast())
            return None

        try:
            song = await self.repository.insert(new)
        except StoreError:
            logger.warning(f"Could not send song to {new.recipient_name!r}")
            await self._toast(send_error_toast())
            return None

        self.close()
        self.clear()
        if self.controller is not None:
            await self.controller.add_submitted(song)
        await self._toast(sent_toast(new.recipient_name))
        return song

    def to_dict(self) -> dict[str, Any]:
        return {
            "isOpen": self.is_open,
            "youtubeUrl": self.youtube_url,
            "recipientName": self.recipient_name,
            "message": self.message,
        }

    async def _toast(self, toast: Toast) -> None:
        if self.on_toast is not None:
            await self.on_toast(toast)
