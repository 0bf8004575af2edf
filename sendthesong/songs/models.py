"""Pydantic models for shared songs and user-facing notifications."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SentSong(BaseModel):
    """A song shared with a recipient, as stored."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    recipient_name: str = Field(alias="recipientName")
    youtube_url: str = Field(alias="youtubeUrl")
    message: str = ""
    timestamp: datetime | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, v):
        return "" if v is None else v


class SentSongCreate(BaseModel):
    """Submission payload for a new song; id and timestamp belong to the store."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    youtube_url: str = Field(alias="youtubeUrl", min_length=1)
    recipient_name: str = Field(alias="recipientName", min_length=1)
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, v):
        return "" if v is None else v


class Toast(BaseModel):
    """Transient notification shown to the user."""

    title: str
    description: str = ""
    variant: Literal["default", "destructive"] = "default"


def missing_fields_toast() -> Toast:
    return Toast(
        title="Missing information",
        description="Please enter a YouTube URL and a recipient name",
        variant="destructive",
    )


def fetch_error_toast(detail: str) -> Toast:
    return Toast(title="Error fetching songs", description=detail, variant="destructive")


def send_error_toast() -> Toast:
    return Toast(
        title="Error",
        description="There was a problem sending your song. Try again.",
        variant="destructive",
    )


def sent_toast(recipient_name: str) -> Toast:
    return Toast(
        title="Song sent!",
        description=f"Your song was sent to {recipient_name} anonymously.",
    )
