"""SQLAlchemy models for Send the Song."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class SentSongRow(Base):
    """A shared song. Rows are append-only.

    Column names keep the camelCase used by the hosted store so both
    backends share one schema.
    """

    __tablename__ = "sent_songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_name: Mapped[str] = mapped_column("recipientName", String, index=True)
    youtube_url: Mapped[str] = mapped_column("youtubeUrl", String)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
