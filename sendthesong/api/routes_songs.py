"""Song sharing endpoints for the Send the Song API."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from sendthesong.api.dependencies import get_repository
from sendthesong.config import get_settings
from sendthesong.songs.models import SentSong, SentSongCreate
from sendthesong.store.base import SongRepository, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/songs", tags=["songs"])


@router.get("", response_model=list[SentSong])
async def list_recent_songs(
    limit: int | None = Query(default=None, ge=1, le=50, description="Items (1-50)"),
    repository: SongRepository = Depends(get_repository),
):
    """
    List the most recently sent songs, newest first.

    Query Parameters:
        - limit: Number of songs (default: the configured feed page size)
    """
    try:
        return await repository.list_recent(limit or get_settings().feed_page_size)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"Error fetching songs: {e}")


@router.get("/search", response_model=list[SentSong])
async def search_songs(
    recipient: str = Query(description="Substring of the recipient's name"),
    repository: SongRepository = Depends(get_repository),
):
    """
    Search songs by recipient name (case-insensitive substring), newest first.

    Raises:
        HTTPException: 400 if recipient is blank, 502 if the store fails
    """
    if not recipient.strip():
        raise HTTPException(status_code=400, detail="recipient cannot be empty")

    try:
        return await repository.search_by_recipient(recipient)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"Error fetching songs: {e}")


@router.post("", status_code=201, response_model=SentSong)
async def share_song(
    body: SentSongCreate,
    repository: SongRepository = Depends(get_repository),
):
    """
    Share a song anonymously.

    The URL and recipient name must be non-empty after trimming; blank values
    are rejected with 422 before anything is stored.

    Returns:
        The stored song, including its server-assigned id and timestamp

    Raises:
        HTTPException: 502 if the store rejects the write
    """
    try:
        song = await repository.insert(body)
    except StoreError:
        raise HTTPException(
            status_code=502,
            detail="There was a problem sending your song. Try again.",
        )

    logger.info(f"Song shared with recipient_len={len(song.recipient_name)}")
    return song
