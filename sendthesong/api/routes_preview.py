"""Link preview endpoint for the Send the Song API."""

from fastapi import APIRouter, Depends, Query

from sendthesong.api.dependencies import get_title_service
from sendthesong.songs.preview import SongPreview
from sendthesong.youtube.titles import TitleService

router = APIRouter(prefix="/api/preview", tags=["preview"])


@router.get("")
async def preview_link(
    url: str = Query(description="Link as shared by the user"),
    titles: TitleService = Depends(get_title_service),
):
    """
    Resolve the preview for a shared link.

    Links that do not name a YouTube video come back in the ``idle`` state
    with no thumbnail; no title lookup is attempted for them.
    """
    preview = SongPreview(url)
    await preview.resolve(titles)
    return preview.to_dict()
