"""Song repository over the hosted store's REST (PostgREST) interface."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from sendthesong.songs.models import SentSong, SentSongCreate

from .base import SongRepository, StoreError

logger = logging.getLogger(__name__)

TABLE = "sent_songs"
NEWEST_FIRST = "timestamp.desc,id.desc"


def _ilike_pattern(value: str) -> str:
    """Build a PostgREST ``ilike`` substring pattern from literal user input.

    ``%`` and ``_`` are backslash-escaped the same way the SQL backend escapes
    them. PostgREST rewrites every ``*`` to ``%`` before escaping applies, so a
    typed ``*`` cannot be matched literally; it becomes ``_`` and matches any one
    character instead.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"ilike.*{escaped.replace('*', '_')}*"


class SupabaseSongRepository(SongRepository):
    """Reads and writes the ``sent_songs`` table through PostgREST.

    Every request authenticates with the project's access key, sent both as
    ``apikey`` and as a bearer token.
    """

    def __init__(self, url: str, key: str, timeout: float = 15):
        if not url or not key:
            raise ValueError("Supabase URL and key are required for the supabase backend")
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{TABLE}"
        self._headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        self._timeout = timeout

    async def insert(self, new: SentSongCreate) -> SentSong:
        rows = await self._request(
            "POST",
            json=new.model_dump(by_alias=True),
            headers={"Prefer": "return=representation"},
        )
        if not isinstance(rows, list) or not rows:
            raise StoreError("Song store did not return the inserted row")
        song = self._parse(rows)[0]
        logger.info(f"Stored sent song id={song.id}")
        return song

    async def list_recent(self, limit: int) -> list[SentSong]:
        rows = await self._request(
            "GET", params={"select": "*", "order": NEWEST_FIRST, "limit": str(limit)}
        )
        return self._parse(rows)

    async def search_by_recipient(
        self, query: str, limit: int | None = None
    ) -> list[SentSong]:
        params = {
            "select": "*",
            "recipientName": _ilike_pattern(query),
            "order": NEWEST_FIRST,
        }
        if limit is not None:
            params["limit"] = str(limit)
        rows = await self._request("GET", params=params)
        return self._parse(rows)

    async def _request(
        self,
        method: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.request(
                    method,
                    self._endpoint,
                    params=params,
                    json=json,
                    headers={**self._headers, **(headers or {})},
                )
        except httpx.HTTPError as e:
            logger.error(f"Song store request failed: {e!r}")
            raise StoreError("Could not reach the song store") from e

        if r.status_code >= 400:
            detail = _error_message(r)
            logger.error(f"Song store returned {r.status_code}: {detail}")
            raise StoreError(detail)

        try:
            return r.json()
        except ValueError as e:
            raise StoreError("Song store returned an invalid response") from e

    @staticmethod
    def _parse(rows: Any) -> list[SentSong]:
        if not isinstance(rows, list):
            raise StoreError("Song store returned an invalid response")
        try:
            return [SentSong.model_validate(row) for row in rows]
        except ValidationError as e:
            raise StoreError("Song store returned a malformed row") from e


def _error_message(response: httpx.Response) -> str:
    """Pull PostgREST's ``message`` out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Song store returned HTTP {response.status_code}"
