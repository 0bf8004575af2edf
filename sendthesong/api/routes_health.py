"""Liveness and readiness probes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sendthesong.api.dependencies import get_repository
from sendthesong.store.base import SongRepository, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """The process is up."""
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(repository: SongRepository = Depends(get_repository)):
    """
    Readiness check endpoint.

    Reads a single song so a load balancer stops routing traffic while the
    song store is unreachable.

    Returns:
        ``{"ok": true}``, or 503 with ``{"ok": false}`` if the store fails
    """
    try:
        await repository.list_recent(1)
    except StoreError as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(status_code=503, content={"ok": False})
    return {"ok": True}
