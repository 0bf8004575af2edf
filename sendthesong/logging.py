"""Logging configuration for Send the Song.

Every record leaving the root handler is stamped with the active store and
title-cache backends, so log lines from a Supabase deployment can be told
apart from a local SQL one without reading the config.
"""

import json
import logging
import sys

from sendthesong.config import Settings, get_settings

CONTEXT_FIELDS = ("store_backend", "title_cache")


class BackendContextFilter(logging.Filter):
    """Attach the configured backends to each record."""

    def __init__(self, settings: Settings):
        super().__init__()
        self.context = {
            "store_backend": settings.store_backend,
            "title_cache": settings.title_cache_backend,
        }

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in prod."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(settings: Settings | None = None) -> None:
    """Route all logging to stdout: JSON in prod, a readable line in dev."""
    settings = settings or get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(BackendContextFilter(settings))

    if settings.env == "prod":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s [%(store_backend)s] %(name)s: %(message)s"
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    # httpx logs every request URL at INFO, which would leak the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
