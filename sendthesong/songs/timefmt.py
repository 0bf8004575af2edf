"""Relative time display for feed cards."""

from datetime import datetime, timezone


def format_timestamp(ts: datetime | None, now: datetime | None = None) -> str:
    """Render a timestamp relative to ``now``.

    Anything a day old or more is shown as a calendar date (M/D/YYYY).
    Naive datetimes are taken to be UTC, which is what the store returns.
    """
    if ts is None:
        return "just now"
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - ts).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days >= 1:
        return f"{ts.month}/{ts.day}/{ts.year}"
    elif hours >= 1:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    elif minutes >= 1:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    else:
        return "a few seconds ago"
