"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def parse_github_datetime(value: str) -> dt.datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware UTC datetime.

    Raises
    ------
    ValueError
        If the value is not ISO-8601 or carries no timezone.

    """
    parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        msg = f"GitHub datetime missing timezone: {value}"
        raise ValueError(msg)
    return parsed.astimezone(dt.UTC)


def window_cutoff(window_days: int, *, now: dt.datetime) -> dt.datetime:
    """Return midnight UTC of the day ``window_days`` before ``now``.

    Examples
    --------
    >>> window_cutoff(7, now=dt.datetime(2024, 7, 8, 15, 30, tzinfo=dt.UTC))
    datetime.datetime(2024, 7, 1, 0, 0, tzinfo=datetime.timezone.utc)

    """
    if now.tzinfo is None:
        msg = "now must be timezone-aware"
        raise ValueError(msg)
    day = now.astimezone(dt.UTC).date() - dt.timedelta(days=window_days)
    return dt.datetime.combine(day, dt.time.min, tzinfo=dt.UTC)
