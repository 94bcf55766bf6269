"""Retrieval of a user's public GitHub activity feed."""

from __future__ import annotations

import typing as typ

from .pagination import CreatedSince, fetch_conditionally

if typ.TYPE_CHECKING:
    import datetime as dt

    from .client import PageFetcher
    from .models import Page
    from .observability import PaginationEventLogger

USER_EVENTS_ENDPOINT = "/users/{username}/events"

# GitHub serves at most 100 events per page.
MAX_PER_PAGE = 100


def fetch_user_events(
    fetcher: PageFetcher,
    username: str,
    *,
    since: dt.datetime,
    per_page: int = MAX_PER_PAGE,
    event_logger: PaginationEventLogger | None = None,
) -> Page:
    """Return the merged feed pages for ``username`` reaching back to ``since``.

    Pages are requested until one ends with an event older than ``since`` or
    GitHub reports no further page. The last page may therefore contain
    events before ``since``; drop them with the event filter.
    """
    if not username.strip():
        msg = "username must be non-empty"
        raise ValueError(msg)
    if not 1 <= per_page <= MAX_PER_PAGE:
        msg = f"per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}"
        raise ValueError(msg)
    return fetch_conditionally(
        fetcher,
        USER_EVENTS_ENDPOINT,
        {"username": username, "per_page": per_page},
        should_continue=CreatedSince(since),
        event_logger=event_logger,
    )
