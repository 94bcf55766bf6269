"""Conditional pagination over page fetchers.

Whether a next page *exists* is a property of the page metadata and is always
checked. Whether it is *worth fetching* is decided by a caller-supplied
predicate that inspects the page content, which lets callers bound cost (for
example, stop once events are older than a cutoff) on any listing that
exposes a next-page link.

Usage
-----
Fetch a user's feed until the last event of a page predates the cutoff:

>>> page = fetch_conditionally(
...     client,
...     "/users/{username}/events",
...     {"username": "octocat", "per_page": 100},
...     should_continue=CreatedSince(cutoff),
... )

"""

from __future__ import annotations

import dataclasses
import typing as typ

from .models import Page
from .observability import PaginationEventLogger, StopReason

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .client import PageFetcher

ContinuePredicate = typ.Callable[[Page], bool]


def merge_pages(left: Page, right: Page) -> Page:
    """Append ``right``'s events to ``left``'s, keeping ``right``'s metadata.

    Earlier metadata is discarded; event order is left then right, with no
    deduplication.
    """
    return Page(events=left.events + right.events, metadata=right.metadata)


@dataclasses.dataclass(frozen=True, slots=True)
class CreatedSince:
    """Continue while the last event on a page is not older than ``cutoff``.

    Only the final event is inspected. Feeds are returned newest first, so
    the last event is normally the oldest on the page; an empty page never
    continues.
    """

    cutoff: dt.datetime

    def __call__(self, page: Page) -> bool:
        """Return True when the page's last event is at or after the cutoff."""
        last = page.last_event
        if last is None:
            return False
        return last.created_at >= self.cutoff


def paginate(
    fetcher: PageFetcher,
    initial_page: Page,
    should_continue: ContinuePredicate,
    *,
    event_logger: PaginationEventLogger | None = None,
) -> Page:
    """Follow next-page links from ``initial_page`` while ``should_continue``.

    The predicate is evaluated once per page, before the next-page check.
    Pages are fetched strictly one at a time and merged in fetch order. A
    failing fetch propagates and no partial result is returned.
    """
    events_log = event_logger or PaginationEventLogger()
    result = current = initial_page
    pages = 1
    events_log.log_page_fetched(current, page_number=pages)

    while True:
        if not should_continue(current):
            reason = StopReason.PREDICATE
            break
        if not current.has_next:
            reason = StopReason.LAST_PAGE
            break
        current = fetcher.fetch_next(current)
        pages += 1
        events_log.log_page_fetched(current, page_number=pages)
        result = merge_pages(result, current)

    events_log.log_pagination_stopped(
        reason=reason, pages=pages, events=len(result.events)
    )
    return result


def fetch_conditionally(
    fetcher: PageFetcher,
    endpoint: str,
    params: cabc.Mapping[str, typ.Any] | None,
    *,
    should_continue: ContinuePredicate,
    event_logger: PaginationEventLogger | None = None,
) -> Page:
    """Fetch the first page of ``endpoint`` and paginate conditionally."""
    first = fetcher.fetch(endpoint, params)
    return paginate(fetcher, first, should_continue, event_logger=event_logger)
