"""Structured log events for GitHub page fetching.

Each request made while walking a paginated listing is logged with its page
metadata, and the paginator logs why it stopped. Lines follow the
``[event.type] key=value`` layout so log aggregators can parse them.
"""

from __future__ import annotations

import enum
import typing as typ

from myweek.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from .models import Page

logger = get_logger(__name__)


class PaginationEventType(enum.StrEnum):
    """Structured log event types for paginated fetches."""

    PAGE_FETCHED = "github.page.fetched"
    PAGINATION_STOPPED = "github.pagination.stopped"


class StopReason(enum.StrEnum):
    """Why the conditional paginator returned."""

    PREDICATE = "predicate"
    LAST_PAGE = "last_page"


class PaginationEventLogger:
    """Emit structured pagination events via femtologging."""

    def log_page_fetched(self, page: Page, *, page_number: int) -> None:
        """Log one fetched page with its rate-limit headroom."""
        rate_limit = page.metadata.rate_limit
        remaining = rate_limit.remaining if rate_limit is not None else None
        log_info(
            logger,
            "[%s] page=%d url=%s status=%d events=%d has_next=%s "
            "rate_limit_remaining=%s",
            PaginationEventType.PAGE_FETCHED,
            page_number,
            page.metadata.url,
            page.metadata.status_code,
            len(page.events),
            page.has_next,
            remaining,
        )

    def log_pagination_stopped(
        self,
        *,
        reason: StopReason,
        pages: int,
        events: int,
    ) -> None:
        """Log the end of a paginated walk."""
        log_info(
            logger,
            "[%s] reason=%s pages=%d events=%d",
            PaginationEventType.PAGINATION_STOPPED,
            reason,
            pages,
            events,
        )
