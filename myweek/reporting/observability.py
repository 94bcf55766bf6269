"""Emit structured observability events for summary runs.

This module defines event identifiers, error categorisation and a logger
wrapper used by :func:`myweek.reporting.service.run_weekly_summary` to emit
start, delivery, success and failure telemetry.

Usage
-----
>>> event_logger = SummaryEventLogger()
>>> event_logger.log_run_started(username="octocat", cutoff=cutoff)

"""

from __future__ import annotations

import enum
import typing as typ

from myweek.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
    MalformedEventError,
)
from myweek.github.rules import ExclusionRuleError
from myweek.logging import get_logger, log_error, log_info

from .errors import ConfigError, DeliveryError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .sink import DeliveryResult

logger = get_logger(__name__)

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class SummaryEventType(enum.StrEnum):
    """Structured log event types for summary runs."""

    RUN_STARTED = "summary.run.started"
    RUN_COMPLETED = "summary.run.completed"
    RUN_FAILED = "summary.run.failed"
    DELIVERY_COMPLETED = "summary.delivery.completed"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    DELIVERY = "delivery"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (MalformedEventError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (ConfigError, ErrorCategory.CONFIGURATION),
    (ExclusionRuleError, ErrorCategory.CONFIGURATION),
    (DeliveryError, ErrorCategory.DELIVERY),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes.

    Returns:
        ErrorCategory indicating the type of failure for alert routing.

    """
    if isinstance(exc, GitHubRateLimitError):
        return ErrorCategory.RATE_LIMITED

    # No status code means the request never got a response.
    if isinstance(exc, GitHubAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class SummaryEventLogger:
    """Emit structured summary run events via femtologging."""

    def log_run_started(self, *, username: str, cutoff: dt.datetime) -> None:
        """Log the start of a run for one account and cutoff."""
        log_info(
            logger,
            "[%s] username=%s cutoff=%s",
            SummaryEventType.RUN_STARTED,
            username,
            cutoff.isoformat(),
        )

    def log_run_completed(
        self,
        *,
        username: str,
        events_fetched: int,
        events_kept: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a successful run with its event counts."""
        log_info(
            logger,
            "[%s] username=%s events_fetched=%d events_kept=%d duration_seconds=%.3f",
            SummaryEventType.RUN_COMPLETED,
            username,
            events_fetched,
            events_kept,
            duration.total_seconds(),
        )

    def log_run_failed(
        self,
        *,
        username: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed run with error categorization."""
        log_error(
            logger,
            "[%s] username=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            SummaryEventType.RUN_FAILED,
            username,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_delivery_completed(self, result: DeliveryResult) -> None:
        """Log a delivery accepted by its sink."""
        log_info(
            logger,
            "[%s] destination=%s message_id=%s",
            SummaryEventType.DELIVERY_COMPLETED,
            result.destination,
            result.message_id,
        )
