"""Weekly summary workflow.

Fetches the activity feed back to the cutoff, filters noise, aggregates the
remaining events, renders Markdown, echoes it and hands it to each sink in
turn. No step recovers locally: any failure is logged with its category and
re-raised so the scheduler that started the run sees it.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from myweek.common.time import utcnow
from myweek.github.feed import fetch_user_events
from myweek.github.noise import filter_events

from .markdown import render_summary_markdown
from .observability import SummaryEventLogger
from .sink import SummaryMessage
from .summary import summarize_events

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from myweek.github.client import PageFetcher
    from myweek.github.rules import ExclusionRule

    from .sink import DeliveryResult, SummarySink
    from .summary import ActivitySummary


@dc.dataclass(frozen=True, slots=True)
class SummaryRunResult:
    """Everything a completed run produced."""

    message: SummaryMessage
    summary: ActivitySummary
    events_fetched: int
    events_kept: int
    deliveries: tuple[DeliveryResult, ...]


@dc.dataclass(frozen=True, slots=True)
class SummaryRunRequest:
    """Parameters of one summary run.

    Attributes
    ----------
    username
        Account whose feed is summarised.
    cutoff
        Events created before this instant are ignored.
    today
        Date placed in the subject line.
    rules
        Exclusion rules applied after the cutoff.

    """

    username: str
    cutoff: dt.datetime
    today: dt.date
    rules: tuple[ExclusionRule, ...] = ()


def build_summary_message(
    fetcher: PageFetcher, request: SummaryRunRequest
) -> tuple[SummaryMessage, ActivitySummary, int, int]:
    """Fetch, filter, aggregate and render without delivering."""
    page = fetch_user_events(fetcher, request.username, since=request.cutoff)
    kept = filter_events(page.events, cutoff=request.cutoff, rules=request.rules)
    summary = summarize_events(kept)
    lines = render_summary_markdown(summary)
    message = SummaryMessage.for_date(lines, request.today)
    return message, summary, len(page.events), len(kept)


def run_weekly_summary(
    fetcher: PageFetcher,
    sinks: cabc.Sequence[SummarySink],
    request: SummaryRunRequest,
    *,
    echo: cabc.Callable[[str], None] = print,
    event_logger: SummaryEventLogger | None = None,
) -> SummaryRunResult:
    """Run the whole summary workflow once.

    The rendered message is echoed before any delivery is attempted, so it
    stays available for a manual resend whatever the sinks do.

    Raises
    ------
    GitHubAPIError
        If any page request fails.
    MalformedEventError
        If an event lacks a field that filtering or aggregation reads.
    DeliveryError
        If a sink fails. Sinks after the failing one are not attempted.

    """
    events_log = event_logger or SummaryEventLogger()
    started_at = utcnow()
    events_log.log_run_started(username=request.username, cutoff=request.cutoff)
    try:
        message, summary, fetched, kept = build_summary_message(fetcher, request)
        for line in message.echo_lines():
            echo(line)
        deliveries: list[DeliveryResult] = []
        for sink in sinks:
            result = sink.deliver(message)
            events_log.log_delivery_completed(result)
            deliveries.append(result)
    except Exception as exc:
        events_log.log_run_failed(
            username=request.username,
            error=exc,
            duration=utcnow() - started_at,
        )
        raise

    events_log.log_run_completed(
        username=request.username,
        events_fetched=fetched,
        events_kept=kept,
        duration=utcnow() - started_at,
    )
    return SummaryRunResult(
        message=message,
        summary=summary,
        events_fetched=fetched,
        events_kept=kept,
        deliveries=tuple(deliveries),
    )
