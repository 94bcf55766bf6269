"""Aggregation, rendering and delivery of the weekly activity summary.

Public API
----------
ActivitySummary
    Categories derived from one run's events.
FilesystemSummarySink
    Filesystem adapter for the ``SummarySink`` protocol.
MailgunSummarySink
    Mailgun adapter for the ``SummarySink`` protocol.
SummaryConfig / MailgunConfig
    Environment-driven run and delivery configuration.
SummarySink
    Protocol (port) for delivering rendered summaries.
run_weekly_summary
    The end-to-end workflow.
render_summary_markdown
    Pure function rendering an ``ActivitySummary`` as Markdown lines.

"""

from __future__ import annotations

from .config import MailgunConfig, SummaryConfig
from .errors import ConfigError, DeliveryError, ReportingError
from .filesystem_sink import FilesystemSummarySink
from .mailgun_sink import MailgunSummarySink
from .markdown import render_summary_markdown
from .service import (
    SummaryRunRequest,
    SummaryRunResult,
    build_summary_message,
    run_weekly_summary,
)
from .sink import DeliveryResult, SummaryMessage, SummarySink
from .summary import ActivitySummary, commits_pushed, repos_created, summarize_events

__all__ = [
    "ActivitySummary",
    "ConfigError",
    "DeliveryError",
    "DeliveryResult",
    "FilesystemSummarySink",
    "MailgunConfig",
    "MailgunSummarySink",
    "ReportingError",
    "SummaryConfig",
    "SummaryMessage",
    "SummaryRunRequest",
    "SummaryRunResult",
    "SummarySink",
    "build_summary_message",
    "commits_pushed",
    "render_summary_markdown",
    "repos_created",
    "run_weekly_summary",
    "summarize_events",
]
