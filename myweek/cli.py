"""Command-line entry point for the weekly GitHub activity summary.

Run with ``python -m myweek.cli`` or the ``myweek`` console script. Without
arguments the last seven days of ``GITHUB_ACTOR``'s feed are summarised and
mailed through Mailgun.

Configuration is driven by environment variables:

- ``GITHUB_ACTOR``: Account whose feed is summarised (required)
- ``GITHUB_TOKEN``: Optional GitHub API token
- ``MYWEEK_WINDOW_DAYS``: Window in days (default ``7``)
- ``MYWEEK_EXCLUSION_RULES``: Optional YAML exclusion rules file
- ``MYWEEK_SUMMARY_SINK_PATH``: Optional directory that archives summaries
- ``MYWEEK_LOG_LEVEL``: Log level (default ``INFO``)
- ``MAILGUN_FROM``, ``MAILGUN_EMAIL``, ``MAILGUN_URL``, ``MAILGUN_API_KEY``:
  Mailgun delivery settings
"""

from __future__ import annotations

import argparse
import contextlib
import dataclasses as dc
import os
import typing as typ
from pathlib import Path

from myweek.common.time import utcnow, window_cutoff
from myweek.github.client import GitHubRESTClient, GitHubRESTConfig
from myweek.github.rules import load_exclusion_rules
from myweek.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_warning,
)
from myweek.reporting.config import MailgunConfig, SummaryConfig
from myweek.reporting.errors import ConfigError
from myweek.reporting.filesystem_sink import FilesystemSummarySink
from myweek.reporting.mailgun_sink import MailgunSummarySink
from myweek.reporting.service import SummaryRunRequest, run_weekly_summary

if typ.TYPE_CHECKING:
    from myweek.github.client import PageFetcher
    from myweek.reporting.sink import SummarySink

logger = get_logger(__name__)


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"expected a positive integer, got {raw!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    if value < 1:
        msg = f"expected a positive integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="myweek", description=__doc__.splitlines()[0])
    parser.add_argument(
        "--window-days",
        type=_positive_int,
        default=None,
        help="Summarise this many days (overrides MYWEEK_WINDOW_DAYS)",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="YAML exclusion rules file (overrides MYWEEK_EXCLUSION_RULES)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Also write the summary here (overrides MYWEEK_SUMMARY_SINK_PATH)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render and echo the summary without mailing it",
    )
    return parser


def _apply_overrides(config: SummaryConfig, args: argparse.Namespace) -> SummaryConfig:
    overrides: dict[str, typ.Any] = {}
    if args.window_days is not None:
        overrides["window_days"] = args.window_days
    if args.rules is not None:
        overrides["exclusion_rules_path"] = args.rules
    if args.output_dir is not None:
        overrides["summary_sink_path"] = args.output_dir
    return dc.replace(config, **overrides)


def run(
    config: SummaryConfig,
    *,
    fetcher: PageFetcher,
    sinks: typ.Sequence[SummarySink],
) -> None:
    """Run one summary for ``config`` using the given fetcher and sinks."""
    rules = (
        load_exclusion_rules(config.exclusion_rules_path)
        if config.exclusion_rules_path is not None
        else ()
    )
    now = utcnow()
    request = SummaryRunRequest(
        username=config.username,
        cutoff=window_cutoff(config.window_days, now=now),
        today=now.date(),
        rules=rules,
    )
    run_weekly_summary(fetcher, sinks, request)


def main(argv: list[str] | None = None) -> int:
    """Summarise the configured feed and deliver it.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the run fails.

    """
    args = _build_parser().parse_args(argv)

    log_level_str = os.environ.get("MYWEEK_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid MYWEEK_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    try:
        config = _apply_overrides(SummaryConfig.from_env(), args)
        mailgun = None if args.dry_run else MailgunConfig.from_env()
    except ConfigError as exc:
        # Configuration problems need no traceback.
        log_error(logger, "Invalid configuration: %s", exc)
        return 1

    with contextlib.ExitStack() as stack:
        sinks: list[SummarySink] = []
        if config.summary_sink_path is not None:
            sinks.append(FilesystemSummarySink(config.summary_sink_path))
        if mailgun is not None:
            mailgun_sink = MailgunSummarySink(mailgun)
            stack.callback(mailgun_sink.close)
            sinks.append(mailgun_sink)
        client = stack.enter_context(GitHubRESTClient(GitHubRESTConfig.from_env()))
        try:
            run(config, fetcher=client, sinks=sinks)
        except Exception as exc:  # noqa: BLE001 - any failure ends the run with exit 1
            log_exception(logger, f"Weekly summary failed: {exc}", exc)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
