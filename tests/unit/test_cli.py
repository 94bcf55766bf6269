"""Unit tests for the myweek command-line entry point."""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

import pytest

from myweek import cli
from myweek.github.errors import GitHubAPIError
from myweek.reporting.sink import DeliveryResult
from tests.helpers.github_events import (
    BASE_TIME,
    FakePageFetcher,
    create_repo_event,
    issue_comment_event,
    paged,
    push_event,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from myweek.github.client import GitHubRESTConfig
    from myweek.reporting.config import MailgunConfig
    from myweek.reporting.sink import SummaryMessage

_ENV_VARS = (
    "GITHUB_ACTOR",
    "GITHUB_TOKEN",
    "MYWEEK_WINDOW_DAYS",
    "MYWEEK_EXCLUSION_RULES",
    "MYWEEK_SUMMARY_SINK_PATH",
    "MYWEEK_LOG_LEVEL",
    "MAILGUN_FROM",
    "MAILGUN_EMAIL",
    "MAILGUN_URL",
    "MAILGUN_API_KEY",
)


@dataclasses.dataclass(slots=True)
class _ClosingFetcher(FakePageFetcher):
    """Fake fetcher usable as the CLI's GitHub client context manager."""

    closed: bool = False

    def __enter__(self) -> _ClosingFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True


@dataclasses.dataclass(slots=True)
class _FakeMailgunSink:
    config: MailgunConfig
    delivered: list[SummaryMessage] = dataclasses.field(default_factory=list)
    closed: bool = False

    def deliver(self, message: SummaryMessage) -> DeliveryResult:
        self.delivered.append(message)
        return DeliveryResult(destination=self.config.recipient, message_id="<1@mg>")

    def close(self) -> None:
        self.closed = True


def _feed() -> list[tuple[typ.Any, ...]]:
    return [
        (
            push_event("octo/reef", 3),
            issue_comment_event("cran/dplyr"),
            create_repo_event("octo/kelp", created_at=BASE_TIME - dt.timedelta(days=2)),
        ),
        (push_event("octo/old", 5, created_at=BASE_TIME - dt.timedelta(days=10)),),
    ]


@pytest.fixture
def fetcher(monkeypatch: pytest.MonkeyPatch) -> _ClosingFetcher:
    """Replace the GitHub client and clock used by the CLI."""
    fake = _ClosingFetcher(pages=paged(*_feed()))

    def _client(config: GitHubRESTConfig) -> _ClosingFetcher:
        del config
        return fake

    monkeypatch.setattr(cli, "GitHubRESTClient", _client)
    monkeypatch.setattr(cli, "utcnow", lambda: BASE_TIME)
    monkeypatch.setattr(cli, "configure_logging", lambda level: ("INFO", False))
    return fake


@pytest.fixture
def mailgun_sinks(monkeypatch: pytest.MonkeyPatch) -> list[_FakeMailgunSink]:
    """Capture Mailgun sinks constructed by the CLI."""
    created: list[_FakeMailgunSink] = []

    def _sink(config: MailgunConfig) -> _FakeMailgunSink:
        sink = _FakeMailgunSink(config)
        created.append(sink)
        return sink

    monkeypatch.setattr(cli, "MailgunSummarySink", _sink)
    return created


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from a known environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GITHUB_ACTOR", "octocat")


def _set_mailgun_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAILGUN_FROM", "myweek@example.org")
    monkeypatch.setenv("MAILGUN_EMAIL", "octocat@example.org")
    monkeypatch.setenv("MAILGUN_URL", "https://api.mailgun.test/v3/x/messages")
    monkeypatch.setenv("MAILGUN_API_KEY", "key-123")


class TestMain:
    """Tests for main."""

    def test_dry_run_echoes_and_archives(
        self,
        fetcher: _ClosingFetcher,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A dry run prints the summary and writes it to --output-dir."""
        exit_code = cli.main(["--dry-run", "--output-dir", str(tmp_path)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert out.startswith("Weekly GitHub summary (2024-07-08)\n")
        assert "* `octo/reef`: 3 commits" in out
        assert "* octo/kelp" in out
        assert "octo/old" not in out, "Events before the cutoff should be dropped."
        assert (tmp_path / "latest.md").read_text(encoding="utf-8").startswith(
            "Weekly GitHub summary (2024-07-08)"
        )
        assert fetcher.closed is True

    def test_mails_summary_when_not_a_dry_run(
        self,
        fetcher: _ClosingFetcher,
        mailgun_sinks: list[_FakeMailgunSink],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Mailgun receives the message and is closed afterwards."""
        del fetcher
        _set_mailgun_env(monkeypatch)

        assert cli.main([]) == 0

        [sink] = mailgun_sinks
        assert len(sink.delivered) == 1
        assert sink.delivered[0].subject == "Weekly GitHub summary (2024-07-08)"
        assert sink.closed is True

    def test_rules_file_is_applied(
        self,
        fetcher: _ClosingFetcher,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Events matched by --rules are left out."""
        del fetcher
        rules = tmp_path / "rules.yaml"
        rules.write_text(
            "rules:\n  - id: reef\n    repo: octo/reef\n", encoding="utf-8"
        )

        assert cli.main(["--dry-run", "--rules", str(rules)]) == 0

        assert "octo/reef" not in capsys.readouterr().out

    def test_window_days_narrows_the_cutoff(
        self,
        fetcher: _ClosingFetcher,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """--window-days overrides the default seven days."""
        del fetcher

        assert cli.main(["--dry-run", "--window-days", "1"]) == 0

        out = capsys.readouterr().out
        assert "octo/reef" in out
        assert "octo/kelp" not in out, "A two-day-old creation is outside one day."

    def test_window_days_must_be_positive(self) -> None:
        """argparse rejects a zero window."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--window-days", "0"])

        assert exc_info.value.code == 2

    def test_missing_actor_exits_with_error(
        self, fetcher: _ClosingFetcher, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Configuration errors end the run with exit code 1."""
        monkeypatch.delenv("GITHUB_ACTOR")

        assert cli.main(["--dry-run"]) == 1
        assert fetcher.fetch_count == 0

    def test_missing_mailgun_settings_exit_with_error(
        self, fetcher: _ClosingFetcher
    ) -> None:
        """Mailgun settings are required unless --dry-run is given."""
        assert cli.main([]) == 1
        assert fetcher.fetch_count == 0

    def test_invalid_rules_file_exits_with_error(
        self, fetcher: _ClosingFetcher, tmp_path: Path
    ) -> None:
        """An invalid rules file fails before any request."""
        rules = tmp_path / "rules.yaml"
        rules.write_text("rules:\n  - id: everything\n", encoding="utf-8")

        assert cli.main(["--dry-run", "--rules", str(rules)]) == 1
        assert fetcher.fetch_count == 0

    def test_fetch_failure_exits_with_error(
        self,
        fetcher: _ClosingFetcher,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A failing page request ends the run with exit code 1 and no output."""
        fetcher.failures[1] = GitHubAPIError.http_error(502)

        assert cli.main(["--dry-run"]) == 1
        assert capsys.readouterr().out == ""
        assert fetcher.closed is True
