"""Configuration for the weekly summary run.

Values come from environment variables so the tool can run unattended from
a scheduled CI job, where ``GITHUB_ACTOR`` is already set.

Usage
-----
>>> import os
>>> os.environ["GITHUB_ACTOR"] = "octocat"
>>> config = SummaryConfig.from_env()
>>> config.window_days
7

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

import keyring
from keyring.errors import KeyringError

from .errors import ConfigError

# Keyring entry consulted when MAILGUN_API_KEY is unset.
MAILGUN_KEYRING_SERVICE = "MAILGUN_API_KEY"
MAILGUN_KEYRING_USERNAME = "api"


def _read_required(env_var: str) -> str:
    value = os.environ.get(env_var, "").strip()
    if not value:
        raise ConfigError.missing(env_var)
    return value


def _read_secret(env_var: str, *, service: str, username: str) -> str:
    """Read a secret from the environment, falling back to the OS keyring."""
    value = os.environ.get(env_var, "").strip()
    if value:
        return value
    try:
        stored = keyring.get_password(service, username)
    except KeyringError as exc:
        raise ConfigError.invalid(
            env_var, f"is unset and the keyring could not be read: {exc}"
        ) from exc
    if not stored or not stored.strip():
        raise ConfigError.missing(env_var)
    return stored.strip()


def _read_optional_path(env_var: str) -> Path | None:
    raw = os.environ.get(env_var, "").strip()
    return Path(raw) if raw else None


def _parse_positive_int(env_var: str, default: int) -> int:
    """Read a positive integer env var, falling back to a default."""
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError.invalid(env_var, f"must be an integer, got: {raw!r}") from exc
    if value < 1:
        raise ConfigError.invalid(env_var, f"must be positive, got: {value}")
    return value


@dc.dataclass(frozen=True, slots=True)
class SummaryConfig:
    """Settings for fetching, filtering and archiving one summary.

    Attributes
    ----------
    username
        Account whose public activity feed is summarised.
    window_days
        Days before today (UTC) at whose midnight the cutoff lies.
    exclusion_rules_path
        Optional YAML file of exclusion rules. No rules apply when unset.
    summary_sink_path
        Optional directory that also receives each rendered summary.

    """

    username: str
    window_days: int = 7
    exclusion_rules_path: Path | None = None
    summary_sink_path: Path | None = None

    @classmethod
    def from_env(cls) -> SummaryConfig:
        """Create configuration from environment variables.

        Reads ``GITHUB_ACTOR`` (required), ``MYWEEK_WINDOW_DAYS``,
        ``MYWEEK_EXCLUSION_RULES`` and ``MYWEEK_SUMMARY_SINK_PATH``.

        Raises
        ------
        ConfigError
            If ``GITHUB_ACTOR`` is unset or the window is not a positive
            integer.

        """
        return cls(
            username=_read_required("GITHUB_ACTOR"),
            window_days=_parse_positive_int("MYWEEK_WINDOW_DAYS", 7),
            exclusion_rules_path=_read_optional_path("MYWEEK_EXCLUSION_RULES"),
            summary_sink_path=_read_optional_path("MYWEEK_SUMMARY_SINK_PATH"),
        )


@dc.dataclass(frozen=True, slots=True)
class MailgunConfig:
    """Mailgun messages API settings."""

    sender: str
    recipient: str
    url: str
    api_key: str = dc.field(repr=False)
    timeout_s: float = 20.0

    @classmethod
    def from_env(cls) -> MailgunConfig:
        """Read ``MAILGUN_FROM``, ``MAILGUN_EMAIL``, ``MAILGUN_URL`` and ``MAILGUN_API_KEY``.

        When ``MAILGUN_API_KEY`` is unset the key is looked up in the OS
        keyring under service ``MAILGUN_API_KEY``, user ``api``.
        """
        return cls(
            sender=_read_required("MAILGUN_FROM"),
            recipient=_read_required("MAILGUN_EMAIL"),
            url=_read_required("MAILGUN_URL"),
            api_key=_read_secret(
                "MAILGUN_API_KEY",
                service=MAILGUN_KEYRING_SERVICE,
                username=MAILGUN_KEYRING_USERNAME,
            ),
        )
