"""Typed domain models for the GitHub activity feed.

Events are kept as the raw JSON records GitHub returns. Only the handful of
fields the filter and aggregator read are exposed, and each accessor checks
its field lazily so a malformed record fails exactly where it is used.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from myweek.common.time import parse_github_datetime

from .errors import MalformedEventError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

T = typ.TypeVar("T")


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubEvent:
    """A single activity record from the events API."""

    record: cabc.Mapping[str, typ.Any]

    @property
    def event_id(self) -> str | None:
        """Return the GitHub event id when present."""
        value = self.record.get("id")
        return value if isinstance(value, str) else None

    @property
    def event_type(self) -> str:
        """Return the ``type`` discriminator, e.g. ``PushEvent``."""
        return self._require("type", str)

    @property
    def created_at(self) -> dt.datetime:
        """Return ``created_at`` as an aware UTC datetime."""
        raw = self._require("created_at", str)
        try:
            return parse_github_datetime(raw)
        except ValueError as exc:
            raise MalformedEventError.missing_field(
                "created_at", event_id=self.event_id
            ) from exc

    @property
    def repo_name(self) -> str:
        """Return ``repo.name`` in ``owner/name`` form."""
        repo = self._require("repo", dict)
        name = repo.get("name")
        if not isinstance(name, str):
            raise MalformedEventError.missing_field("repo.name", event_id=self.event_id)
        return name

    @property
    def payload(self) -> cabc.Mapping[str, typ.Any]:
        """Return the type-specific payload object."""
        return self._require("payload", dict)

    def payload_field(self, name: str) -> typ.Any:  # noqa: ANN401
        """Return ``payload[name]``, failing when the field is absent."""
        payload = self.payload
        if name not in payload:
            raise MalformedEventError.missing_field(
                f"payload.{name}", event_id=self.event_id
            )
        return payload[name]

    def _require(self, field: str, kind: type[T]) -> T:
        value = self.record.get(field)
        if not isinstance(value, kind):
            raise MalformedEventError.missing_field(field, event_id=self.event_id)
        return value


@dataclasses.dataclass(frozen=True, slots=True)
class RateLimit:
    """Rate-limit headers reported alongside a page."""

    limit: int | None
    remaining: int | None
    reset_at: dt.datetime | None


@dataclasses.dataclass(frozen=True, slots=True)
class PageMetadata:
    """Page-scoped attributes that never belong to an individual event.

    Attributes
    ----------
    url
        URL that produced the page.
    status_code
        HTTP status of the response.
    next_url
        Continuation token: the ``rel="next"`` Link URL, or ``None`` on the
        last page.
    rate_limit
        Rate-limit headers, when GitHub sent them.

    """

    url: str
    status_code: int = 200
    next_url: str | None = None
    rate_limit: RateLimit | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class Page:
    """A sequence of events plus the metadata of the request that fetched them."""

    events: tuple[GitHubEvent, ...]
    metadata: PageMetadata

    @property
    def has_next(self) -> bool:
        """Return True when GitHub advertised a further page."""
        return self.metadata.next_url is not None

    @property
    def last_event(self) -> GitHubEvent | None:
        """Return the final (usually oldest) event on the page."""
        return self.events[-1] if self.events else None
