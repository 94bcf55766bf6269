"""SummarySink protocol for delivering rendered summaries.

This module defines the port for summary output. Adapters implement it to
hand the rendered Markdown to a destination: the Mailgun messages API, a
local directory, and so on. Sinks report success through a
:class:`DeliveryResult` and failure by raising
:class:`~myweek.reporting.errors.DeliveryError`; they never retry.

Usage
-----
Type-check a concrete adapter:

>>> from pathlib import Path
>>> from myweek.reporting.sink import SummarySink
>>> from myweek.reporting.filesystem_sink import FilesystemSummarySink
>>> isinstance(FilesystemSummarySink(Path(".")), SummarySink)
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt

SUBJECT_TEMPLATE = "Weekly GitHub summary ({date})"


@dc.dataclass(frozen=True, slots=True)
class SummaryMessage:
    """A rendered summary ready for delivery.

    Attributes
    ----------
    subject
        Message subject line.
    body_lines
        Rendered Markdown lines.
    generated_on
        Date the summary was generated, used for archive names.

    """

    subject: str
    body_lines: tuple[str, ...]
    generated_on: dt.date

    @classmethod
    def for_date(cls, body_lines: typ.Sequence[str], day: dt.date) -> SummaryMessage:
        """Build a message whose subject carries ``day``."""
        return cls(
            subject=SUBJECT_TEMPLATE.format(date=day.isoformat()),
            body_lines=tuple(body_lines),
            generated_on=day,
        )

    @property
    def body(self) -> str:
        """Return the body as a single newline-joined string."""
        return "\n".join(self.body_lines)

    def echo_lines(self) -> list[str]:
        """Return the subject, a blank line and the body, for console output."""
        return [self.subject, "", *self.body_lines]


@dc.dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome reported by a sink after a successful delivery."""

    destination: str
    message_id: str | None = None
    detail: str | None = None


@typ.runtime_checkable
class SummarySink(typ.Protocol):
    """Protocol for delivering rendered summaries."""

    def deliver(self, message: SummaryMessage) -> DeliveryResult:
        """Deliver ``message``, raising ``DeliveryError`` on failure."""
        ...
