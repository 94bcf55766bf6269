r"""Filesystem adapter for the SummarySink protocol.

Writes rendered summaries to a local directory so a dry run can be
inspected and a failed delivery resent by hand::

    {base_path}/latest.md
    {base_path}/{date}-summary.md

Usage
-----
>>> import datetime as dt
>>> from pathlib import Path
>>> from myweek.reporting.filesystem_sink import FilesystemSummarySink
>>> from myweek.reporting.sink import SummaryMessage
>>>
>>> sink = FilesystemSummarySink(Path("/var/lib/myweek"))
>>> message = SummaryMessage.for_date(["# Repos created"], dt.date(2024, 7, 8))
>>> sink.deliver(message).destination
'/var/lib/myweek/2024-07-08-summary.md'

"""

from __future__ import annotations

import typing as typ

from .errors import DeliveryError
from .sink import DeliveryResult

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .sink import SummaryMessage


class FilesystemSummarySink:
    """Write summaries to the local filesystem.

    Parameters
    ----------
    base_path
        Directory for summary files. It is created when missing.

    """

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with a base directory path."""
        self._base_path = base_path

    def deliver(self, message: SummaryMessage) -> DeliveryResult:
        """Write the subject and body to ``latest.md`` and a dated archive file."""
        latest_path = self._base_path / "latest.md"
        dated_path = self._base_path / f"{message.generated_on.isoformat()}-summary.md"
        content = "\n".join(message.echo_lines()) + "\n"
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
            latest_path.write_text(content, encoding="utf-8")
            dated_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise DeliveryError.unreachable(exc) from exc
        return DeliveryResult(destination=str(dated_path))
