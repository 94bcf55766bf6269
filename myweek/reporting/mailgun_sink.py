"""Mailgun adapter for the SummarySink protocol.

Posts the summary to the Mailgun messages API, authenticating with HTTP basic
auth as user ``api``. The Markdown body is sent as the plain-text part and,
rendered with markdown-it, as the HTML part.
"""

from __future__ import annotations

import typing as typ

import httpx
from markdown_it import MarkdownIt

from .errors import DeliveryError
from .sink import DeliveryResult

if typ.TYPE_CHECKING:
    from .config import MailgunConfig
    from .sink import SummaryMessage

_HTTP_ERROR_STATUS_THRESHOLD = 400

_MARKDOWN = MarkdownIt("commonmark")


def render_html(markdown: str) -> str:
    """Render a Markdown summary body as HTML."""
    return _MARKDOWN.render(markdown)


def _message_id(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        body = response.json()
    except ValueError:
        return (None, None)
    if not isinstance(body, dict):
        return (None, None)
    message_id = body.get("id")
    detail = body.get("message")
    return (
        message_id if isinstance(message_id, str) else None,
        detail if isinstance(detail, str) else None,
    )


class MailgunSummarySink:
    """Send summaries through Mailgun."""

    def __init__(
        self,
        config: MailgunConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the sink with Mailgun settings."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=config.timeout_s)

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def deliver(self, message: SummaryMessage) -> DeliveryResult:
        """Post ``message`` to Mailgun.

        Raises
        ------
        DeliveryError
            If Mailgun is unreachable or answers with a non-2xx status.

        """
        try:
            response = self._client.post(
                self._config.url,
                auth=("api", self._config.api_key),
                data={
                    "from": self._config.sender,
                    "to": self._config.recipient,
                    "subject": message.subject,
                    "text": message.body,
                    "html": render_html(message.body),
                },
            )
        except httpx.TransportError as exc:
            raise DeliveryError.unreachable(exc) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise DeliveryError.rejected(response.status_code, response.text)

        message_id, detail = _message_id(response)
        return DeliveryResult(
            destination=self._config.recipient,
            message_id=message_id,
            detail=detail,
        )
