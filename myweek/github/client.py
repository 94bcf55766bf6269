"""GitHub REST client implementing the page fetcher used by pagination."""

from __future__ import annotations

import dataclasses
import datetime as dt
import os
import string
import typing as typ

import httpx

from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
)
from .models import GitHubEvent, Page, PageMetadata, RateLimit

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from types import TracebackType


class PageFetcher(typ.Protocol):
    """Interface for fetching one page of a paginated listing per call."""

    def fetch(
        self, endpoint: str, params: cabc.Mapping[str, typ.Any] | None = None
    ) -> Page:
        """Perform exactly one request for the first page of ``endpoint``."""
        ...

    def fetch_next(self, page: Page) -> Page:
        """Perform exactly one request for the page following ``page``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRESTConfig:
    """Configuration for the GitHub REST API client."""

    token: str | None = None
    base_url: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = "myweek/0.1"
    api_version: str = "2022-11-28"

    @classmethod
    def from_env(cls) -> GitHubRESTConfig:
        """Build configuration using the optional `GITHUB_TOKEN` env var."""
        token = os.environ.get("GITHUB_TOKEN", "").strip()
        return cls(token=token or None)


_HTTP_ERROR_STATUS_THRESHOLD = 400
_RATE_LIMIT_STATUSES = frozenset({403, 429})


def _parse_int_header(headers: httpx.Headers, name: str) -> int | None:
    raw = headers.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _rate_limit_from_headers(headers: httpx.Headers) -> RateLimit | None:
    limit = _parse_int_header(headers, "x-ratelimit-limit")
    remaining = _parse_int_header(headers, "x-ratelimit-remaining")
    reset = _parse_int_header(headers, "x-ratelimit-reset")
    if limit is None and remaining is None and reset is None:
        return None
    reset_at = dt.datetime.fromtimestamp(reset, tz=dt.UTC) if reset is not None else None
    return RateLimit(limit=limit, remaining=remaining, reset_at=reset_at)


def _next_link(response: httpx.Response) -> str | None:
    """Return the ``rel="next"`` URL from the Link header, if any."""
    link = response.links.get("next")
    if not link:
        return None
    url = link.get("url")
    return url if isinstance(url, str) and url else None


def _expand_endpoint(
    endpoint: str, params: cabc.Mapping[str, typ.Any]
) -> tuple[str, dict[str, typ.Any]]:
    """Fill ``{field}`` placeholders from params and return the leftover query."""
    fields = {
        name for _, name, _, _ in string.Formatter().parse(endpoint) if name
    }
    missing = fields.difference(params)
    if missing:
        msg = f"endpoint {endpoint!r} is missing parameters: {sorted(missing)}"
        raise ValueError(msg)
    path = endpoint.format(**{name: params[name] for name in fields})
    query = {key: value for key, value in params.items() if key not in fields}
    return path, query


def _page_from_response(response: httpx.Response) -> Page:
    url = str(response.request.url)
    try:
        body = response.json()
    except ValueError as exc:
        raise GitHubResponseShapeError.not_json(url) from exc
    if not isinstance(body, list):
        raise GitHubResponseShapeError.not_a_list(url)
    events: list[GitHubEvent] = []
    for index, record in enumerate(body):
        if not isinstance(record, dict):
            raise GitHubResponseShapeError.not_an_object(url, index)
        events.append(GitHubEvent(record=record))
    metadata = PageMetadata(
        url=url,
        status_code=response.status_code,
        next_url=_next_link(response),
        rate_limit=_rate_limit_from_headers(response.headers),
    )
    return Page(events=tuple(events), metadata=metadata)


class GitHubRESTClient:
    """GitHub REST implementation of :class:`PageFetcher`.

    Every call issues exactly one request. Failures are raised to the caller
    and never retried here.
    """

    def __init__(
        self,
        config: GitHubRESTConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if config.token is not None and not config.token.strip():
            raise GitHubConfigError.empty_token()

        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": config.api_version,
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout_s,
            headers=headers,
        )
        if http_client is not None:
            self._client.headers.update(headers)

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> typ.Self:
        """Return the client for use in a ``with`` block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close owned resources on exit."""
        self.close()

    def fetch(
        self, endpoint: str, params: cabc.Mapping[str, typ.Any] | None = None
    ) -> Page:
        """Fetch the first page of ``endpoint``.

        ``endpoint`` may hold ``{field}`` placeholders, which are filled from
        ``params``; the remaining params are sent as the query string.
        """
        path, query = _expand_endpoint(endpoint, params or {})
        url = f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"
        return self._get(url, query)

    def fetch_next(self, page: Page) -> Page:
        """Fetch the page after ``page`` using its continuation link."""
        next_url = page.metadata.next_url
        if next_url is None:
            msg = f"page fetched from {page.metadata.url} has no next page"
            raise ValueError(msg)
        return self._get(next_url, None)

    def _get(self, url: str, query: dict[str, typ.Any] | None) -> Page:
        try:
            response = self._client.get(url, params=query)
        except httpx.TransportError as exc:
            raise GitHubAPIError.transport_error(exc, url=url) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise _error_for_response(response)
        return _page_from_response(response)


def _error_for_response(response: httpx.Response) -> GitHubAPIError:
    url = str(response.request.url)
    status = response.status_code
    rate_limit = _rate_limit_from_headers(response.headers)
    if (
        status in _RATE_LIMIT_STATUSES
        and rate_limit is not None
        and rate_limit.remaining == 0
    ):
        return GitHubRateLimitError.exhausted(
            status, url=url, reset_at=rate_limit.reset_at
        )
    return GitHubAPIError.http_error(status, url=url)
