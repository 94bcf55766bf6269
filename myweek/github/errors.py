"""GitHub activity feed errors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub page request fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        """Initialise with a message, optional HTTP status code and URL."""
        self.status_code = status_code
        self.url = url
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, *, url: str | None = None) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        target = f" for {url}" if url else ""
        return cls(
            f"GitHub REST HTTP {status_code}{target}",
            status_code=status_code,
            url=url,
        )

    @classmethod
    def transport_error(cls, exc: Exception, *, url: str | None = None) -> GitHubAPIError:
        """Return an error for network-level failures."""
        return cls(f"GitHub request failed: {exc}", url=url)


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub rejects a request because the rate limit is spent."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        reset_at: dt.datetime | None = None,
    ) -> None:
        """Initialise with the time at which the rate limit resets."""
        self.reset_at = reset_at
        super().__init__(message, status_code=status_code, url=url)

    @classmethod
    def exhausted(
        cls,
        status_code: int,
        *,
        url: str | None = None,
        reset_at: dt.datetime | None = None,
    ) -> GitHubRateLimitError:
        """Return an error for a request rejected by rate limiting."""
        resets = f" (resets at {reset_at.isoformat()})" if reset_at else ""
        return cls(
            f"GitHub rate limit exhausted, HTTP {status_code}{resets}",
            status_code=status_code,
            url=url,
            reset_at=reset_at,
        )


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses do not have the expected shape."""

    @classmethod
    def not_a_list(cls, url: str) -> GitHubResponseShapeError:
        """Return an error for a paginated response that is not a JSON array."""
        return cls(f"GitHub REST response for {url} is not a JSON array")

    @classmethod
    def not_json(cls, url: str) -> GitHubResponseShapeError:
        """Return an error for a response body that is not JSON at all."""
        return cls(f"GitHub REST response for {url} is not JSON")

    @classmethod
    def not_an_object(cls, url: str, index: int) -> GitHubResponseShapeError:
        """Return an error for a listing item that is not a JSON object."""
        return cls(
            f"GitHub REST response for {url} has a non-object item at index {index}"
        )


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is blank."""
        return cls("GitHub token must be non-empty when provided")


class MalformedEventError(RuntimeError):
    """Raised when an event lacks a field that filtering or aggregation reads."""

    def __init__(self, message: str, *, field: str, event_id: str | None) -> None:
        """Initialise with the offending field path and event identifier."""
        self.field = field
        self.event_id = event_id
        super().__init__(message)

    @classmethod
    def missing_field(cls, field: str, *, event_id: str | None) -> MalformedEventError:
        """Return an error for a missing or mistyped event field."""
        return cls(
            f"GitHub event {event_id or '<unknown>'} missing expected field: {field}",
            field=field,
            event_id=event_id,
        )
