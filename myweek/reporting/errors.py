"""Errors specific to the reporting module."""

from __future__ import annotations


class ReportingError(Exception):
    """Base class for reporting module errors."""


class ConfigError(ReportingError):
    """Raised when run configuration is missing or invalid."""

    @classmethod
    def missing(cls, env_var: str) -> ConfigError:
        """Return an error for a required environment variable that is unset."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid(cls, env_var: str, detail: str) -> ConfigError:
        """Return an error for an environment variable with a bad value."""
        return cls(f"{env_var} {detail}")


class DeliveryError(ReportingError):
    """Raised when a summary could not be handed to its destination.

    Parameters
    ----------
    message
        Description of the failure.
    status_code
        HTTP status returned by the transport, when there was a response.

    """

    status_code: int | None

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def rejected(cls, status_code: int, detail: str) -> DeliveryError:
        """Return an error for a non-2xx transport response."""
        return cls(
            f"Summary delivery rejected with HTTP {status_code}: {detail}",
            status_code=status_code,
        )

    @classmethod
    def unreachable(cls, exc: Exception) -> DeliveryError:
        """Return an error for a transport that could not be reached."""
        return cls(f"Summary delivery failed: {exc}")
