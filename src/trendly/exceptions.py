"""Error taxonomy shared by services, sources and the HTTP boundary.

Every error carries the HTTP status it maps to and a human-readable message;
main.py turns them into ``{"message": ..., "details": ...}`` JSON bodies.
"""
from typing import Any


class TrendlyError(Exception):
    """Base class for errors that map to a JSON error response."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body for this error."""
        body: dict[str, Any] = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(TrendlyError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid input data"


class AuthenticationRequired(TrendlyError):
    """No credential was supplied for a protected operation."""

    status_code = 401
    default_message = "Access token required"


class InvalidCredential(TrendlyError):
    """Bad password, or a token that fails verification."""

    status_code = 401
    default_message = "Invalid credentials"


class NotFound(TrendlyError):
    status_code = 404
    default_message = "Not found"


class DependencyFailure(TrendlyError):
    """External product source unreachable or returned something unusable."""

    status_code = 502
    default_message = "Scraping failed"


class DependencyTimeout(DependencyFailure):
    status_code = 504
    default_message = "External product source timed out"


class ServerFault(TrendlyError):
    status_code = 500
    default_message = "Server error"
