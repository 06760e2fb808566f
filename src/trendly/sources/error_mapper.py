"""Maps external source exceptions to the service's dependency errors."""
import asyncio
from dataclasses import dataclass
from typing import NoReturn

import httpx

from trendly.exceptions import DependencyFailure, DependencyTimeout


@dataclass(frozen=True)
class SourceErrorMapper:
    """Turns httpx/parsing errors into DependencyFailure or DependencyTimeout.

    The underlying message is kept in ``details`` for diagnostics; the
    top-level message stays generic.
    """

    api_name: str = "External product source"

    def to_error(self, exc: Exception, source: str | None = None) -> DependencyFailure:
        label = f"{self.api_name} ({source})" if source else self.api_name
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
            return DependencyTimeout(
                f"Request to {label} timed out", details=str(exc) or type(exc).__name__
            )
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return DependencyFailure(details=f"{label} returned HTTP {status}")
        if isinstance(exc, httpx.RequestError):
            return DependencyFailure(details=f"{label} unreachable: {exc}")
        if isinstance(exc, (ValueError, KeyError, TypeError)):
            return DependencyFailure(details=f"Malformed response from {label}: {exc}")
        return DependencyFailure(details=str(exc) or type(exc).__name__)

    def raise_error(self, exc: Exception, source: str | None = None) -> NoReturn:
        """Map and raise. Never returns."""
        raise self.to_error(exc, source=source) from exc
