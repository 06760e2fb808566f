"""External product search over one or all configured sources."""
import asyncio
import logging
from collections.abc import Mapping

import httpx

from trendly.exceptions import ValidationError
from trendly.schemas import ExternalProduct
from trendly.sources import ProductSourceABC, SourceErrorMapper

logger = logging.getLogger(__name__)

ALL_SOURCES = "all"

# Exceptions from sources we map to dependency errors; all others propagate (bugs).
_SOURCE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
    httpx.HTTPError,
)


class ProductSearchService:
    """Single best-effort search per request; failures are never retried."""

    def __init__(
        self,
        sources: Mapping[str, ProductSourceABC],
        *,
        default_source: str = "amazon",
        error_mapper: SourceErrorMapper | None = None,
    ) -> None:
        self._sources = dict(sources)
        self._default_source = default_source
        self._error_mapper = error_mapper or SourceErrorMapper(api_name="Product search")

    @property
    def source_names(self) -> list[str]:
        return list(self._sources)

    async def search(self, query: str, source: str | None = None) -> list[ExternalProduct]:
        """Search one source, or every source when ``source`` is "all".

        Raises:
            ValidationError: empty query or unknown source name.
            DependencyFailure: the source failed (every source, for "all").
            DependencyTimeout: the source timed out.
        """
        query = query.strip()
        if not query:
            raise ValidationError("Missing query")
        name = (source or self._default_source).lower()
        if name == ALL_SOURCES:
            return await self._search_all(query)

        provider = self._sources.get(name)
        if provider is None:
            available = ", ".join([*self._sources, ALL_SOURCES])
            raise ValidationError(f"Unknown source: {name}. Available: {available}")
        try:
            return await provider.search(query)
        except _SOURCE_EXCEPTIONS as exc:
            logger.warning("Search: %s source failed for %r: %s", name, query, exc)
            self._error_mapper.raise_error(exc, source=name)

    async def _search_all(self, query: str) -> list[ExternalProduct]:
        """Gather every source; skip failed ones unless all of them failed."""
        names = list(self._sources)
        results = await asyncio.gather(
            *(self._sources[n].search(query) for n in names),
            return_exceptions=True,
        )
        products: list[ExternalProduct] = []
        failures: list[tuple[str, Exception]] = []
        for name, result in zip(names, results):
            if isinstance(result, _SOURCE_EXCEPTIONS):
                logger.warning("Search: %s source failed for %r: %s", name, query, result)
                failures.append((name, result))
                continue
            if isinstance(result, BaseException):
                raise result
            products.extend(result)
        if failures and len(failures) == len(names):
            name, exc = failures[0]
            self._error_mapper.raise_error(exc, source=name)
        return products

    async def close(self) -> None:
        """Close all sources. Call from app lifespan shutdown."""
        for name, source in self._sources.items():
            try:
                await source.close()
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Error closing source %s: %s", name, exc)
