"""Tests for ProductSearchService and SourceErrorMapper."""
import asyncio

import httpx
import pytest
from conftest import FakeSource, make_external

from trendly.exceptions import (DependencyFailure, DependencyTimeout,
                                ValidationError)
from trendly.services import ProductSearchService
from trendly.sources import SourceErrorMapper


def _service(**sources: FakeSource) -> ProductSearchService:
    return ProductSearchService(sources)


class TestSingleSource:
    def test_defaults_to_amazon(self, sources: dict[str, FakeSource]) -> None:
        service = ProductSearchService(sources)
        products = asyncio.run(service.search("  headphones "))

        assert [p.id for p in products] == ["amazon_0", "amazon_1"]
        assert sources["amazon"].queries == ["headphones"]
        assert sources["flipkart"].queries == []

    def test_named_source_is_case_insensitive(self, sources: dict[str, FakeSource]) -> None:
        products = asyncio.run(ProductSearchService(sources).search("tv", source="Flipkart"))
        assert [p.store for p in products] == ["Flipkart"]

    @pytest.mark.parametrize("query", ["", "   "])
    def test_missing_query(self, sources: dict[str, FakeSource], query: str) -> None:
        with pytest.raises(ValidationError, match="Missing query"):
            asyncio.run(ProductSearchService(sources).search(query))
        assert sources["amazon"].queries == []

    def test_unknown_source_lists_available(self, sources: dict[str, FakeSource]) -> None:
        with pytest.raises(ValidationError) as excinfo:
            asyncio.run(ProductSearchService(sources).search("tv", source="ebay"))
        assert excinfo.value.status_code == 400
        assert "amazon, flipkart, all" in excinfo.value.message

    def test_request_error_maps_to_502(self) -> None:
        service = _service(amazon=FakeSource("amazon", error=httpx.ConnectError("refused")))
        with pytest.raises(DependencyFailure) as excinfo:
            asyncio.run(service.search("tv"))
        assert excinfo.value.status_code == 502
        assert excinfo.value.message == "Scraping failed"
        assert "unreachable" in excinfo.value.details

    def test_timeout_maps_to_504(self) -> None:
        service = _service(amazon=FakeSource("amazon", error=httpx.ReadTimeout("slow")))
        with pytest.raises(DependencyTimeout) as excinfo:
            asyncio.run(service.search("tv"))
        assert excinfo.value.status_code == 504

    def test_malformed_payload_maps_to_502(self) -> None:
        service = _service(amazon=FakeSource("amazon", error=ValueError("bad json")))
        with pytest.raises(DependencyFailure, match="Scraping failed"):
            asyncio.run(service.search("tv"))

    def test_programming_errors_propagate(self) -> None:
        service = _service(amazon=FakeSource("amazon", error=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            asyncio.run(service.search("tv"))


class TestAllSources:
    def test_merges_in_source_order(self, sources: dict[str, FakeSource]) -> None:
        products = asyncio.run(ProductSearchService(sources).search("tv", source="all"))
        assert [p.id for p in products] == ["amazon_0", "amazon_1", "flipkart_0"]

    def test_skips_failed_source(self) -> None:
        service = _service(
            amazon=FakeSource("amazon", error=httpx.ConnectError("refused")),
            flipkart=FakeSource("flipkart", [make_external(0, store="Flipkart")]),
        )
        products = asyncio.run(service.search("tv", source="all"))
        assert [p.id for p in products] == ["flipkart_0"]

    def test_raises_when_every_source_fails(self) -> None:
        service = _service(
            amazon=FakeSource("amazon", error=httpx.ReadTimeout("slow")),
            flipkart=FakeSource("flipkart", error=ValueError("bad")),
        )
        with pytest.raises(DependencyTimeout):
            asyncio.run(service.search("tv", source="all"))


def test_close_closes_every_source(sources: dict[str, FakeSource]) -> None:
    asyncio.run(ProductSearchService(sources).close())
    assert all(source.closed for source in sources.values())


class TestSourceErrorMapper:
    mapper = SourceErrorMapper(api_name="Stores")

    def test_http_status(self) -> None:
        request = httpx.Request("GET", "https://serpapi.com/search.json")
        response = httpx.Response(429, request=request)
        exc = httpx.HTTPStatusError("limited", request=request, response=response)

        error = self.mapper.to_error(exc, source="amazon")

        assert type(error) is DependencyFailure
        assert error.details == "Stores (amazon) returned HTTP 429"

    def test_asyncio_timeout(self) -> None:
        assert isinstance(self.mapper.to_error(asyncio.TimeoutError()), DependencyTimeout)

    def test_raise_error_chains_cause(self) -> None:
        cause = KeyError("price")
        with pytest.raises(DependencyFailure) as excinfo:
            self.mapper.raise_error(cause)
        assert excinfo.value.__cause__ is cause
        assert excinfo.value.to_dict()["message"] == "Scraping failed"
