"""SerpAPI-backed product sources (Amazon, Flipkart)."""
import logging
from abc import abstractmethod
from datetime import datetime
from typing import Any

import httpx

from trendly import config
from trendly.schemas import ExternalProduct
from trendly.sources.base import ProductSourceABC
from trendly.utils import first_present, parse_price, utc_now

logger = logging.getLogger(__name__)


def _text(value: Any) -> str | None:
    """Keep only string values; SerpAPI sometimes nests objects where we expect a URL."""
    return value if isinstance(value, str) else None


class SerpApiSource(ProductSourceABC):
    """Searches one store through SerpAPI's ``/search.json`` endpoint.

    Subclasses set the SerpAPI engine, the query parameter that engine
    expects, and how a raw result item maps to an ExternalProduct.
    """

    BASE_URL = "https://serpapi.com"
    engine: str = ""
    query_param: str = "q"
    store_name: str = ""
    # SerpAPI returns results under different keys depending on the engine
    result_keys: tuple[str, ...] = ("organic_results",)

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            api_key: SerpAPI key. Defaults to the SERPAPI_KEY env var.
            timeout: Request timeout in seconds. Defaults to SOURCE_TIMEOUT.
            client: Pre-built client (tests pass one with a mock transport).
        """
        self._api_key = api_key if api_key is not None else config.SERPAPI_KEY
        self._client = client or httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={"Accept": "application/json"},
            timeout=timeout if timeout is not None else config.SOURCE_TIMEOUT,
        )

    async def search(self, query: str) -> list[ExternalProduct]:
        response = await self._client.get(
            "/search.json",
            params={"engine": self.engine, self.query_param: query, "api_key": self._api_key},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        if data.get("error"):
            raise ValueError(str(data["error"]))

        items = next((data[key] for key in self.result_keys if data.get(key)), [])
        now = utc_now()
        products = [
            self.to_product(index, item, now)
            for index, item in enumerate(items)
            if isinstance(item, dict)
        ]
        logger.debug("%s returned %d products for %r", self.name, len(products), query)
        return products

    @abstractmethod
    def to_product(self, index: int, item: dict[str, Any], now: datetime) -> ExternalProduct:
        """Map one raw SerpAPI result item to an ExternalProduct."""

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class AmazonSource(SerpApiSource):
    """Amazon search results. No strike price is exposed, so original = current."""

    name = "amazon"
    engine = "amazon"
    query_param = "k"
    store_name = "Amazon"
    result_keys = ("organic_results", "search_results", "shopping_results")

    def to_product(self, index: int, item: dict[str, Any], now: datetime) -> ExternalProduct:
        price = parse_price(
            first_present(item, "extracted_price", "price", "offers.0.price", "buybox.price")
        )
        return ExternalProduct(
            id=f"amazon_{index}",
            title=item.get("title") or item.get("name") or "",
            image=_text(first_present(
                item, "thumbnail", "image", "inline_images.0", "product.images.0", "images.0"
            )),
            current_price=price,
            original_price=price,
            url=_text(first_present(item, "link", "url", "product.link")) or "",
            description=_text(
                first_present(item, "snippet", "description", "excerpt", "text")
            ) or "",
            store=self.store_name,
            last_updated=now,
        )


class FlipkartSource(SerpApiSource):
    """Flipkart search results, with the strike price as the original price."""

    name = "flipkart"
    engine = "flipkart"
    store_name = "Flipkart"

    def to_product(self, index: int, item: dict[str, Any], now: datetime) -> ExternalProduct:
        return ExternalProduct(
            id=f"flipkart_{index}",
            title=item.get("title") or "",
            image=_text(first_present(item, "thumbnail", "image")),
            current_price=parse_price(item.get("price")),
            original_price=parse_price(item.get("price_strike")),
            url=item.get("link") or "",
            description=item.get("snippet") or "",
            store=self.store_name,
            last_updated=now,
        )
