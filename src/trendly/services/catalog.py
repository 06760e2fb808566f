"""Catalog service: search, trending ranking, product detail and price refresh.

Reads and composes store entities; "not found" comes back as None so the
router decides how to report it.
"""
import logging

from trendly.db import EntityStore, PriceHistory, Product
from trendly.schemas import ProductRead, ProductWithHistory, discount_percent

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All Categories"
ALL_STORES = "All Stores"


def _matches_filter(value: str, wanted: str | None, sentinel: str, *, fold: bool = False) -> bool:
    """Exact match, unless the filter is absent or the 'all' sentinel."""
    if not wanted or wanted == sentinel:
        return True
    if fold:
        return value.casefold() == wanted.casefold()
    return value == wanted


def product_discount(product: Product) -> float:
    """Discount percent of a catalog product (0 when original price <= 0)."""
    return discount_percent(product.current_price, product.original_price)


def with_history(product: Product, history: list[PriceHistory]) -> ProductWithHistory:
    """Build the ProductWithHistory read model from a product and its history."""
    base = ProductRead.model_validate(product).model_dump(exclude={"discount_percent"})
    return ProductWithHistory.model_validate(
        {**base, "price_history": [h.model_dump() for h in history]}
    )


class CatalogService:
    """Product queries over an EntityStore."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def list_products(self) -> list[Product]:
        return self._store.list_products()

    def get_product(self, product_id: str) -> Product | None:
        return self._store.get_product(product_id)

    def search_products(
        self,
        query: str,
        category: str | None = None,
        store: str | None = None,
    ) -> list[Product]:
        """Case-insensitive substring search over name and description.

        Args:
            query: Text to look for; empty matches every product.
            category: Exact category, or None / "All Categories" for any.
            store: Store name (case-insensitive), or None / "All Stores" for any.

        Returns:
            Matching products in catalog insertion order.
        """
        needle = query.lower()
        return [
            p
            for p in self._store.list_products()
            if (needle in p.name.lower() or needle in p.description.lower())
            and _matches_filter(p.category, category, ALL_CATEGORIES)
            and _matches_filter(p.store, store, ALL_STORES, fold=True)
        ]

    def get_trending_products(self, limit: int = 6) -> list[Product]:
        """Products ordered by discount percent, highest first, at most ``limit``.

        Equal discounts keep their catalog order (sorted() is stable).
        """
        if limit <= 0:
            return []
        ranked = sorted(self._store.list_products(), key=product_discount, reverse=True)
        return ranked[:limit]

    def get_product_with_history(self, product_id: str) -> ProductWithHistory | None:
        product = self._store.get_product(product_id)
        if product is None:
            return None
        return with_history(product, self._store.list_price_history(product_id))

    def record_price(self, product_id: str, price: float) -> ProductWithHistory | None:
        """Apply a price refresh: update the current price and append to history."""
        product = self._store.record_price(product_id, price)
        if product is None:
            return None
        logger.debug("Recorded price %.2f for product %s", price, product_id)
        return with_history(product, self._store.list_price_history(product_id))
