"""Tests for CatalogService: search, trending ranking, detail and price refresh."""
import random

import pytest
from conftest import make_product

from trendly.db import EntityStore, Product
from trendly.db.seed import seed_catalog
from trendly.services import CatalogService
from trendly.services.catalog import product_discount


class TestSearch:
    def test_iphone_matches_only_iphone(self, catalog: CatalogService, seeded: list[Product]) -> None:
        results = catalog.search_products("iPhone")
        assert [p.name for p in results] == ["iPhone 15 Pro"]

    def test_case_insensitive_over_description(
        self, catalog: CatalogService, seeded: list[Product]
    ) -> None:
        results = catalog.search_products("NOISE CANCELLATION")
        assert [p.name for p in results] == ["Premium Wireless Headphones"]

    def test_category_filter(self, catalog: CatalogService, seeded: list[Product]) -> None:
        results = catalog.search_products("", category="Electronics")
        assert [p.name for p in results] == [
            "Premium Wireless Headphones",
            'MacBook Pro 14"',
            "iPhone 15 Pro",
        ]

    def test_all_categories_sentinel_disables_filter(
        self, catalog: CatalogService, seeded: list[Product]
    ) -> None:
        assert len(catalog.search_products("", category="All Categories")) == len(seeded)

    def test_category_is_exact(self, catalog: CatalogService, seeded: list[Product]) -> None:
        assert catalog.search_products("", category="electronics") == []

    def test_store_filter(self, catalog: CatalogService, seeded: list[Product]) -> None:
        results = catalog.search_products("", store="amazon")
        assert {p.store for p in results} == {"Amazon"}
        assert len(results) == 2

    def test_no_match(self, catalog: CatalogService, seeded: list[Product]) -> None:
        assert catalog.search_products("toaster") == []


class TestTrending:
    def test_sorted_by_discount_and_limited(
        self, catalog: CatalogService, seeded: list[Product]
    ) -> None:
        results = catalog.get_trending_products(limit=3)
        assert len(results) == 3
        discounts = [product_discount(p) for p in results]
        assert discounts == sorted(discounts, reverse=True)
        assert results[0].name == "Premium Wireless Headphones"

    @pytest.mark.parametrize("limit", [0, 1, 6, 100])
    def test_never_exceeds_limit(
        self, catalog: CatalogService, seeded: list[Product], limit: int
    ) -> None:
        assert len(catalog.get_trending_products(limit)) == min(limit, len(seeded))

    def test_ties_keep_catalog_order(self, store: EntityStore, catalog: CatalogService) -> None:
        for name in ("First", "Second", "Third"):
            store.create_product(make_product(name, current_price=50, original_price=100))
        assert [p.name for p in catalog.get_trending_products()] == ["First", "Second", "Third"]

    def test_zero_original_price_counts_as_no_discount(
        self, store: EntityStore, catalog: CatalogService
    ) -> None:
        store.create_product(make_product("Free", current_price=0, original_price=0))
        store.create_product(make_product("Deal", current_price=5, original_price=10))
        results = catalog.get_trending_products()
        assert [p.name for p in results] == ["Deal", "Free"]
        assert product_discount(results[1]) == 0


class TestProductWithHistory:
    def test_new_product_has_empty_history(
        self, store: EntityStore, catalog: CatalogService
    ) -> None:
        created = store.create_product(
            make_product("Kettle", description="Boils", category="Home", store="Argos")
        )
        detail = catalog.get_product_with_history(created.id)

        assert detail is not None
        assert detail.price_history == []
        assert detail.id == created.id
        assert detail.name == "Kettle"
        assert detail.description == "Boils"
        assert detail.current_price == created.current_price
        assert detail.original_price == created.original_price
        assert detail.store == "Argos"

    def test_history_sorted_ascending(self, catalog: CatalogService, seeded: list[Product]) -> None:
        detail = catalog.get_product_with_history(seeded[0].id)
        dates = [h.date for h in detail.price_history]
        assert len(dates) == 31
        assert dates == sorted(dates)

    def test_missing(self, catalog: CatalogService) -> None:
        assert catalog.get_product_with_history("nope") is None


class TestRecordPrice:
    def test_updates_price_and_appends_history(
        self, store: EntityStore, catalog: CatalogService
    ) -> None:
        product = store.create_product(make_product(current_price=100, original_price=120))

        detail = catalog.record_price(product.id, 90)

        assert detail.current_price == 90
        assert [h.price for h in detail.price_history] == [90]
        assert store.get_product(product.id).current_price == 90

    def test_missing_product(self, catalog: CatalogService) -> None:
        assert catalog.record_price("nope", 10) is None


def test_seeded_history_trends_down_to_original(store: EntityStore) -> None:
    products = seed_catalog(store, days=10, rng=random.Random(1))
    for product in products:
        history = store.list_price_history(product.id)
        assert len(history) == 11
        # Today's point has no reduction applied
        assert history[-1].price == product.original_price
        assert all(h.price <= product.original_price for h in history)
