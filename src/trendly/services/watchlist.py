"""Watchlist service: per-user tracked products, alerts and dashboard stats."""
import math
from collections.abc import Mapping
from typing import Any

from trendly.db import EntityStore, Watchlist
from trendly.schemas import (DashboardStats, ProductRead, WatchlistItem,
                             WatchlistRead)


class WatchlistService:
    """Joins watchlist rows to their products and derives statistics."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def get_user_watchlist(self, user_id: str) -> list[WatchlistItem]:
        """The user's watched products, most recently added first.

        Rows whose product no longer exists are skipped.
        """
        items: list[WatchlistItem] = []
        for row in self._store.list_watchlist(user_id):
            product = self._store.get_product(row.product_id)
            if product is None:
                continue
            items.append(
                WatchlistItem(
                    **WatchlistRead.model_validate(row).model_dump(),
                    product=ProductRead.model_validate(product),
                )
            )
        items.sort(key=lambda item: item.added_at, reverse=True)
        return items

    def add_to_watchlist(
        self,
        user_id: str,
        product_id: str,
        target_price: float,
        alert_enabled: bool = True,
    ) -> Watchlist:
        """Watch a product. Callers must reject duplicate pairs themselves."""
        return self._store.create_watchlist(user_id, product_id, target_price, alert_enabled)

    def remove_from_watchlist(self, user_id: str, product_id: str) -> bool:
        return self._store.delete_watchlist(user_id, product_id)

    def update_watchlist_item(
        self, user_id: str, product_id: str, updates: Mapping[str, Any]
    ) -> Watchlist | None:
        return self._store.update_watchlist(user_id, product_id, updates)

    def is_in_watchlist(self, user_id: str, product_id: str) -> bool:
        return self._store.find_watchlist(user_id, product_id) is not None

    def get_triggered_alerts(self, user_id: str) -> list[WatchlistItem]:
        """Alert-enabled items whose current price reached the target price."""
        return [
            item
            for item in self.get_user_watchlist(user_id)
            if item.alert_enabled and item.product.current_price <= item.target_price
        ]

    def compute_dashboard_stats(self, user_id: str) -> DashboardStats:
        """Totals over the user's watchlist.

        A price above the original counts as zero savings rather than
        reducing the total.
        """
        items = self.get_user_watchlist(user_id)
        saved = sum(
            max(0.0, item.product.original_price - item.product.current_price)
            for item in items
        )
        return DashboardStats(
            total_saved=math.floor(saved + 0.5),
            items_watched=len(items),
            price_alerts=sum(1 for item in items if item.alert_enabled),
            deals_found=sum(
                1 for item in items
                if item.product.current_price < item.product.original_price
            ),
        )
