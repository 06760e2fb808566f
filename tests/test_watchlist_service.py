"""Tests for WatchlistService: joins, ordering, alerts and dashboard stats."""
from datetime import timedelta

from conftest import make_product

from trendly.db import EntityStore, Watchlist
from trendly.schemas import DashboardStats
from trendly.services import WatchlistService
from trendly.utils import utc_now


def test_add_then_remove(store: EntityStore, watchlist: WatchlistService) -> None:
    product = store.create_product(make_product())

    watchlist.add_to_watchlist("u1", product.id, 5)
    assert watchlist.is_in_watchlist("u1", product.id)

    assert watchlist.remove_from_watchlist("u1", product.id) is True
    assert watchlist.is_in_watchlist("u1", product.id) is False
    assert watchlist.remove_from_watchlist("u1", product.id) is False


def test_watchlist_joins_product_and_orders_newest_first(
    store: EntityStore, watchlist: WatchlistService
) -> None:
    older = store.create_product(make_product("Older"))
    newer = store.create_product(make_product("Newer"))
    older_row = watchlist.add_to_watchlist("u1", older.id, 5)
    watchlist.add_to_watchlist("u1", newer.id, 5)
    # added_at is not updatable through the store API
    with store.session() as session:
        row = session.get(Watchlist, older_row.id)
        row.added_at = utc_now() - timedelta(days=1)
        session.add(row)

    items = watchlist.get_user_watchlist("u1")

    assert [item.product.name for item in items] == ["Newer", "Older"]
    assert items[0].product_id == newer.id
    assert items[0].product.id == newer.id


def test_watchlist_is_per_user(store: EntityStore, watchlist: WatchlistService) -> None:
    product = store.create_product(make_product())
    watchlist.add_to_watchlist("u1", product.id, 5)
    assert watchlist.get_user_watchlist("u2") == []


def test_deleted_products_are_dropped(store: EntityStore, watchlist: WatchlistService) -> None:
    kept = store.create_product(make_product("Kept"))
    gone = store.create_product(make_product("Gone"))
    watchlist.add_to_watchlist("u1", kept.id, 5)
    watchlist.add_to_watchlist("u1", gone.id, 5)

    store.delete_product(gone.id)

    assert [item.product.name for item in watchlist.get_user_watchlist("u1")] == ["Kept"]
    assert watchlist.compute_dashboard_stats("u1").items_watched == 1


def test_no_duplicate_guard_at_service_level(
    store: EntityStore, watchlist: WatchlistService
) -> None:
    product = store.create_product(make_product())
    watchlist.add_to_watchlist("u1", product.id, 5)
    watchlist.add_to_watchlist("u1", product.id, 6)
    assert len(watchlist.get_user_watchlist("u1")) == 2


def test_update_missing_item(store: EntityStore, watchlist: WatchlistService) -> None:
    product = store.create_product(make_product())
    assert watchlist.update_watchlist_item("u1", product.id, {"alert_enabled": False}) is None
    assert watchlist.get_user_watchlist("u1") == []


def test_update_toggles_alert(store: EntityStore, watchlist: WatchlistService) -> None:
    product = store.create_product(make_product())
    watchlist.add_to_watchlist("u1", product.id, 5)

    updated = watchlist.update_watchlist_item("u1", product.id, {"alert_enabled": False})

    assert updated.alert_enabled is False
    assert watchlist.get_user_watchlist("u1")[0].alert_enabled is False


class TestDashboardStats:
    def test_single_discounted_item(self, store: EntityStore, watchlist: WatchlistService) -> None:
        product = store.create_product(make_product(current_price=199, original_price=299))
        watchlist.add_to_watchlist("u1", product.id, 150, alert_enabled=True)

        stats = watchlist.compute_dashboard_stats("u1")

        assert stats == DashboardStats(
            total_saved=100, items_watched=1, price_alerts=1, deals_found=1
        )

    def test_empty_watchlist(self, watchlist: WatchlistService) -> None:
        assert watchlist.compute_dashboard_stats("u1") == DashboardStats()

    def test_price_increase_does_not_reduce_savings(
        self, store: EntityStore, watchlist: WatchlistService
    ) -> None:
        deal = store.create_product(make_product("Deal", current_price=80, original_price=100))
        pricier = store.create_product(make_product("Up", current_price=150, original_price=100))
        watchlist.add_to_watchlist("u1", deal.id, 70)
        watchlist.add_to_watchlist("u1", pricier.id, 90, alert_enabled=False)

        stats = watchlist.compute_dashboard_stats("u1")

        assert stats.total_saved == 20
        assert stats.items_watched == 2
        assert stats.price_alerts == 1
        assert stats.deals_found == 1

    def test_savings_rounded_half_up(self, store: EntityStore, watchlist: WatchlistService) -> None:
        a = store.create_product(make_product("A", current_price=9.25, original_price=10))
        b = store.create_product(make_product("B", current_price=9.75, original_price=10))
        watchlist.add_to_watchlist("u1", a.id, 1)
        watchlist.add_to_watchlist("u1", b.id, 1)
        # 0.75 + 0.25 = 1.0; and a lone 0.5 rounds up
        assert watchlist.compute_dashboard_stats("u1").total_saved == 1

        c = store.create_product(make_product("C", current_price=1.5, original_price=2))
        watchlist.add_to_watchlist("u2", c.id, 1)
        assert watchlist.compute_dashboard_stats("u2").total_saved == 1


def test_triggered_alerts(store: EntityStore, watchlist: WatchlistService) -> None:
    reached = store.create_product(make_product("Reached", current_price=90, original_price=120))
    above = store.create_product(make_product("Above", current_price=110, original_price=120))
    muted = store.create_product(make_product("Muted", current_price=50, original_price=120))
    watchlist.add_to_watchlist("u1", reached.id, 95)
    watchlist.add_to_watchlist("u1", above.id, 95)
    watchlist.add_to_watchlist("u1", muted.id, 95, alert_enabled=False)

    assert [item.product.name for item in watchlist.get_triggered_alerts("u1")] == ["Reached"]
