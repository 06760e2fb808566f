"""Database package: models, the entity store and sample data."""
from trendly.db.models import PriceHistory, Product, User, Watchlist
from trendly.db.store import EntityStore

__all__ = ["EntityStore", "PriceHistory", "Product", "User", "Watchlist"]
