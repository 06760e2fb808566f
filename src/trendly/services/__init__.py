"""Service layer: catalog queries, watchlists, identity and external search."""
from trendly.services.auth import AuthService
from trendly.services.catalog import CatalogService
from trendly.services.search import ProductSearchService
from trendly.services.watchlist import WatchlistService

__all__ = [
    "AuthService",
    "CatalogService",
    "ProductSearchService",
    "WatchlistService",
]
