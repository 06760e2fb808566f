"""API routers, all mounted under /api.

Includes routes for:
- /auth - Registration, login and the current user
- /products - Catalog listing, trending, search, detail and price refresh
- /watchlist - Per-user watched products and triggered alerts
- /dashboard - Watchlist totals
- /search - External store search (Amazon, Flipkart)
"""
from trendly.routers.auth import router as auth_router
from trendly.routers.dashboard import router as dashboard_router
from trendly.routers.products import router as products_router
from trendly.routers.search import router as search_router
from trendly.routers.watchlist import router as watchlist_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "products_router",
    "search_router",
    "watchlist_router",
]
