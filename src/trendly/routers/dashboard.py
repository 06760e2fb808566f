"""Dashboard route: watchlist totals for the current user."""
from fastapi import APIRouter

from trendly.deps import CurrentUserId, WatchlistServiceDep
from trendly.schemas import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    user_id: CurrentUserId, watchlist: WatchlistServiceDep
) -> DashboardStats:
    """Savings, watched items, enabled alerts and deals across the watchlist."""
    return watchlist.compute_dashboard_stats(user_id)
