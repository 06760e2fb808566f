"""Watchlist routes. Every route requires a bearer token."""
from fastapi import APIRouter, status

from trendly.deps import CatalogServiceDep, CurrentUserId, WatchlistServiceDep
from trendly.exceptions import NotFound, ValidationError
from trendly.schemas import (MessageResponse, WatchlistCreate, WatchlistItem,
                             WatchlistRead, WatchlistUpdate)

router = APIRouter(prefix="/watchlist", tags=["watchlist"])

_NOT_IN_WATCHLIST = "Item not found in watchlist"


@router.get("", response_model=list[WatchlistItem])
async def get_watchlist(user_id: CurrentUserId, watchlist: WatchlistServiceDep) -> list[WatchlistItem]:
    """The user's watched products, most recently added first."""
    return watchlist.get_user_watchlist(user_id)


@router.post("", response_model=WatchlistRead, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    body: WatchlistCreate,
    user_id: CurrentUserId,
    watchlist: WatchlistServiceDep,
    catalog: CatalogServiceDep,
) -> WatchlistRead:
    """Watch a product. 404 for an unknown product, 400 if already watched."""
    if catalog.get_product(body.product_id) is None:
        raise NotFound("Product not found")
    if watchlist.is_in_watchlist(user_id, body.product_id):
        raise ValidationError("Product already in watchlist")
    row = watchlist.add_to_watchlist(
        user_id, body.product_id, body.target_price, body.alert_enabled
    )
    return WatchlistRead.model_validate(row)


@router.get("/alerts", response_model=list[WatchlistItem])
async def get_triggered_alerts(
    user_id: CurrentUserId, watchlist: WatchlistServiceDep
) -> list[WatchlistItem]:
    """Alert-enabled items whose price is at or below the target price."""
    return watchlist.get_triggered_alerts(user_id)


@router.delete("/{product_id}", response_model=MessageResponse)
async def remove_from_watchlist(
    product_id: str, user_id: CurrentUserId, watchlist: WatchlistServiceDep
) -> MessageResponse:
    if not watchlist.remove_from_watchlist(user_id, product_id):
        raise NotFound(_NOT_IN_WATCHLIST)
    return MessageResponse(message="Item removed from watchlist")


@router.patch("/{product_id}", response_model=WatchlistRead)
async def update_watchlist_item(
    product_id: str,
    body: WatchlistUpdate,
    user_id: CurrentUserId,
    watchlist: WatchlistServiceDep,
) -> WatchlistRead:
    """Change the target price or alert toggle of a watched product."""
    updated = watchlist.update_watchlist_item(
        user_id, product_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    if updated is None:
        raise NotFound(_NOT_IN_WATCHLIST)
    return WatchlistRead.model_validate(updated)
