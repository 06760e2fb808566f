"""Pydantic schemas for API and runtime use.

Attributes are snake_case; JSON on the wire is camelCase (``currentPrice``,
``priceHistory``...). Requests accept either form.
"""
from datetime import datetime

from pydantic import (BaseModel, ConfigDict, EmailStr, Field, computed_field)
from pydantic.alias_generators import to_camel

from trendly.utils import utc_now


class ApiModel(BaseModel):
    """Base for every schema exchanged over HTTP."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def discount_percent(current_price: float, original_price: float) -> float:
    """Percentage off the original price; 0 when there is no usable original."""
    if original_price <= 0:
        return 0.0
    return (original_price - current_price) / original_price * 100


# ---- Products ----


class ProductCreate(ApiModel):
    """Fields needed to add a product to the catalog."""

    name: str = Field(min_length=1)
    description: str = ""
    image: str = ""
    category: str = ""
    current_price: float = Field(ge=0)
    original_price: float = Field(ge=0)
    url: str = ""
    store: str = ""
    rating: float | None = Field(default=None, ge=0, le=5)


class ProductRead(ProductCreate):
    """Catalog product as returned by the API."""

    id: str
    last_updated: datetime

    @computed_field(alias="discountPercent")
    @property
    def discount_percent(self) -> float:
        return round(discount_percent(self.current_price, self.original_price), 2)


class PriceHistoryRead(ApiModel):
    id: str
    product_id: str
    price: float
    date: datetime


class ProductWithHistory(ProductRead):
    """Product plus its price history, oldest first."""

    price_history: list[PriceHistoryRead] = Field(default_factory=list)


class PriceUpdate(ApiModel):
    """A price refresh event for one product."""

    price: float = Field(ge=0)


# ---- Watchlist ----


class WatchlistRead(ApiModel):
    id: str
    user_id: str
    product_id: str
    target_price: float
    alert_enabled: bool
    added_at: datetime


class WatchlistItem(WatchlistRead):
    """Watchlist row joined with a snapshot of its product."""

    product: ProductRead


class WatchlistCreate(ApiModel):
    product_id: str = Field(min_length=1)
    target_price: float = Field(ge=0)
    alert_enabled: bool = True


class WatchlistUpdate(ApiModel):
    """Partial update; only fields present in the request are applied."""

    target_price: float | None = Field(default=None, ge=0)
    alert_enabled: bool | None = None


class DashboardStats(ApiModel):
    total_saved: int = 0
    items_watched: int = 0
    price_alerts: int = 0
    deals_found: int = 0


# ---- Auth ----


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)


class UserPublic(ApiModel):
    id: str
    name: str
    email: str


class AuthResponse(ApiModel):
    user: UserPublic
    token: str


# ---- External search ----


class ExternalProduct(ApiModel):
    """Search result from an external store; not part of the catalog."""

    id: str
    title: str = ""
    image: str | None = None
    current_price: float | None = None
    original_price: float | None = None
    url: str = ""
    description: str = ""
    store: str
    last_updated: datetime = Field(default_factory=utc_now)
    price_history: list[PriceHistoryRead] = Field(default_factory=list)


class ExternalSearchResponse(ApiModel):
    products: list[ExternalProduct]


class MessageResponse(ApiModel):
    message: str


__all__ = [
    "ApiModel",
    "AuthResponse",
    "DashboardStats",
    "ExternalProduct",
    "ExternalSearchResponse",
    "LoginRequest",
    "MessageResponse",
    "PriceHistoryRead",
    "PriceUpdate",
    "ProductCreate",
    "ProductRead",
    "ProductWithHistory",
    "RegisterRequest",
    "UserPublic",
    "WatchlistCreate",
    "WatchlistItem",
    "WatchlistRead",
    "WatchlistUpdate",
    "discount_percent",
]
