"""Database models for the price watch service.

Users, products, their price history and per-user watchlist rows. The store
keeps them in an in-memory SQLite database for the lifetime of the process.
All timestamps are timezone-aware UTC.
"""
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, TypeDecorator
from sqlmodel import Field, SQLModel

from trendly.utils import utc_now


def new_id() -> str:
    """Random unique identifier for a new row."""
    return str(uuid4())


class UTCDateTime(TypeDecorator):
    """Stores datetimes as UTC and loads them back timezone-aware.

    SQLite keeps no offset, so naive values coming out of the database are
    tagged as UTC; naive values going in are assumed to be UTC already.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def _timestamp() -> Any:
    return Field(default_factory=utc_now, sa_type=UTCDateTime)


class User(SQLModel, table=True):
    """Registered account."""

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    password: str  # bcrypt hash, never the plain text
    created_at: datetime = _timestamp()


class Product(SQLModel, table=True):
    """Catalog product with its latest known price."""

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: str = ""
    image: str = ""
    category: str = ""
    current_price: float = Field(ge=0)
    original_price: float = Field(ge=0)
    url: str = ""
    store: str = ""
    rating: float | None = None
    last_updated: datetime = _timestamp()


class PriceHistory(SQLModel, table=True):
    """One observed price for a product. Append-only."""

    id: str = Field(default_factory=new_id, primary_key=True)
    product_id: str = Field(foreign_key="product.id", index=True)
    price: float
    date: datetime = _timestamp()


class Watchlist(SQLModel, table=True):
    """A user's tracked product with alert preferences."""

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    product_id: str = Field(foreign_key="product.id", index=True)
    target_price: float
    alert_enabled: bool = True
    added_at: datetime = _timestamp()
