"""Entity store: engine, session management and CRUD for every table.

One EntityStore is created per application (see main.lifespan) and handed to
services; tests build a fresh one per test. The default URL is an in-memory
SQLite database shared by all sessions through a static pool.
"""
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from trendly import config
from trendly.db.models import PriceHistory, Product, User, Watchlist
from trendly.schemas import ProductCreate
from trendly.utils import utc_now

# Columns a caller may never overwrite through update_*
_PRODUCT_FROZEN = frozenset({"id"})
_WATCHLIST_FROZEN = frozenset({"id", "user_id", "product_id", "added_at"})

# SQLite keeps insertion order in rowid
_INSERTION_ORDER = text("rowid")


def _apply(row: Any, updates: Mapping[str, Any], frozen: Iterable[str]) -> None:
    blocked = set(frozen)
    for key, value in updates.items():
        if key in blocked or not hasattr(row, key):
            continue
        setattr(row, key, value)


class EntityStore:
    """Users, products, price history and watchlist rows for one process."""

    def __init__(self, database_url: str | None = None, *, echo: bool | None = None) -> None:
        url = database_url or config.DATABASE_URL
        kwargs: dict[str, Any] = {"echo": config.SQL_ECHO if echo is None else echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        self._engine = create_engine(url, **kwargs)
        SQLModel.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session; commits on success, rolls back on error."""
        session = Session(self._engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the engine. The in-memory database is gone afterwards."""
        self._engine.dispose()

    # ---- Users ----
    def create_user(self, name: str, email: str, password: str) -> User:
        """Insert a user. Email uniqueness is checked by the caller."""
        user = User(name=name, email=email, password=password)
        with self.session() as session:
            session.add(user)
        return user

    def get_user(self, user_id: str) -> User | None:
        with self.session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self.session() as session:
            return session.exec(select(User).where(User.email == email)).first()

    # ---- Products ----
    def list_products(self) -> list[Product]:
        with self.session() as session:
            return list(session.exec(select(Product).order_by(_INSERTION_ORDER)))

    def create_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        with self.session() as session:
            session.add(product)
        return product

    def get_product(self, product_id: str) -> Product | None:
        with self.session() as session:
            return session.get(Product, product_id)

    def update_product(self, product_id: str, updates: Mapping[str, Any]) -> Product | None:
        """Merge updates into a product and refresh last_updated."""
        with self.session() as session:
            product = session.get(Product, product_id)
            if product is None:
                return None
            _apply(product, updates, _PRODUCT_FROZEN)
            product.last_updated = utc_now()
            session.add(product)
        return product

    def record_price(self, product_id: str, price: float) -> Product | None:
        """Set the current price and append it to history in one transaction.

        The history point is dated with the product's new last_updated.
        """
        with self.session() as session:
            product = session.get(Product, product_id)
            if product is None:
                return None
            product.current_price = price
            product.last_updated = utc_now()
            session.add(product)
            session.add(
                PriceHistory(product_id=product_id, price=price, date=product.last_updated)
            )
        return product

    def delete_product(self, product_id: str) -> bool:
        """Remove a product and its price history. Watchlist rows are kept."""
        with self.session() as session:
            product = session.get(Product, product_id)
            if product is None:
                return False
            history = session.exec(
                select(PriceHistory).where(PriceHistory.product_id == product_id)
            ).all()
            for entry in history:
                session.delete(entry)
            session.delete(product)
        return True

    # ---- Price history ----
    def create_price_history(
        self, product_id: str, price: float, date: datetime | None = None
    ) -> PriceHistory:
        entry = PriceHistory(product_id=product_id, price=price)
        if date is not None:
            entry.date = date
        with self.session() as session:
            session.add(entry)
        return entry

    def list_price_history(self, product_id: str) -> list[PriceHistory]:
        """Price history for a product, oldest first."""
        statement = (
            select(PriceHistory)
            .where(PriceHistory.product_id == product_id)
            .order_by(PriceHistory.date, _INSERTION_ORDER)
        )
        with self.session() as session:
            return list(session.exec(statement))

    # ---- Watchlist ----
    def create_watchlist(
        self,
        user_id: str,
        product_id: str,
        target_price: float,
        alert_enabled: bool = True,
    ) -> Watchlist:
        """Insert a watchlist row. Does not check for an existing pair."""
        row = Watchlist(
            user_id=user_id,
            product_id=product_id,
            target_price=target_price,
            alert_enabled=alert_enabled,
        )
        with self.session() as session:
            session.add(row)
        return row

    def list_watchlist(self, user_id: str) -> list[Watchlist]:
        statement = (
            select(Watchlist)
            .where(Watchlist.user_id == user_id)
            .order_by(_INSERTION_ORDER)
        )
        with self.session() as session:
            return list(session.exec(statement))

    def find_watchlist(self, user_id: str, product_id: str) -> Watchlist | None:
        with self.session() as session:
            return self._find_watchlist(session, user_id, product_id)

    def update_watchlist(
        self, user_id: str, product_id: str, updates: Mapping[str, Any]
    ) -> Watchlist | None:
        """Merge updates into the (user, product) row; None if there is no such row."""
        with self.session() as session:
            row = self._find_watchlist(session, user_id, product_id)
            if row is None:
                return None
            _apply(row, updates, _WATCHLIST_FROZEN)
            session.add(row)
        return row

    def delete_watchlist(self, user_id: str, product_id: str) -> bool:
        """Remove the (user, product) row. False if nothing matched."""
        with self.session() as session:
            row = self._find_watchlist(session, user_id, product_id)
            if row is None:
                return False
            session.delete(row)
        return True

    @staticmethod
    def _find_watchlist(session: Session, user_id: str, product_id: str) -> Watchlist | None:
        statement = (
            select(Watchlist)
            .where(Watchlist.user_id == user_id, Watchlist.product_id == product_id)
            .order_by(_INSERTION_ORDER)
        )
        return session.exec(statement).first()
