"""Shared pytest fixtures: a fresh store per test, services, and an API client."""
import random
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from trendly.db import EntityStore, Product
from trendly.db.seed import seed_catalog
from trendly.main import create_app
from trendly.schemas import ExternalProduct, ProductCreate
from trendly.services import AuthService, CatalogService, WatchlistService
from trendly.sources import ProductSourceABC


class FakeSource(ProductSourceABC):
    """In-memory source returning canned products or raising a given error."""

    def __init__(
        self,
        name: str,
        products: list[ExternalProduct] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.products = products or []
        self.error = error
        self.queries: list[str] = []
        self.closed = False

    async def search(self, query: str) -> list[ExternalProduct]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.products)

    async def close(self) -> None:
        self.closed = True


def make_external(index: int, store: str = "Amazon", price: float = 10.0) -> ExternalProduct:
    return ExternalProduct(
        id=f"{store.lower()}_{index}",
        title=f"{store} item {index}",
        current_price=price,
        original_price=price,
        url=f"https://example.com/{store.lower()}/{index}",
        store=store,
    )


def make_product(
    name: str = "Widget",
    current_price: float = 10,
    original_price: float = 20,
    **fields,
) -> ProductCreate:
    return ProductCreate(
        name=name,
        current_price=current_price,
        original_price=original_price,
        **fields,
    )


@pytest.fixture
def store() -> Generator[EntityStore, None, None]:
    entity_store = EntityStore("sqlite://")
    yield entity_store
    entity_store.close()


@pytest.fixture
def seeded(store: EntityStore) -> list[Product]:
    """The sample catalog with a reproducible 30-day history."""
    return seed_catalog(store, rng=random.Random(42))


@pytest.fixture
def catalog(store: EntityStore) -> CatalogService:
    return CatalogService(store)


@pytest.fixture
def watchlist(store: EntityStore) -> WatchlistService:
    return WatchlistService(store)


@pytest.fixture
def auth(store: EntityStore) -> AuthService:
    return AuthService(store, secret="test-secret-with-enough-bytes-for-hs256")


@pytest.fixture
def sources() -> dict[str, FakeSource]:
    return {
        "amazon": FakeSource("amazon", [make_external(0), make_external(1)]),
        "flipkart": FakeSource("flipkart", [make_external(0, store="Flipkart")]),
    }


@pytest.fixture
def client(
    store: EntityStore, seeded: list[Product], sources: dict[str, FakeSource]
) -> Generator[TestClient, None, None]:
    """API client over the seeded store and fake external sources."""
    app = create_app(store=store, sources=sources)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email: str = "ada@example.com", password: str = "secret123") -> str:
    """Register an account and return its bearer token."""
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": "Ada"},
    )
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def token(client: TestClient) -> str:
    return register(client)


@pytest.fixture
def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
