"""Catalog routes: listing, trending, search, detail and price refresh."""
from fastapi import APIRouter, Query

from trendly.deps import CatalogServiceDep, CurrentUserId
from trendly.exceptions import NotFound
from trendly.schemas import PriceUpdate, ProductRead, ProductWithHistory

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
async def list_products(catalog: CatalogServiceDep) -> list[ProductRead]:
    return [ProductRead.model_validate(p) for p in catalog.list_products()]


@router.get("/trending", response_model=list[ProductRead])
async def get_trending_products(
    catalog: CatalogServiceDep,
    limit: int = Query(default=6, ge=1, le=50, description="Max results"),
) -> list[ProductRead]:
    """Products with the biggest discount off their original price."""
    return [ProductRead.model_validate(p) for p in catalog.get_trending_products(limit)]


@router.get("/search", response_model=list[ProductRead])
async def search_products(
    catalog: CatalogServiceDep,
    q: str = Query(default="", description="Text to match in name or description"),
    category: str | None = Query(default=None, description='Exact category, or "All Categories"'),
    store: str | None = Query(default=None, description='Store name, or "All Stores"'),
) -> list[ProductRead]:
    """Search the catalog. An empty query matches every product."""
    results = catalog.search_products(q, category=category, store=store)
    return [ProductRead.model_validate(p) for p in results]


@router.get("/{product_id}", response_model=ProductWithHistory)
async def get_product(product_id: str, catalog: CatalogServiceDep) -> ProductWithHistory:
    """Get a product with its price history, oldest point first."""
    product = catalog.get_product_with_history(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


@router.post("/{product_id}/prices", response_model=ProductWithHistory)
async def record_price(
    product_id: str,
    body: PriceUpdate,
    catalog: CatalogServiceDep,
    _user_id: CurrentUserId,
) -> ProductWithHistory:
    """Record a new observed price: updates the current price and extends history."""
    product = catalog.record_price(product_id, body.price)
    if product is None:
        raise NotFound("Product not found")
    return product
