"""Sample catalog used to populate a fresh store at startup."""
import logging
import random
from datetime import timedelta

from trendly.db.models import Product
from trendly.db.store import EntityStore
from trendly.schemas import ProductCreate
from trendly.utils import utc_now

logger = logging.getLogger(__name__)

_IMAGE = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=300"

SAMPLE_PRODUCTS: list[ProductCreate] = [
    ProductCreate(
        name="Premium Wireless Headphones",
        description="High-quality audio with noise cancellation",
        image=_IMAGE.format("photo-1505740420928-5e560c06d30e"),
        category="Electronics",
        current_price=199,
        original_price=299,
        url="https://example.com/headphones",
        store="Amazon",
    ),
    ProductCreate(
        name='MacBook Pro 14"',
        description="M2 chip with 16GB RAM and 512GB SSD",
        image=_IMAGE.format("photo-1496181133206-80ce9b88a853"),
        category="Electronics",
        current_price=1899,
        original_price=1999,
        url="https://example.com/macbook",
        store="Apple",
    ),
    ProductCreate(
        name="iPhone 15 Pro",
        description="256GB, Titanium, Pro camera system",
        image=_IMAGE.format("photo-1592899677977-9c10ca588bbd"),
        category="Electronics",
        current_price=1099,
        original_price=1199,
        url="https://example.com/iphone",
        store="Apple",
    ),
    ProductCreate(
        name="PlayStation 5",
        description="Console with Ultra HD Blu-ray disc drive",
        image=_IMAGE.format("photo-1606144042614-b2417e99c4e3"),
        category="Gaming",
        current_price=499,
        original_price=599,
        url="https://example.com/ps5",
        store="Best Buy",
    ),
    ProductCreate(
        name="Nike Air Max 270",
        description="Comfortable running shoes with air cushioning",
        image=_IMAGE.format("photo-1542291026-7eec264c27ff"),
        category="Fashion",
        current_price=129,
        original_price=150,
        url="https://example.com/nike-shoes",
        store="Nike",
    ),
    ProductCreate(
        name="Instant Pot Duo 7-in-1",
        description="Electric pressure cooker with multiple functions",
        image=_IMAGE.format("photo-1556909114-f6e7ad7d3136"),
        category="Home & Garden",
        current_price=79,
        original_price=99,
        url="https://example.com/instant-pot",
        store="Amazon",
    ),
]


def seed_catalog(
    store: EntityStore,
    days: int = 30,
    rng: random.Random | None = None,
    products: list[ProductCreate] | None = None,
) -> list[Product]:
    """Create the sample products, each with ``days + 1`` daily price points.

    Prices trend down towards today: the point ``i`` days ago is the original
    price reduced by a random 10-30% scaled by ``i / days``.

    Args:
        store: Store to populate.
        days: How many days of history to generate per product.
        rng: Random source; pass a seeded one for reproducible history.
        products: Catalog to create instead of SAMPLE_PRODUCTS.

    Returns:
        The created products, in insertion order.
    """
    rng = rng or random.Random()
    now = utc_now()
    created: list[Product] = []
    for data in products if products is not None else SAMPLE_PRODUCTS:
        product = store.create_product(data)
        for i in range(days, -1, -1):
            variation = 0.1 + rng.random() * 0.2
            trend = i / days if days else 0.0
            price = round(product.original_price * (1 - variation * trend))
            store.create_price_history(product.id, price, date=now - timedelta(days=i))
        created.append(product)
    logger.info("Seeded %d products with %d days of price history", len(created), days)
    return created
