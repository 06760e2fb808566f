"""External store search (outside the catalog)."""
from fastapi import APIRouter, Query

from trendly.deps import SearchServiceDep
from trendly.schemas import ExternalSearchResponse

router = APIRouter(tags=["search"])


@router.get("/search", response_model=ExternalSearchResponse)
async def search_stores(
    search: SearchServiceDep,
    q: str | None = Query(default=None, description="Search text"),
    source: str | None = Query(
        default=None, description='Source name (e.g. "amazon", "flipkart") or "all"'
    ),
) -> ExternalSearchResponse:
    """Search external stores.

    400 when the query is missing, 502 when the store cannot be reached or
    answers with something unusable, 504 when it times out.
    """
    products = await search.search(q or "", source=source)
    return ExternalSearchResponse(products=products)
