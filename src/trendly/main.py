"""Main module for the Trendly price watch service."""
import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trendly import __version__, config
from trendly.db import EntityStore
from trendly.db.seed import seed_catalog
from trendly.exceptions import TrendlyError
from trendly.routers import (auth_router, dashboard_router, products_router,
                             search_router, watchlist_router)
from trendly.services import (AuthService, CatalogService,
                              ProductSearchService, WatchlistService)
from trendly.sources import AmazonSource, FlipkartSource, ProductSourceABC

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def default_sources() -> dict[str, ProductSourceABC]:
    if not config.SERPAPI_KEY:
        logger.warning("SERPAPI_KEY is not set; external search requests will fail")
    return {"amazon": AmazonSource(), "flipkart": FlipkartSource()}


async def trendly_error_handler(_request: Request, exc: TrendlyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s: %s (%s)", type(exc).__name__, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid input data", "details": jsonable_encoder(exc.errors())},
    )


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(
    *,
    store: EntityStore | None = None,
    sources: Mapping[str, ProductSourceABC] | None = None,
    seed: bool | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        store: Store to serve from. A new in-memory store is created (and
            closed on shutdown) when omitted.
        sources: External search sources by name. Defaults to SerpAPI
            Amazon and Flipkart.
        seed: Populate the store with the sample catalog. Defaults to
            SEED_CATALOG for a store created here, False for a given one.
    """
    config.configure_logging()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Create the store, services and sources at startup; close them on shutdown."""
        owns_store = store is None
        entity_store = store or EntityStore()
        if (seed if seed is not None else (owns_store and config.SEED_CATALOG)):
            seed_catalog(entity_store)

        search_service = ProductSearchService(
            sources if sources is not None else default_sources()
        )

        fastapi_app.state.store = entity_store
        fastapi_app.state.catalog_service = CatalogService(entity_store)
        fastapi_app.state.watchlist_service = WatchlistService(entity_store)
        fastapi_app.state.auth_service = AuthService(entity_store)
        fastapi_app.state.search_service = search_service
        logger.info("Trendly started (sources: %s)", ", ".join(search_service.source_names))

        yield

        await search_service.close()
        if owns_store:
            entity_store.close()

    fastapi_app = FastAPI(
        title="Trendly",
        description="Price tracking across e-commerce stores with per-user watchlists",
        version=__version__,
        lifespan=lifespan,
    )
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.add_exception_handler(TrendlyError, trendly_error_handler)
    fastapi_app.add_exception_handler(RequestValidationError, validation_error_handler)
    fastapi_app.add_exception_handler(StarletteHTTPException, http_error_handler)
    fastapi_app.add_exception_handler(Exception, unhandled_error_handler)

    for router in (auth_router, products_router, watchlist_router, dashboard_router, search_router):
        fastapi_app.include_router(router, prefix=API_PREFIX)

    @fastapi_app.get(f"{API_PREFIX}/health")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `trendly` console script."""
    uvicorn.run("trendly.main:app", host=config.HOST, port=config.PORT)


def run_dev():
    """Run the development server with auto-reload."""
    uvicorn.run("trendly.main:app", host="0.0.0.0", port=config.PORT, reload=True)
