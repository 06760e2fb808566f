"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

The lifespan (main.py) creates the store, services and sources once and
attaches them to app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from trendly.db import EntityStore
from trendly.exceptions import AuthenticationRequired
from trendly.services import (AuthService, CatalogService,
                              ProductSearchService, WatchlistService)

_bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> EntityStore:
    """Resolve the process-wide EntityStore from app.state."""
    return request.app.state.store


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_watchlist_service(request: Request) -> WatchlistService:
    return request.app.state.watchlist_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_search_service(request: Request) -> ProductSearchService:
    return request.app.state.search_service


def get_current_user_id(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    """Resolve the bearer token to a user id.

    Runs before the route body, so a missing (401) or invalid (403) token
    stops the request before any store access.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationRequired()
    return auth.resolve_token(credentials.credentials)


# Type aliases for route injection
StoreDep = Annotated[EntityStore, Depends(get_store)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
WatchlistServiceDep = Annotated[WatchlistService, Depends(get_watchlist_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
SearchServiceDep = Annotated[ProductSearchService, Depends(get_search_service)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
