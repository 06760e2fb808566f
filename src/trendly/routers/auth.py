"""Account routes: register, login and the current user."""
from fastapi import APIRouter, status

from trendly.deps import AuthServiceDep, CurrentUserId, StoreDep
from trendly.exceptions import NotFound
from trendly.schemas import (AuthResponse, LoginRequest, RegisterRequest,
                             UserPublic)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, auth: AuthServiceDep) -> AuthResponse:
    """Create an account. 400 when the email is already registered.

    Plain def: bcrypt work runs in the threadpool.
    """
    user, token = auth.register(body.email, body.password, body.name)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth: AuthServiceDep) -> AuthResponse:
    """Exchange email and password for a token. 401 on bad credentials.

    Plain def: bcrypt work runs in the threadpool.
    """
    user, token = auth.login(body.email, body.password)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.get("/me", response_model=UserPublic)
async def me(user_id: CurrentUserId, store: StoreDep) -> UserPublic:
    user = store.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return UserPublic.model_validate(user)
