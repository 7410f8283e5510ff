"""Register/login endpoints and the access gate dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sweetshop.core.database import get_db
from sweetshop.core.errors import Forbidden, Unauthenticated
from sweetshop.core.security import ROLE_ADMIN, create_access_token
from sweetshop.models.user import User
from sweetshop.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
    UsersListResponse,
)
from sweetshop.services.identity import (
    authenticate_user,
    list_users,
    register_user,
    resolve_token,
)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(sub=user.id),
        token_type="bearer",
        user=UserRead.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """Create a regular user account and return a JWT for it."""
    user = register_user(db, body.username, body.email, body.password)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = authenticate_user(db, body.email, body.password)
    return _token_response(user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return the current user. Raises Unauthenticated (401)."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authentication required")
    user = resolve_token(db, credentials.credentials)
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises Forbidden (403) otherwise."""
    if current_user.role != ROLE_ADMIN:
        raise Forbidden("Insufficient privilege")
    return current_user


@router.get("/me", response_model=UserRead)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Return the authenticated user's profile with the role as currently stored."""
    user = db.get(User, current_user.id)
    return UserRead.model_validate(user)


@router.get("/users", response_model=UsersListResponse)
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[UserRead.model_validate(u) for u in list_users(db)])
