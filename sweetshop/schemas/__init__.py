"""Pydantic request/response schemas."""

from sweetshop.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
    UsersListResponse,
)
from sweetshop.schemas.health import HealthResponse
from sweetshop.schemas.sweet import (
    MessageResponse,
    PurchaseRequest,
    RestockRequest,
    SweetCreate,
    SweetFilters,
    SweetRead,
    SweetResponse,
    SweetsListResponse,
    SweetUpdate,
)

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PurchaseRequest",
    "RegisterRequest",
    "RestockRequest",
    "SweetCreate",
    "SweetFilters",
    "SweetRead",
    "SweetResponse",
    "SweetUpdate",
    "SweetsListResponse",
    "TokenResponse",
    "UserRead",
    "UsersListResponse",
]
