"""Sweets endpoints: catalog listing/search and purchase for any user; writes and restock for admins."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from sweetshop.api.v1.auth import get_current_user, require_admin
from sweetshop.core.database import get_db
from sweetshop.schemas.auth import CurrentUser
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
from sweetshop.services import inventory

router = APIRouter()


def _sweet_response(message: str, sweet: object) -> SweetResponse:
    return SweetResponse(message=message, sweet=SweetRead.model_validate(sweet))


@router.get("", response_model=SweetsListResponse)
def get_sweets(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SweetsListResponse:
    """Return every sweet, most recently created first."""
    sweets = inventory.list_sweets(db)
    return SweetsListResponse(sweets=[SweetRead.model_validate(s) for s in sweets])


@router.get("/search", response_model=SweetsListResponse)
def search_sweets(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    name: Annotated[str | None, Query(max_length=255)] = None,
    category: Annotated[str | None, Query(max_length=255)] = None,
    min_price: Annotated[Decimal | None, Query(alias="minPrice")] = None,
    max_price: Annotated[Decimal | None, Query(alias="maxPrice")] = None,
) -> SweetsListResponse:
    """
    Search by name and/or category (case-insensitive substring) and an
    inclusive price range. All supplied filters must match.
    """
    filters = SweetFilters(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
    )
    sweets = inventory.search_sweets(db, filters)
    return SweetsListResponse(sweets=[SweetRead.model_validate(s) for s in sweets])


@router.post("", response_model=SweetResponse, status_code=status.HTTP_201_CREATED)
def create_sweet(
    body: SweetCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SweetResponse:
    """Add a sweet to the catalog (admin only). Names are unique."""
    sweet = inventory.create_sweet(
        db,
        name=body.name,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
    )
    return _sweet_response("Sweet created successfully", sweet)


@router.get("/{sweet_id}", response_model=SweetResponse)
def get_sweet(
    sweet_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SweetResponse:
    """Return a single sweet."""
    return _sweet_response("Sweet found", inventory.get_sweet(db, sweet_id))


@router.put("/{sweet_id}", response_model=SweetResponse)
def update_sweet(
    sweet_id: int,
    body: SweetUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SweetResponse:
    """Change any of name, category, price, quantity (admin only)."""
    sweet = inventory.update_sweet(
        db,
        sweet_id,
        name=body.name,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
    )
    return _sweet_response("Sweet updated successfully", sweet)


@router.delete("/{sweet_id}", response_model=MessageResponse)
def delete_sweet(
    sweet_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Permanently remove a sweet (admin only)."""
    inventory.delete_sweet(db, sweet_id)
    return MessageResponse(message="Sweet deleted successfully")


@router.post("/{sweet_id}/purchase", response_model=SweetResponse)
def purchase_sweet(
    sweet_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    body: Annotated[PurchaseRequest | None, Body()] = None,
) -> SweetResponse:
    """Buy units of a sweet (default 1). Fails with 400 when stock is short."""
    quantity = body.quantity if body is not None else None
    sweet = inventory.purchase_sweet(db, sweet_id, quantity)
    return _sweet_response("Purchase successful", sweet)


@router.post("/{sweet_id}/restock", response_model=SweetResponse)
def restock_sweet(
    sweet_id: int,
    body: RestockRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SweetResponse:
    """Add units to a sweet's stock (admin only). Quantity must be positive."""
    sweet = inventory.restock_sweet(db, sweet_id, body.quantity)
    return _sweet_response("Restock successful", sweet)
