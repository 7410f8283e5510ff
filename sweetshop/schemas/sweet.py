"""Pydantic schemas for sweets: write payloads, search filters, and responses.

Write payloads only check types. Range rules (price >= 0, quantity >= 0,
positive restock amounts) live in the inventory service so that they surface
as INVALID_INPUT errors with a stable code rather than as request-parsing errors.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer, field_validator

# Prices are stored as Numeric(10, 2) and returned to clients as JSON numbers.
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


class SweetCreate(BaseModel):
    """Body for POST /sweets (admin only)."""

    name: str = Field(..., max_length=255, description="Unique sweet name")
    category: str = Field(..., max_length=255, description="Category, e.g. Chocolate")
    price: Decimal = Field(..., description="Unit price, must be >= 0")
    quantity: int | None = Field(default=None, description="Initial stock; defaults to 0")


class SweetUpdate(BaseModel):
    """Body for PUT /sweets/{id}. Any subset of fields; omitted fields are unchanged."""

    name: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=255)
    price: Decimal | None = None
    quantity: int | None = None


class PurchaseRequest(BaseModel):
    """Body for POST /sweets/{id}/purchase. Missing or zero quantity means 1."""

    quantity: int | None = Field(default=None, description="Units to purchase")


class RestockRequest(BaseModel):
    """Body for POST /sweets/{id}/restock (admin only)."""

    quantity: int | None = Field(default=None, description="Units to add; must be positive")


class SweetFilters(BaseModel):
    """
    Optional search criteria; all supplied criteria combine with AND.

    name and category match case-insensitively as substrings. Price bounds
    are inclusive. Blank text filters are treated as absent.
    """

    name: str | None = None
    category: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    @field_validator("name", "category")
    @classmethod
    def blank_text_is_absent(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    def is_empty(self) -> bool:
        return (
            self.name is None
            and self.category is None
            and self.min_price is None
            and self.max_price is None
        )


class SweetRead(BaseModel):
    """Sweet record as returned to clients."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    category: str
    price: Price
    quantity: int
    created_at: datetime
    updated_at: datetime


class SweetResponse(BaseModel):
    """Single-record response with a confirmation message."""

    message: str
    sweet: SweetRead


class SweetsListResponse(BaseModel):
    """Response for list and search."""

    sweets: list[SweetRead]


class MessageResponse(BaseModel):
    """Body-less success (e.g. delete)."""

    message: str
