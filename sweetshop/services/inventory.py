"""Inventory service: create, read, update, delete, purchase and restock sweets.

Stock changes are single conditional UPDATE ... RETURNING statements, so
concurrent purchases and restocks of the same sweet serialize on its row in
the database and never act on a stale quantity. Name uniqueness is left to
the store's UNIQUE constraint; its IntegrityError is translated to Conflict.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.dml import Update

from sweetshop.core.errors import Conflict, InsufficientStock, InvalidInput, NotFound
from sweetshop.models.sweet import SWEET_NAME_UNIQUE_CONSTRAINT, Sweet
from sweetshop.schemas.sweet import SweetFilters
from sweetshop.services.query_filter import filter_sweets

logger = logging.getLogger(__name__)

PRICE_QUANTUM = Decimal("0.01")
# Numeric(10, 2) upper bound.
MAX_PRICE = Decimal("99999999.99")
# 32-bit signed INTEGER column.
MAX_QUANTITY = 2_147_483_647
NAME_MAX_LEN = 255
CATEGORY_MAX_LEN = 255

SWEET_NOT_FOUND = "Sweet not found"
DUPLICATE_NAME = "Sweet with this name already exists"

# Rows come back from UPDATE ... RETURNING; refresh any copy already in the session.
_RETURNING_OPTIONS: dict[str, Any] = {
    "synchronize_session": False,
    "populate_existing": True,
}


def _clean_text(value: str | None, field: str, max_len: int) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput(f"{field} is required")
    text = str(value).strip()
    if len(text) > max_len:
        raise InvalidInput(f"{field} must be at most {max_len} characters")
    return text


def _validate_price(price: Decimal | float | int | str | None) -> Decimal:
    if price is None or isinstance(price, bool):
        raise InvalidInput("Price must be a positive number")
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError) as e:
        raise InvalidInput("Price must be a positive number") from e
    if not value.is_finite() or value < 0:
        raise InvalidInput("Price must be a positive number")
    # Bound first: quantize raises InvalidOperation for values this large.
    if value > MAX_PRICE:
        raise InvalidInput(f"Price must be at most {MAX_PRICE}")
    return value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def _validate_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput("Quantity must be a non-negative integer")
    if quantity < 0:
        raise InvalidInput("Quantity must be a non-negative integer")
    if quantity > MAX_QUANTITY:
        raise InvalidInput(f"Quantity must be at most {MAX_QUANTITY}")
    return quantity


def _purchase_amount(quantity: Any) -> int:
    """Missing or zero means one unit; negative amounts are rejected."""
    if quantity is None or quantity == 0:
        return 1
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput("purchase quantity must be a positive integer")
    if quantity < 0:
        raise InvalidInput("purchase quantity must be positive")
    return quantity


def _restock_amount(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInput("restock quantity must be positive")
    if quantity > MAX_QUANTITY:
        raise InvalidInput(f"restock quantity must be at most {MAX_QUANTITY}")
    return quantity


def _is_duplicate_name(exc: IntegrityError) -> bool:
    """True if the IntegrityError comes from the unique constraint on sweets.name."""
    message = str(exc.orig).lower()
    if SWEET_NAME_UNIQUE_CONSTRAINT in message:
        return True
    # SQLite reports the column rather than the constraint name.
    return "unique" in message and "sweets.name" in message


def _sweet_exists(db: Session, sweet_id: int) -> bool:
    return db.scalar(select(Sweet.id).where(Sweet.id == sweet_id)) is not None


def _execute_returning(db: Session, stmt: Update) -> Sweet | None:
    """Run one UPDATE ... RETURNING in its own transaction; None if no row matched."""
    try:
        sweet = db.scalars(stmt, execution_options=_RETURNING_OPTIONS).one_or_none()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_duplicate_name(e):
            raise Conflict(DUPLICATE_NAME) from e
        raise
    except SQLAlchemyError:
        db.rollback()
        raise
    return sweet


def create_sweet(
    db: Session,
    name: str,
    category: str,
    price: Decimal | float | int,
    quantity: int | None = None,
) -> Sweet:
    """
    Insert a new sweet. Quantity defaults to 0.

    Raises InvalidInput for empty name/category or negative price/quantity,
    Conflict if another sweet already has this name.
    """
    sweet = Sweet(
        name=_clean_text(name, "Name", NAME_MAX_LEN),
        category=_clean_text(category, "Category", CATEGORY_MAX_LEN),
        price=_validate_price(price),
        quantity=0 if quantity is None else _validate_quantity(quantity),
    )
    db.add(sweet)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_duplicate_name(e):
            logger.info("Sweet create rejected: duplicate name %r", sweet.name)
            raise Conflict(DUPLICATE_NAME) from e
        raise
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(
        "Sweet created",
        extra={"sweet_id": sweet.id, "sweet_name": sweet.name, "quantity": sweet.quantity},
    )
    return sweet


def list_sweets(db: Session) -> list[Sweet]:
    """All sweets, most recently created first."""
    stmt = select(Sweet).order_by(Sweet.created_at.desc(), Sweet.id.desc())
    return list(db.scalars(stmt).all())


def search_sweets(db: Session, filters: SweetFilters) -> list[Sweet]:
    """
    Sweets matching every supplied filter, most recently created first.

    No filters is the same as list_sweets. Raises InvalidInput when
    min_price > max_price or a bound is negative.
    """
    for bound in (filters.min_price, filters.max_price):
        if bound is not None and (not bound.is_finite() or bound < 0):
            raise InvalidInput("Price filters must be non-negative numbers")
    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise InvalidInput("minPrice must not be greater than maxPrice")
    return filter_sweets(list_sweets(db), filters)


def get_sweet(db: Session, sweet_id: int) -> Sweet:
    """Return one sweet or raise NotFound."""
    sweet = db.get(Sweet, sweet_id, populate_existing=True)
    if sweet is None:
        raise NotFound(SWEET_NOT_FOUND)
    return sweet


def update_sweet(
    db: Session,
    sweet_id: int,
    *,
    name: str | None = None,
    category: str | None = None,
    price: Decimal | float | int | None = None,
    quantity: int | None = None,
) -> Sweet:
    """
    Replace any subset of name, category, price and quantity.

    Same validation as create_sweet. Raises NotFound if the sweet is gone and
    Conflict if the new name belongs to a different sweet. With nothing to
    change, returns the current record.
    """
    values: dict[str, Any] = {}
    if name is not None:
        values["name"] = _clean_text(name, "Name", NAME_MAX_LEN)
    if category is not None:
        values["category"] = _clean_text(category, "Category", CATEGORY_MAX_LEN)
    if price is not None:
        values["price"] = _validate_price(price)
    if quantity is not None:
        values["quantity"] = _validate_quantity(quantity)
    if not values:
        return get_sweet(db, sweet_id)

    stmt = update(Sweet).where(Sweet.id == sweet_id).values(**values).returning(Sweet)
    sweet = _execute_returning(db, stmt)
    if sweet is None:
        raise NotFound(SWEET_NOT_FOUND)
    logger.info("Sweet updated", extra={"sweet_id": sweet_id, "fields": sorted(values)})
    return sweet


def delete_sweet(db: Session, sweet_id: int) -> None:
    """Permanently remove a sweet. Raises NotFound if it does not exist."""
    try:
        result = db.execute(
            delete(Sweet).where(Sweet.id == sweet_id),
            execution_options={"synchronize_session": False},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    if result.rowcount == 0:
        raise NotFound(SWEET_NOT_FOUND)
    logger.info("Sweet deleted", extra={"sweet_id": sweet_id})


def purchase_sweet(db: Session, sweet_id: int, quantity: int | None = None) -> Sweet:
    """
    Take `quantity` units (default 1) out of stock and return the updated sweet.

    Check and decrement are one statement (`WHERE quantity >= :n`), so two
    concurrent purchases can never both succeed against the same units.
    Raises NotFound or InsufficientStock; neither mutates anything.
    """
    amount = _purchase_amount(quantity)
    stmt = (
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity >= amount)
        .values(quantity=Sweet.quantity - amount)
        .returning(Sweet)
    )
    sweet = _execute_returning(db, stmt)
    if sweet is None:
        if not _sweet_exists(db, sweet_id):
            raise NotFound(SWEET_NOT_FOUND)
        logger.info(
            "Purchase rejected: insufficient stock",
            extra={"sweet_id": sweet_id, "requested": amount},
        )
        raise InsufficientStock()
    logger.info(
        "Sweet purchased",
        extra={"sweet_id": sweet_id, "purchased": amount, "remaining": sweet.quantity},
    )
    return sweet


def restock_sweet(db: Session, sweet_id: int, quantity: Any) -> Sweet:
    """
    Add `quantity` units (must be positive) to stock and return the updated sweet.

    Raises InvalidInput for a non-positive amount or one that would overflow
    the stored count, NotFound if the sweet does not exist.
    """
    amount = _restock_amount(quantity)
    stmt = (
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - amount)
        .values(quantity=Sweet.quantity + amount)
        .returning(Sweet)
    )
    sweet = _execute_returning(db, stmt)
    if sweet is None:
        if not _sweet_exists(db, sweet_id):
            raise NotFound(SWEET_NOT_FOUND)
        raise InvalidInput(f"restock would exceed the maximum stock of {MAX_QUANTITY}")
    logger.info(
        "Sweet restocked",
        extra={"sweet_id": sweet_id, "added": amount, "quantity": sweet.quantity},
    )
    return sweet
