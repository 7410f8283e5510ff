"""ORM model for catalog items (sweets)."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from sweetshop.models.base import Base, utcnow

# Constraint names are matched when translating IntegrityError into Conflict.
SWEET_NAME_UNIQUE_CONSTRAINT = "uq_sweets_name"


class Sweet(Base):
    """
    A sweet in the catalog with its on-hand quantity.

    The store enforces the invariants: name is unique, price and quantity are
    never negative. Quantity is only ever changed through conditional UPDATE
    statements in sweetshop.services.inventory.
    """

    __tablename__ = "sweets"
    __table_args__ = (
        UniqueConstraint("name", name=SWEET_NAME_UNIQUE_CONSTRAINT),
        CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
