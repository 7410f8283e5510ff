"""Turn optional search criteria into a predicate over sweet records. No DB access."""

from collections.abc import Callable
from decimal import Decimal
from typing import TYPE_CHECKING

from sweetshop.schemas.sweet import SweetFilters

if TYPE_CHECKING:
    from sweetshop.models.sweet import Sweet

SweetPredicate = Callable[["Sweet"], bool]


def _fold(text: str) -> str:
    """Case-fold text for comparison. Used for both name and category."""
    return text.casefold()


def _contains(haystack: str | None, needle: str) -> bool:
    if haystack is None:
        return False
    return _fold(needle) in _fold(haystack)


def _to_decimal(value: Decimal | float | int) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def build_sweet_predicate(filters: SweetFilters) -> SweetPredicate:
    """
    Build a predicate that is True for sweets matching every supplied filter.

    name/category: case-insensitive substring. min_price/max_price: inclusive.
    With no filters set, the predicate accepts every record.
    """
    name = filters.name
    category = filters.category
    min_price = filters.min_price
    max_price = filters.max_price

    def predicate(sweet: "Sweet") -> bool:
        if name is not None and not _contains(sweet.name, name):
            return False
        if category is not None and not _contains(sweet.category, category):
            return False
        if min_price is not None or max_price is not None:
            price = _to_decimal(sweet.price)
            if min_price is not None and price < min_price:
                return False
            if max_price is not None and price > max_price:
                return False
        return True

    return predicate


def filter_sweets(sweets: list["Sweet"], filters: SweetFilters) -> list["Sweet"]:
    """Apply filters to an already-ordered list, keeping the order."""
    if filters.is_empty():
        return list(sweets)
    predicate = build_sweet_predicate(filters)
    return [s for s in sweets if predicate(s)]
