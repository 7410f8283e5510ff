"""Domain exceptions shared by the access gate and the inventory service.

Each exception carries a human-readable ``message`` and a stable ``code``.
The HTTP layer maps them to status codes in ``sweetshop.api.exception_handlers``.
"""


class SweetShopError(Exception):
    """Base class for request-scoped errors surfaced to the caller."""

    code = "ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(SweetShopError):
    """Malformed or out-of-range request data. Always caller-fixable."""

    code = "INVALID_INPUT"


class Unauthenticated(SweetShopError):
    """No credential, or an invalid/expired one, or its user no longer exists."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class Forbidden(SweetShopError):
    """Valid identity without the role the operation requires."""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Insufficient privilege") -> None:
        super().__init__(message)


class NotFound(SweetShopError):
    code = "NOT_FOUND"


class Conflict(SweetShopError):
    code = "CONFLICT"


class InsufficientStock(SweetShopError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, message: str = "Insufficient quantity in stock") -> None:
        super().__init__(message)
