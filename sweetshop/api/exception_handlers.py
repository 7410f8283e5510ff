"""Map domain exceptions to HTTP responses with a consistent error body.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sweetshop.core.errors import (
    Conflict,
    Forbidden,
    InsufficientStock,
    InvalidInput,
    NotFound,
    SweetShopError,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[SweetShopError], int] = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    InsufficientStock: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
}


def status_for(exc: SweetShopError) -> int:
    """HTTP status for a domain exception; walks the MRO so subclasses inherit."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_400_BAD_REQUEST


def _error_response(
    status_code: int,
    message: str,
    code: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain errors and unexpected persistence failures."""

    @app.exception_handler(SweetShopError)
    async def domain_exception_handler(
        request: Request,
        exc: SweetShopError,
    ) -> JSONResponse:
        status_code = status_for(exc)
        logger.warning(
            "Domain exception on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code,
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return _error_response(status_code, exc.message, exc.code, headers)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        logger.error(
            "Database error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "INTERNAL_ERROR",
        )
