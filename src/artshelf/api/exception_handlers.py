"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions
into proper HTTP responses with appropriate status codes.

Hey future me - SQLAlchemy OperationalError is handled here too! SQLite says "database is
locked" while a scan holds the writer; clients get a 503 with Retry-After instead of a 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from artshelf.domain.exceptions import (
    DatabaseUnreachableError,
    ValidationException,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain exceptions and database errors.

    Must be called during app setup, BEFORE any requests arrive.
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Handle domain validation exceptions with 422 Unprocessable Entity."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )

    @app.exception_handler(DatabaseUnreachableError)
    async def database_unreachable_handler(
        request: Request, exc: DatabaseUnreachableError
    ) -> JSONResponse:
        """Handle a database that failed its startup check with 503."""
        logger.error("Database unreachable at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )

    @app.exception_handler(OperationalError)
    async def database_operational_error_handler(
        request: Request, exc: OperationalError
    ) -> JSONResponse:
        """Handle SQLAlchemy OperationalError (503 for busy/locked, else 500)."""
        error_msg = str(exc).lower()

        if "locked" in error_msg or "busy" in error_msg:
            logger.warning(
                "Database busy at %s",
                request.url.path,
                extra={"path": request.url.path, "error": str(exc)[:200]},
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": "Database is busy, retry shortly"},
                headers={"Retry-After": "3"},
            )

        logger.error(
            "Database error at %s: %s", request.url.path, exc, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )
