"""
Centralized error handlers for FastAPI.

Maps library domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.library.errors import (
    DomainValidationError,
    LibraryDomainError,
    LoanBorrowDeniedError,
    NotFoundError,
    UserAlreadyExistsError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        """Handle missing book, user or loan."""
        logger.warning("Not found: %s", exc.message)
        return _error_response(HTTP_404, "Not found", exc.message)

    @app.exception_handler(UserAlreadyExistsError)
    async def handle_user_exists(
        _request: Request, exc: UserAlreadyExistsError
    ) -> JSONResponse:
        """Handle email uniqueness violations."""
        logger.warning("User already exists")
        return _error_response(HTTP_409, "User already exists", exc.message)

    @app.exception_handler(LoanBorrowDeniedError)
    async def handle_borrow_denied(
        _request: Request, exc: LoanBorrowDeniedError
    ) -> JSONResponse:
        """Handle loan rule violations. The reason is shown to the user."""
        logger.warning("Loan denied: %s", exc.reason)
        return _error_response(HTTP_400, "Loan denied", exc.reason)

    @app.exception_handler(DomainValidationError)
    async def handle_validation(
        _request: Request, exc: DomainValidationError
    ) -> JSONResponse:
        """Handle entity and value object invariant violations."""
        logger.warning("Validation failed: %s", exc.message)
        return _error_response(HTTP_422, "Validation error", exc.message)

    @app.exception_handler(LibraryDomainError)
    async def handle_library_domain(
        _request: Request, exc: LibraryDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled library domain errors."""
        logger.error("Unhandled library domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
