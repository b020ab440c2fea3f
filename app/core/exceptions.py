"""Custom exceptions and FastAPI exception handlers.

Errors are rendered as RFC 7807 Problem Details so storefront and admin
clients can branch on a stable ``code`` instead of parsing messages.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app.core.logging import get_logger
from app.core.problem_details import (
    ERROR_TYPES,
    ProblemDetailResponse,
    problem_response,
)

logger = get_logger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================


class ShopError(Exception):
    """Base exception for ShuttleShop application errors.

    Each subclass maps to an RFC 7807 problem type URI and an HTTP status.
    """

    error_type_uri: str = ERROR_TYPES["INTERNAL_ERROR"]

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    @property
    def title(self) -> str:
        """RFC 7807 title - short summary of problem type."""
        return self.code.replace("_", " ").title()


class NotFoundError(ShopError):
    """Requested product, category, order or user does not exist."""

    error_type_uri: str = ERROR_TYPES["NOT_FOUND"]

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="NOT_FOUND", status_code=404, details=details)


class ValidationError(ShopError):
    """Input failed domain validation (beyond request schema checks)."""

    error_type_uri: str = ERROR_TYPES["VALIDATION_ERROR"]

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message, code="VALIDATION_ERROR", status_code=422, details=details
        )


class DatabaseError(ShopError):
    """Database operation failed unexpectedly."""

    error_type_uri: str = ERROR_TYPES["DATABASE_ERROR"]

    def __init__(
        self,
        message: str = "Database operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="DATABASE_ERROR", status_code=500, details=details)


class ConflictError(ShopError):
    """Operation conflicts with existing state (duplicate e-mail, referenced row)."""

    error_type_uri: str = ERROR_TYPES["CONFLICT"]

    def __init__(
        self,
        message: str = "Resource conflict",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="CONFLICT", status_code=409, details=details)


class BadRequestError(ShopError):
    """Request is malformed (e.g. a product reference that is neither id nor UUID)."""

    error_type_uri: str = ERROR_TYPES["BAD_REQUEST"]

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="BAD_REQUEST", status_code=400, details=details)


class UnauthorizedError(ShopError):
    """Missing, malformed or expired credentials."""

    error_type_uri: str = ERROR_TYPES["UNAUTHORIZED"]

    def __init__(
        self,
        message: str = "Authentication required",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="UNAUTHORIZED", status_code=401, details=details)


class ForbiddenError(ShopError):
    """Authenticated user lacks the required role."""

    error_type_uri: str = ERROR_TYPES["FORBIDDEN"]

    def __init__(
        self,
        message: str = "Insufficient privileges",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="FORBIDDEN", status_code=403, details=details)


# =============================================================================
# Exception Handlers (RFC 7807)
# =============================================================================


async def shop_exception_handler(request: Request, exc: ShopError) -> ProblemDetailResponse:
    """Render a ShopError as problem+json.

    Client errors carry ``details`` (e.g. the unknown product ids of a
    checkout); server errors keep them in the log only.
    """
    server_side = exc.status_code >= 500
    log = logger.error if server_side else logger.warning
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
        exc_info=server_side,
    )

    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        error_code=exc.code,
        error_type_uri=exc.error_type_uri,
        details=None if server_side else exc.details or None,
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    # "body"/"query" prefixes carry no information for the client
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "request",
            "message": str(error.get("msg", "Invalid value")),
            "type": str(error.get("type", "value_error")),
        }
        for error in exc.errors()
    ]


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Render request schema failures as a 422 problem with an ``errors`` list."""
    errors = _field_errors(exc)
    logger.warning(
        "app.validation_error",
        path=request.url.path,
        fields=[e["field"] for e in errors],
    )

    return problem_response(
        status=422,
        title="Validation Error",
        detail=f"{len(errors)} invalid field(s) in the request",
        error_code="VALIDATION_ERROR",
        errors=errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> ProblemDetailResponse:
    """Last resort: log the traceback, answer with an opaque 500."""
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=exc,
    )

    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="Something went wrong on our side. Quote the request_id when contacting support.",
        error_code="INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the problem+json handlers on ``app``."""
    app.add_exception_handler(ShopError, shop_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
