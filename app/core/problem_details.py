"""RFC 7807 problem+json bodies for every error the shop API returns.

Reference: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.core.logging import request_id_ctx

ERROR_TYPE_BASE = "/errors"

# error code -> problem type URI
ERROR_TYPES = {
    "BAD_REQUEST": f"{ERROR_TYPE_BASE}/bad-request",
    "UNAUTHORIZED": f"{ERROR_TYPE_BASE}/unauthorized",
    "FORBIDDEN": f"{ERROR_TYPE_BASE}/forbidden",
    "NOT_FOUND": f"{ERROR_TYPE_BASE}/not-found",
    "CONFLICT": f"{ERROR_TYPE_BASE}/conflict",
    "VALIDATION_ERROR": f"{ERROR_TYPE_BASE}/validation",
    "INVALID_AMOUNT": f"{ERROR_TYPE_BASE}/invalid-amount",
    "DATABASE_ERROR": f"{ERROR_TYPE_BASE}/database",
    "INTERNAL_ERROR": f"{ERROR_TYPE_BASE}/internal",
}


class ProblemDetail(BaseModel):
    """Problem body: the five RFC 7807 members plus shop extensions.

    Extensions are ``code`` (stable machine-readable error code),
    ``request_id``, ``errors`` (per-field list on 422 responses) and
    ``details`` (error-specific context such as unknown product ids).
    """

    model_config = ConfigDict(extra="allow")

    type: str = "about:blank"
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: str | None = None
    instance: str | None = None
    code: str | None = None
    request_id: str | None = None
    errors: list[dict[str, Any]] | None = None
    details: dict[str, Any] | None = None


class ProblemDetailResponse(JSONResponse):
    media_type = "application/problem+json"


def type_uri_for(error_code: str) -> str:
    """Registered URI for ``error_code``, else one derived from it (FOO_BAR -> /errors/foo-bar)."""
    slug = error_code.lower().replace("_", "-")
    return ERROR_TYPES.get(error_code, f"{ERROR_TYPE_BASE}/{slug}")


def create_problem_detail(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    error_type_uri: str | None = None,
    details: dict[str, Any] | None = None,
) -> ProblemDetail:
    """Build a problem body bound to the current request id.

    ``error_type_uri`` wins over the URI registered for ``error_code``, so a
    subclass error (e.g. an invalid amount) keeps its own type while sharing
    the parent's status.
    """
    request_id = request_id_ctx.get()
    return ProblemDetail(
        type=error_type_uri or type_uri_for(error_code),
        title=title,
        status=status,
        detail=detail,
        instance=f"/requests/{request_id}" if request_id else None,
        code=error_code,
        request_id=request_id,
        errors=errors,
        details=details,
    )


def problem_response(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    error_type_uri: str | None = None,
    details: dict[str, Any] | None = None,
) -> ProblemDetailResponse:
    """Problem body wrapped in a problem+json response; unset members are omitted."""
    problem = create_problem_detail(
        status=status,
        title=title,
        detail=detail,
        error_code=error_code,
        errors=errors,
        error_type_uri=error_type_uri,
        details=details,
    )
    return ProblemDetailResponse(
        status_code=status,
        content=problem.model_dump(mode="json", exclude_none=True),
    )
