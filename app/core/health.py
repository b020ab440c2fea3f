"""Liveness and readiness checks for the shop API."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Check result; ``database`` is only reported by the readiness check."""

    status: Literal["ok", "unhealthy"]
    service: str
    environment: str
    database: Literal["connected", "disconnected"] | None = None


def _health_response(
    status: Literal["ok", "unhealthy"],
    database: Literal["connected", "disconnected"] | None = None,
) -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status=status,
        service=settings.app_name,
        environment=settings.app_env,
        database=database,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is serving requests. The database is not touched."""
    return _health_response("ok")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Readiness: the storefront can reach PostgreSQL.

    A failed round trip is reported as ``unhealthy`` with HTTP 200 so load
    balancers read the body instead of treating the check itself as broken.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "health.database_disconnected",
            error=str(e),
            error_type=type(e).__name__,
        )
        return _health_response("unhealthy", "disconnected")

    return _health_response("ok", "connected")
