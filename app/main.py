"""ASGI entry point: ``uvicorn app.main:app``."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import dispose_engine
from app.core.exceptions import register_exception_handlers
from app.core.health import router as health_router
from app.core.logging import configure_logging, get_logger
from app.core.middleware import REQUEST_ID_HEADER, RequestIdMiddleware
from app.features.analytics.routes import router as analytics_router
from app.features.auth.routes import router as auth_router
from app.features.cart.routes import router as cart_router
from app.features.catalog.routes import router as catalog_router
from app.features.orders.routes import router as orders_router

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    auth_router,
    catalog_router,
    cart_router,
    orders_router,
    analytics_router,
)

OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and the shopper profile."},
    {"name": "catalog", "description": "Products and categories; writes are admin only."},
    {"name": "cart", "description": "Session carts keyed by a client-chosen cart id."},
    {"name": "orders", "description": "Checkout with mocked payment, order history."},
    {"name": "analytics", "description": "Admin revenue dashboard."},
]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup; release pooled connections on shutdown."""
    configure_logging()
    settings = get_settings()
    logger.info(
        "app.started",
        app_name=settings.app_name,
        app_env=settings.app_env,
        analytics_timezone=settings.analytics_timezone,
    )
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("app.stopped")


def create_app() -> FastAPI:
    """Build the shop API: middleware, problem+json handlers and feature routers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Badminton shop storefront and admin API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # added last = outermost, so the request id is bound before CORS runs
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()
