"""FastAPI application for the Store Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.store_service.routers import (
    admin_catalog_router,
    admin_locations_router,
    admin_orders_router,
    admin_products_router,
    catalog_router,
    checkout_router,
    products_router,
    search_router,
    webhooks_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Store Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Storefront Service",
        version="0.1.0",
        description="Multi-store e-commerce backend - catalog, pricing, checkout, orders.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "store"}

    # Payment webhook
    app.include_router(webhooks_router, prefix="/api")

    # Public storefront routes
    app.include_router(catalog_router, prefix="/api")
    app.include_router(products_router, prefix="/api")
    app.include_router(search_router, prefix="/api")
    app.include_router(checkout_router, prefix="/api")

    # Admin dashboard routes
    app.include_router(admin_catalog_router, prefix="/admin")
    app.include_router(admin_locations_router, prefix="/admin")
    app.include_router(admin_products_router, prefix="/admin")
    app.include_router(admin_orders_router, prefix="/admin")

    return app


app = create_app()
