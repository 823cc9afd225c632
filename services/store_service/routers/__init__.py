"""Store service routers package."""

from services.store_service.routers.admin_catalog import router as admin_catalog_router
from services.store_service.routers.admin_locations import (
    router as admin_locations_router,
)
from services.store_service.routers.admin_orders import router as admin_orders_router
from services.store_service.routers.admin_products import (
    router as admin_products_router,
)
from services.store_service.routers.catalog import router as catalog_router
from services.store_service.routers.checkout import router as checkout_router
from services.store_service.routers.products import router as products_router
from services.store_service.routers.search import router as search_router
from services.store_service.routers.webhooks import router as webhooks_router

__all__ = [
    "admin_catalog_router",
    "admin_locations_router",
    "admin_orders_router",
    "admin_products_router",
    "catalog_router",
    "checkout_router",
    "products_router",
    "search_router",
    "webhooks_router",
]
