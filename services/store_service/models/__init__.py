"""Store Service models package."""

from services.store_service.models.catalog import (
    Brand,
    Category,
    Color,
    Product,
    ProductSpecification,
    Review,
    Size,
    SpecificationField,
    SpecificationGroup,
    Store,
    SubCategory,
    Variant,
    VariantMedia,
    VariantPrice,
)
from services.store_service.models.commerce import Order, OrderItem, StockMovement
from services.store_service.models.enums import MediaType, StockMovementReason
from services.store_service.models.locations import Location, LocationGroup

__all__ = [
    "Brand",
    "Category",
    "Color",
    "Location",
    "LocationGroup",
    "MediaType",
    "Order",
    "OrderItem",
    "Product",
    "ProductSpecification",
    "Review",
    "Size",
    "SpecificationField",
    "SpecificationGroup",
    "StockMovement",
    "StockMovementReason",
    "Store",
    "SubCategory",
    "Variant",
    "VariantMedia",
    "VariantPrice",
]
