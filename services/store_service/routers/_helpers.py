"""Shared helper functions for store routers."""

import uuid
from typing import Optional

from fastapi import HTTPException
from services.store_service.models import (
    Product,
    ProductSpecification,
    SpecificationField,
    Store,
    SubCategory,
    Variant,
)
from services.store_service.schemas import (
    ProductResponse,
    ResolvedPriceResponse,
    VariantResponse,
)
from services.store_service.services.pricing import resolve_variant_price
from services.store_service.services.slugs import generate_unique_slug, slugify
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


async def get_store_or_404(db: AsyncSession, store_id: uuid.UUID) -> Store:
    result = await db.execute(select(Store).where(Store.id == store_id))
    store = result.scalar_one_or_none()
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return store


async def get_owned_or_404(
    db: AsyncSession,
    model,
    object_id: uuid.UUID,
    store_id: uuid.UUID,
    label: str,
):
    """Fetch a store-scoped row by id, 404 if missing or owned by another store."""
    result = await db.execute(
        select(model).where(model.id == object_id, model.store_id == store_id)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def product_load_options():
    """Eager-load everything a product response renders."""
    return (
        selectinload(Product.brand),
        selectinload(Product.variants).selectinload(Variant.media),
        selectinload(Product.variants).selectinload(Variant.variant_prices),
        selectinload(Product.variants).selectinload(Variant.size),
        selectinload(Product.variants).selectinload(Variant.color),
        selectinload(Product.specifications)
        .selectinload(ProductSpecification.specification_field)
        .selectinload(SpecificationField.group),
    )


def price_records(variant: Variant) -> list[dict]:
    return [
        {
            "location_group_id": price.location_group_id,
            "price": price.price,
            "mrp": price.mrp,
        }
        for price in variant.variant_prices
    ]


def serialize_product(
    product: Product, location_group_id: Optional[uuid.UUID] = None
) -> dict:
    """Dump a product with each variant's price resolved for the location group."""
    data = ProductResponse.model_validate(product).model_dump()
    variants = []
    for variant in product.variants:
        variant_data = VariantResponse.model_validate(variant).model_dump()
        resolved = resolve_variant_price(price_records(variant), location_group_id)
        variant_data["resolved_price"] = ResolvedPriceResponse.model_validate(
            resolved
        ).model_dump()
        variants.append(variant_data)
    data["variants"] = variants
    return data


def subcategory_record(sub: SubCategory) -> dict:
    """Plain mapping of a subcategory for the tree helpers."""
    return {
        "id": sub.id,
        "category_id": sub.category_id,
        "parent_id": sub.parent_id,
        "name": sub.name,
        "slug": sub.slug,
        "banner_image": sub.banner_image,
    }


async def assign_slug(
    db: AsyncSession,
    model,
    store_id: uuid.UUID,
    name: str,
    explicit_slug: Optional[str] = None,
    exclude_id: Optional[uuid.UUID] = None,
) -> str:
    """Pick the slug for a create/update.

    An explicit slug is normalised and must be free; otherwise one is derived
    from the name and suffixed until unique.
    """
    if not explicit_slug:
        return await generate_unique_slug(db, model, name, store_id, exclude_id)

    slug = slugify(explicit_slug)
    if not slug:
        raise HTTPException(status_code=400, detail="Invalid slug")
    query = select(model.id).where(model.store_id == store_id, model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=400,
            detail=f"{model.__name__} with this slug already exists",
        )
    return slug
