"""Admin product router: products with variants and specifications, and reviews."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import (
    Brand,
    Category,
    Color,
    LocationGroup,
    OrderItem,
    Product,
    ProductSpecification,
    Review,
    Size,
    SpecificationField,
    SubCategory,
    Variant,
    VariantMedia,
    VariantPrice,
)
from services.store_service.routers._helpers import (
    assign_slug,
    get_store_or_404,
    product_load_options,
)
from services.store_service.schemas import (
    AdminProductListResponse,
    ProductCreate,
    ProductResponse,
    ProductSpecificationInput,
    ProductUpdate,
    ReviewResponse,
    VariantInput,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["admin-store"])

PRODUCT_FIELDS = (
    "name",
    "category_id",
    "sub_category_id",
    "brand_id",
    "about",
    "description",
    "material_and_care",
    "enabled_features",
    "express_delivery",
    "warranty",
    "is_featured",
    "is_new_arrival",
    "is_archived",
    "meta_title",
    "meta_description",
    "meta_keywords",
)


# ============================================================================
# VALIDATION
# ============================================================================


async def _exists_in_store(db: AsyncSession, model, object_id, store_id) -> bool:
    result = await db.execute(
        select(model.id).where(model.id == object_id, model.store_id == store_id)
    )
    return result.scalar_one_or_none() is not None


async def _validate_product_refs(
    db: AsyncSession,
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    sub_category_id: Optional[uuid.UUID],
    brand_id: Optional[uuid.UUID],
):
    if not await _exists_in_store(db, Category, category_id, store_id):
        raise HTTPException(status_code=400, detail="Invalid category")

    if sub_category_id is not None:
        sub = (
            await db.execute(
                select(SubCategory).where(
                    SubCategory.id == sub_category_id,
                    SubCategory.store_id == store_id,
                )
            )
        ).scalar_one_or_none()
        if not sub:
            raise HTTPException(status_code=400, detail="Invalid subcategory")
        if sub.category_id != category_id:
            raise HTTPException(
                status_code=400,
                detail="Subcategory does not belong to the selected category",
            )

    if brand_id is not None and not await _exists_in_store(db, Brand, brand_id, store_id):
        raise HTTPException(status_code=400, detail="Invalid brand")


async def _ensure_unique_codes(
    db: AsyncSession,
    column,
    label: str,
    values: list[str],
    product_id: Optional[uuid.UUID],
):
    if len(values) != len(set(values)):
        raise HTTPException(status_code=400, detail=f"Duplicate {label} in variants")
    if not values:
        return
    query = select(column).where(column.in_(values))
    if product_id is not None:
        query = query.where(Variant.product_id != product_id)
    taken = (await db.execute(query)).scalars().first()
    if taken is not None:
        raise HTTPException(status_code=400, detail=f"{label} '{taken}' already exists")


async def _validate_variants(
    db: AsyncSession,
    store_id: uuid.UUID,
    variants: list[VariantInput],
    product_id: Optional[uuid.UUID] = None,
):
    """Check every variant's references, prices and SKU/HSN uniqueness."""
    if not variants:
        raise HTTPException(status_code=400, detail="At least one variant is required")

    for variant in variants:
        if not variant.variant_prices:
            raise HTTPException(
                status_code=400, detail="Each variant must have at least one price"
            )
        group_ids = [p.location_group_id for p in variant.variant_prices]
        if len(group_ids) != len(set(group_ids)):
            raise HTTPException(
                status_code=400,
                detail="A variant can only have one price per location group",
            )
        if variant.size_id and not await _exists_in_store(
            db, Size, variant.size_id, store_id
        ):
            raise HTTPException(status_code=400, detail="Invalid size")
        if variant.color_id and not await _exists_in_store(
            db, Color, variant.color_id, store_id
        ):
            raise HTTPException(status_code=400, detail="Invalid color")

    all_group_ids = {
        p.location_group_id for variant in variants for p in variant.variant_prices
    }
    found = (
        await db.execute(
            select(func.count(LocationGroup.id)).where(
                LocationGroup.id.in_(all_group_ids), LocationGroup.store_id == store_id
            )
        )
    ).scalar() or 0
    if found != len(all_group_ids):
        raise HTTPException(status_code=400, detail="Invalid location group")

    await _ensure_unique_codes(
        db, Variant.sku, "SKU", [v.sku for v in variants if v.sku], product_id
    )
    await _ensure_unique_codes(
        db, Variant.hsn, "HSN", [v.hsn for v in variants if v.hsn], product_id
    )


async def _validate_specifications(
    db: AsyncSession,
    store_id: uuid.UUID,
    specifications: list[ProductSpecificationInput],
):
    field_ids = [spec.specification_field_id for spec in specifications]
    if len(field_ids) != len(set(field_ids)):
        raise HTTPException(
            status_code=400, detail="Each specification field can only be set once"
        )
    if not field_ids:
        return
    found = (
        await db.execute(
            select(func.count(SpecificationField.id)).where(
                SpecificationField.id.in_(field_ids),
                SpecificationField.store_id == store_id,
            )
        )
    ).scalar() or 0
    if found != len(field_ids):
        raise HTTPException(
            status_code=400, detail="One or more specification fields are invalid"
        )


# ============================================================================
# VARIANT AND SPECIFICATION WRITES
# ============================================================================


def _build_variant(variant_in: VariantInput) -> Variant:
    return Variant(
        size_id=variant_in.size_id,
        color_id=variant_in.color_id,
        stock=variant_in.stock,
        sku=variant_in.sku,
        hsn=variant_in.hsn,
        gst_in=variant_in.gst_in,
        media=[VariantMedia(url=m.url, media_type=m.media_type) for m in variant_in.media],
        variant_prices=[
            VariantPrice(
                location_group_id=p.location_group_id,
                price=p.price,
                mrp=p.mrp,
                position=position,
            )
            for position, p in enumerate(variant_in.variant_prices)
        ],
    )


def _update_variant(variant: Variant, variant_in: VariantInput):
    variant.size_id = variant_in.size_id
    variant.color_id = variant_in.color_id
    variant.stock = variant_in.stock
    variant.sku = variant_in.sku
    variant.hsn = variant_in.hsn
    variant.gst_in = variant_in.gst_in
    variant.media = [
        VariantMedia(url=m.url, media_type=m.media_type) for m in variant_in.media
    ]

    # Prices are updated in place per group so the (variant, group) key never clashes
    existing = {p.location_group_id: p for p in variant.variant_prices}
    prices = []
    for position, price_in in enumerate(variant_in.variant_prices):
        price = existing.get(price_in.location_group_id) or VariantPrice(
            location_group_id=price_in.location_group_id
        )
        price.price = price_in.price
        price.mrp = price_in.mrp
        price.position = position
        prices.append(price)
    variant.variant_prices = prices


def _build_specifications(
    specifications: list[ProductSpecificationInput],
) -> list[ProductSpecification]:
    return [
        ProductSpecification(
            specification_field_id=spec.specification_field_id,
            value=spec.value,
            position=position,
        )
        for position, spec in enumerate(specifications)
    ]


def _replace_specifications(
    product: Product, specifications: list[ProductSpecificationInput]
):
    # Values are updated in place per field so the (product, field) key never clashes
    existing = {spec.specification_field_id: spec for spec in product.specifications}
    kept = []
    for position, spec_in in enumerate(specifications):
        spec = existing.get(spec_in.specification_field_id) or ProductSpecification(
            specification_field_id=spec_in.specification_field_id
        )
        spec.value = spec_in.value
        spec.position = position
        kept.append(spec)
    product.specifications = kept


async def _replace_variants(
    db: AsyncSession, product: Product, variants_in: list[VariantInput]
):
    """Make ``variants_in`` the product's variant list.

    Variants sent with an ``id`` are updated in place, the rest are created,
    and variants missing from the list are deleted unless an order uses them.
    """
    current = {variant.id: variant for variant in product.variants}
    keep_ids = {v.id for v in variants_in if v.id is not None}

    unknown = keep_ids - current.keys()
    if unknown:
        raise HTTPException(status_code=400, detail="Some variants not found")

    removed = [variant for variant_id, variant in current.items() if variant_id not in keep_ids]
    if removed:
        ordered = (
            await db.execute(
                select(func.count(OrderItem.id)).where(
                    OrderItem.variant_id.in_([v.id for v in removed])
                )
            )
        ).scalar() or 0
        if ordered:
            raise HTTPException(
                status_code=400, detail="Cannot remove variants that have orders"
            )
        for variant in removed:
            product.variants.remove(variant)
        await db.flush()

    for variant_in in variants_in:
        if variant_in.id is not None:
            _update_variant(current[variant_in.id], variant_in)
        else:
            product.variants.append(_build_variant(variant_in))


async def _load_product(
    db: AsyncSession, store_id: uuid.UUID, product_id: uuid.UUID
) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id, Product.store_id == store_id)
        .options(*product_load_options())
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/{store_id}/products", response_model=AdminProductListResponse)
async def list_products(
    store_id: uuid.UUID,
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    is_archived: Optional[bool] = Query(None, alias="isArchived"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List products with filters and pagination."""
    await get_store_or_404(db, store_id)

    query = select(Product).where(Product.store_id == store_id)
    if category_id:
        query = query.where(Product.category_id == category_id)
    if is_archived is not None:
        query = query.where(Product.is_archived == is_archived)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        query.options(*product_load_options())
        .order_by(Product.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    products = (await db.execute(query)).scalars().all()

    return AdminProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size,
    )


@router.get("/{store_id}/products/{product_id}", response_model=ProductResponse)
async def get_product(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await _load_product(db, store_id, product_id)


@router.post(
    "/{store_id}/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    store_id: uuid.UUID,
    product_in: ProductCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a product with its variants, media and location prices."""
    await get_store_or_404(db, store_id)
    await _validate_product_refs(
        db,
        store_id,
        product_in.category_id,
        product_in.sub_category_id,
        product_in.brand_id,
    )
    await _validate_variants(db, store_id, product_in.variants)
    await _validate_specifications(db, store_id, product_in.specifications)

    slug = await assign_slug(db, Product, store_id, product_in.name, product_in.slug)
    product = Product(
        store_id=store_id,
        slug=slug,
        **{field: getattr(product_in, field) for field in PRODUCT_FIELDS},
        variants=[_build_variant(v) for v in product_in.variants],
        specifications=_build_specifications(product_in.specifications),
    )
    db.add(product)
    await db.commit()

    logger.info(
        "Product %s created in store %s with %d variant(s)",
        product.slug,
        store_id,
        len(product_in.variants),
    )
    return await _load_product(db, store_id, product.id)


@router.patch("/{store_id}/products/{product_id}", response_model=ProductResponse)
async def update_product(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    product_in: ProductUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update product fields.

    A ``variants`` or ``specifications`` list replaces the current one.
    """
    product = await _load_product(db, store_id, product_id)
    update_data = product_in.model_dump(
        exclude_unset=True, exclude={"variants", "specifications"}
    )

    if {"category_id", "sub_category_id", "brand_id"} & update_data.keys():
        await _validate_product_refs(
            db,
            store_id,
            update_data.get("category_id") or product.category_id,
            update_data.get("sub_category_id", product.sub_category_id),
            update_data.get("brand_id", product.brand_id),
        )
    if product_in.variants is not None:
        await _validate_variants(db, store_id, product_in.variants, product.id)
    if product_in.specifications is not None:
        await _validate_specifications(db, store_id, product_in.specifications)

    if "slug" in update_data or "name" in update_data:
        update_data["slug"] = await assign_slug(
            db,
            Product,
            store_id,
            update_data.get("name") or product.name,
            update_data.get("slug"),
            exclude_id=product.id,
        )
    for field, value in update_data.items():
        setattr(product, field, value)

    if product_in.variants is not None:
        await _replace_variants(db, product, product_in.variants)
    if product_in.specifications is not None:
        _replace_specifications(product, product_in.specifications)

    await db.commit()
    return await _load_product(db, store_id, product_id)


@router.delete(
    "/{store_id}/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_product(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a product; products that were ordered must be archived instead."""
    product = await _load_product(db, store_id, product_id)
    await db.refresh(product, attribute_names=["reviews"])

    ordered = (
        await db.execute(
            select(func.count(OrderItem.id))
            .join(Variant, Variant.id == OrderItem.variant_id)
            .where(Variant.product_id == product_id)
        )
    ).scalar() or 0
    if ordered:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a product that has orders, archive it instead",
        )

    await db.delete(product)
    await db.commit()
    logger.info("Product %s deleted from store %s", product.slug, store_id)


# ============================================================================
# REVIEWS
# ============================================================================


@router.get("/{store_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    store_id: uuid.UUID,
    product_id: Optional[uuid.UUID] = Query(None, alias="productId"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List reviews across the store's products, newest first."""
    await get_store_or_404(db, store_id)

    query = (
        select(Review)
        .join(Product, Product.id == Review.product_id)
        .where(Product.store_id == store_id)
        .order_by(Review.created_at.desc())
    )
    if product_id:
        query = query.where(Review.product_id == product_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.delete(
    "/{store_id}/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_review(
    store_id: uuid.UUID,
    review_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(Review)
        .join(Product, Product.id == Review.product_id)
        .where(Review.id == review_id, Product.store_id == store_id)
    )
    review = result.scalar_one_or_none()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    await db.delete(review)
    await db.commit()
