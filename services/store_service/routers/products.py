"""Storefront product router: listing with filters, hot deals, reviews."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import (
    Product,
    Review,
    SubCategory,
    Variant,
    VariantPrice,
)
from services.store_service.routers._helpers import (
    get_store_or_404,
    product_load_options,
    serialize_product,
)
from services.store_service.schemas import (
    HotDealProduct,
    ProductListResponse,
    ReviewCreate,
    ReviewResponse,
    StorefrontProduct,
)
from services.store_service.services.hot_deals import DEFAULT_TIME_FRAME, fetch_hot_deals
from services.store_service.services.pricing import (
    parse_price_filter,
    resolve_location_group_id,
)
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["store"])

RELATED_PRODUCTS_LIMIT = 4


async def _ratings_for(
    db: AsyncSession, product_ids: list[uuid.UUID]
) -> dict[uuid.UUID, tuple[float, int]]:
    """Average rating (2 dp) and rating count per product."""
    if not product_ids:
        return {}
    rows = await db.execute(
        select(Review.product_id, func.avg(Review.rating), func.count(Review.id))
        .where(Review.product_id.in_(product_ids))
        .group_by(Review.product_id)
    )
    return {
        product_id: (round(float(average or 0), 2), count)
        for product_id, average, count in rows.all()
    }


def _with_ratings(
    product: Product,
    ratings: dict[uuid.UUID, tuple[float, int]],
    location_group_id: Optional[uuid.UUID],
) -> dict:
    data = serialize_product(product, location_group_id)
    data["average_rating"], data["number_of_ratings"] = ratings.get(product.id, (0, 0))
    return data


def _split_ids(value: Optional[str]) -> list[uuid.UUID]:
    if not value:
        return []
    try:
        return [uuid.UUID(part.strip()) for part in value.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid variant IDs")


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/{store_id}/products", response_model=ProductListResponse)
async def list_products(
    store_id: uuid.UUID,
    slug: Optional[str] = None,
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    sub_category_id: Optional[uuid.UUID] = Query(None, alias="subCategoryId"),
    brand_id: Optional[uuid.UUID] = Query(None, alias="brandId"),
    color_id: Optional[uuid.UUID] = Query(None, alias="colorId"),
    size_id: Optional[uuid.UUID] = Query(None, alias="sizeId"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    variant_ids: Optional[str] = Query(None, alias="variantIds"),
    price: Optional[str] = None,
    location_group_id: Optional[uuid.UUID] = Query(None, alias="locationGroupId"),
    pincode: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """List live products; prices are resolved for the shopper's location.

    ``slug`` narrows the result to a single product (404 when missing).
    """
    await get_store_or_404(db, store_id)

    group_id = await resolve_location_group_id(db, store_id, location_group_id, pincode)

    if sub_category_id:
        sub = (
            await db.execute(
                select(SubCategory).where(
                    SubCategory.id == sub_category_id, SubCategory.store_id == store_id
                )
            )
        ).scalar_one_or_none()
        if not sub:
            raise HTTPException(status_code=404, detail="Invalid subcategory ID")
        if category_id and sub.category_id != category_id:
            raise HTTPException(
                status_code=400,
                detail="Subcategory does not belong to specified category",
            )

    query = select(Product).where(
        Product.store_id == store_id, Product.is_archived.is_(False)
    )

    if slug:
        product = (
            await db.execute(
                query.where(Product.slug == slug).options(*product_load_options())
            )
        ).scalar_one_or_none()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        ratings = await _ratings_for(db, [product.id])
        return {"products": [_with_ratings(product, ratings, group_id)], "total_count": 1}

    if category_id:
        query = query.where(Product.category_id == category_id)
    if sub_category_id:
        query = query.where(Product.sub_category_id == sub_category_id)
    if brand_id:
        query = query.where(Product.brand_id == brand_id)
    if is_featured is not None:
        query = query.where(Product.is_featured == is_featured)

    # All variant-level filters must hold for the same variant
    variant_conditions = []
    if color_id:
        variant_conditions.append(Variant.color_id == color_id)
    if size_id:
        variant_conditions.append(Variant.size_id == size_id)
    ids = _split_ids(variant_ids)
    if ids:
        variant_conditions.append(Variant.id.in_(ids))
    min_price, max_price = parse_price_filter(price)
    if group_id and (min_price is not None or max_price is not None):
        price_conditions = [VariantPrice.location_group_id == group_id]
        if min_price is not None:
            price_conditions.append(VariantPrice.price >= min_price)
        if max_price is not None:
            price_conditions.append(VariantPrice.price <= max_price)
        variant_conditions.append(
            Variant.variant_prices.any(and_(*price_conditions))
        )
    if variant_conditions:
        query = query.where(Product.variants.any(and_(*variant_conditions)))

    count_query = select(func.count()).select_from(query.subquery())
    total_count = (await db.execute(count_query)).scalar() or 0

    query = (
        query.options(*product_load_options())
        .order_by(Product.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    products = (await db.execute(query)).scalars().all()
    ratings = await _ratings_for(db, [p.id for p in products])

    logger.info(
        "Found %d products for store %s (category=%s, subcategory=%s, brand=%s)",
        len(products),
        store_id,
        category_id,
        sub_category_id,
        brand_id,
    )
    return {
        "products": [_with_ratings(p, ratings, group_id) for p in products],
        "total_count": total_count,
    }


@router.get("/{store_id}/products/hot-deals", response_model=list[HotDealProduct])
async def list_hot_deals(
    store_id: uuid.UUID,
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    time_frame: str = Query(DEFAULT_TIME_FRAME, alias="timeFrame"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Best sellers by units sold in paid orders over the time frame."""
    await get_store_or_404(db, store_id)

    deals = await fetch_hot_deals(
        db,
        store_id,
        category_id=category_id,
        time_frame=time_frame,
        page=page,
        limit=limit,
    )
    return [
        {**serialize_product(product), "total_sold": total_sold}
        for product, total_sold in deals
    ]


@router.get("/{store_id}/products/{product_id}", response_model=StorefrontProduct)
async def get_product(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    location_group_id: Optional[uuid.UUID] = Query(None, alias="locationGroupId"),
    pincode: Optional[str] = None,
    include_related: bool = Query(False, alias="includeRelated"),
    db: AsyncSession = Depends(get_async_db),
):
    """Product detail with resolved prices, optionally with related products.

    Related products are up to four other live products of the same category,
    newest first.
    """
    group_id = await resolve_location_group_id(db, store_id, location_group_id, pincode)
    product = (
        await db.execute(
            select(Product)
            .where(
                Product.id == product_id,
                Product.store_id == store_id,
                Product.is_archived.is_(False),
            )
            .options(*product_load_options())
        )
    ).scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    related = []
    if include_related:
        related = (
            await db.execute(
                select(Product)
                .where(
                    Product.store_id == store_id,
                    Product.category_id == product.category_id,
                    Product.id != product.id,
                    Product.is_archived.is_(False),
                )
                .options(*product_load_options())
                .order_by(Product.created_at.desc())
                .limit(RELATED_PRODUCTS_LIMIT)
            )
        ).scalars().all()

    ratings = await _ratings_for(db, [product.id, *(p.id for p in related)])
    data = _with_ratings(product, ratings, group_id)
    if include_related:
        data["related_products"] = [
            _with_ratings(p, ratings, group_id) for p in related
        ]
    return data


# ============================================================================
# REVIEWS
# ============================================================================


async def _get_product_or_404(
    db: AsyncSession, store_id: uuid.UUID, product_id: uuid.UUID
) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.store_id == store_id)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product does not exist")
    return product


@router.get(
    "/{store_id}/products/{product_id}/reviews", response_model=list[ReviewResponse]
)
async def list_reviews(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Reviews for a product, best rated first, then newest."""
    await _get_product_or_404(db, store_id, product_id)
    result = await db.execute(
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.rating.desc(), Review.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return result.scalars().all()


@router.post(
    "/{store_id}/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    store_id: uuid.UUID,
    product_id: uuid.UUID,
    review_in: ReviewCreate,
    db: AsyncSession = Depends(get_async_db),
):
    await _get_product_or_404(db, store_id, product_id)

    review = Review(product_id=product_id, **review_in.model_dump())
    db.add(review)
    await db.commit()
    await db.refresh(review)

    logger.info("Review %s added to product %s", review.id, product_id)
    return review
