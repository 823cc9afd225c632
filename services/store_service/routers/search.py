"""Storefront search across brands, categories, subcategories and products."""

import math
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.rate_limit import search_limit
from libs.db.session import get_async_db
from services.store_service.models import Brand, Category, Product, SubCategory
from services.store_service.routers._helpers import (
    get_store_or_404,
    product_load_options,
    serialize_product,
    subcategory_record,
)
from services.store_service.schemas import CategoryResponse, SearchResponse
from services.store_service.services.category_tree import attach_subcategory_trees
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["store"])


def split_search_limit(limit: int) -> tuple[int, int, int, int]:
    """Share ``limit`` between brands, categories, subcategories and products.

    Each of the first three gets a quarter (rounded down) and products get
    the rounded-up quarter.
    """
    quarter = limit // 4
    return quarter, quarter, quarter, math.ceil(limit / 4)


def _matching_subcategory_ids(subcategories, term: str) -> set:
    """Subcategories whose own name or any descendant's name contains ``term``."""
    parent_of = {s.id: s.parent_id for s in subcategories}
    matched = set()
    for sub in subcategories:
        if term.lower() not in sub.name.lower():
            continue
        current = sub.id
        while current is not None and current not in matched:
            matched.add(current)
            current = parent_of.get(current)
    return matched


@router.get("/{store_id}/search-item", response_model=SearchResponse)
@search_limit
async def search_items(
    request: Request,
    store_id: uuid.UUID,
    query: Optional[str] = None,
    brand_name: Optional[str] = Query(None, alias="brandName"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Case-insensitive name search; ``limit`` is split across result types."""
    term = (query or "").strip()
    if not term:
        raise HTTPException(status_code=400, detail="Search query is required")

    await get_store_or_404(db, store_id)
    brand_limit, category_limit, sub_limit, product_limit = split_search_limit(limit)
    pattern = f"%{term}%"

    brands = (
        await db.execute(
            select(Brand)
            .where(Brand.store_id == store_id, Brand.name.ilike(pattern))
            .order_by(Brand.name)
            .limit(brand_limit)
        )
    ).scalars().all()

    categories = (
        await db.execute(
            select(Category)
            .where(Category.store_id == store_id, Category.name.ilike(pattern))
            .order_by(Category.name)
            .limit(category_limit)
        )
    ).scalars().all()

    all_subcategories = (
        await db.execute(
            select(SubCategory)
            .where(SubCategory.store_id == store_id)
            .order_by(SubCategory.created_at)
        )
    ).scalars().all()
    matched_ids = _matching_subcategory_ids(all_subcategories, term)
    matching_subcategories = [s for s in all_subcategories if s.id in matched_ids][
        :sub_limit
    ]

    product_query = select(Product).where(
        Product.store_id == store_id,
        Product.is_archived.is_(False),
        Product.name.ilike(pattern),
    )
    if brand_name:
        brand = (
            await db.execute(
                select(Brand).where(Brand.store_id == store_id, Brand.name == brand_name)
            )
        ).scalar_one_or_none()
        if not brand:
            raise HTTPException(status_code=404, detail="Brand not found")
        product_query = product_query.where(Product.brand_id == brand.id)

    products = (
        await db.execute(
            product_query.options(*product_load_options())
            .order_by(Product.created_at.desc())
            .offset((page - 1) * product_limit)
            .limit(product_limit)
        )
    ).scalars().all()

    category_trees = attach_subcategory_trees(
        [CategoryResponse.model_validate(c).model_dump() for c in categories],
        [subcategory_record(s) for s in all_subcategories],
        max_depth=get_settings().CATEGORY_TREE_DEPTH,
    )

    logger.info(
        "Search '%s' in store %s: %d brands, %d categories, %d subcategories, %d products",
        term,
        store_id,
        len(brands),
        len(categories),
        len(matching_subcategories),
        len(products),
    )
    return {
        "brands": brands,
        "categories": category_trees,
        "sub_categories": matching_subcategories,
        "products": [serialize_product(p) for p in products],
        "pagination": {
            "page": page,
            "limit": limit,
            "total_brands": len(brands),
            "total_categories": len(categories),
            "total_sub_categories": len(matching_subcategories),
            "total_products": len(products),
        },
    }
