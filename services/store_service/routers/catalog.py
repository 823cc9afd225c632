"""Storefront catalog router: categories, subcategories, delivery locations."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.store_service.models import Category, Location, SubCategory
from services.store_service.routers._helpers import (
    get_store_or_404,
    subcategory_record,
)
from services.store_service.schemas import (
    CategoryResponse,
    CategoryWithTree,
    LocationResponse,
    SubCategoryNode,
    SubCategoryResponse,
)
from services.store_service.services.category_tree import (
    attach_subcategory_trees,
    build_subcategory_tree,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


async def _store_subcategories(
    db: AsyncSession, store_id: uuid.UUID, category_id: Optional[uuid.UUID] = None
) -> list[SubCategory]:
    query = (
        select(SubCategory)
        .where(SubCategory.store_id == store_id)
        .order_by(SubCategory.created_at)
    )
    if category_id is not None:
        query = query.where(SubCategory.category_id == category_id)
    return list((await db.execute(query)).scalars().all())


# ============================================================================
# CATALOG - CATEGORIES
# ============================================================================


@router.get("/{store_id}/categories", response_model=list[CategoryWithTree])
async def list_categories(
    store_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """List categories, each with its nested subcategory tree."""
    await get_store_or_404(db, store_id)

    categories = (
        await db.execute(
            select(Category)
            .where(Category.store_id == store_id)
            .order_by(Category.created_at)
        )
    ).scalars().all()
    subcategories = await _store_subcategories(db, store_id)

    return attach_subcategory_trees(
        [CategoryResponse.model_validate(c).model_dump() for c in categories],
        [subcategory_record(s) for s in subcategories],
        max_depth=get_settings().CATEGORY_TREE_DEPTH,
    )


@router.get("/{store_id}/categories/{category_id}", response_model=CategoryWithTree)
async def get_category(
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(Category).where(Category.id == category_id, Category.store_id == store_id)
    )
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    subcategories = await _store_subcategories(db, store_id, category_id)
    data = CategoryResponse.model_validate(category).model_dump()
    data["sub_categories"] = build_subcategory_tree(
        [subcategory_record(s) for s in subcategories],
        max_depth=get_settings().CATEGORY_TREE_DEPTH,
    )
    return data


# ============================================================================
# CATALOG - SUBCATEGORIES
# ============================================================================


@router.get("/{store_id}/subcategories", response_model=list[SubCategoryResponse])
async def list_subcategories(
    store_id: uuid.UUID,
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    return await _store_subcategories(db, store_id, category_id)


@router.get(
    "/{store_id}/subcategories/{sub_category_id}", response_model=SubCategoryNode
)
async def get_subcategory(
    store_id: uuid.UUID,
    sub_category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Get a subcategory together with the tree of subcategories below it."""
    subcategories = await _store_subcategories(db, store_id)
    records = {s.id: subcategory_record(s) for s in subcategories}
    if sub_category_id not in records:
        raise HTTPException(status_code=404, detail="Subcategory not found")

    # Treat the requested node as the only root of its own subtree
    root = dict(records[sub_category_id], parent_id=None)
    others = [r for sub_id, r in records.items() if sub_id != sub_category_id]
    trees = build_subcategory_tree(
        [root] + others, max_depth=get_settings().CATEGORY_TREE_DEPTH
    )
    return next(tree for tree in trees if tree["id"] == sub_category_id)


# ============================================================================
# LOCATIONS
# ============================================================================


@router.get("/{store_id}/locations", response_model=list[LocationResponse])
async def list_locations(
    store_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(Location).where(Location.store_id == store_id).order_by(Location.pincode)
    )
    return result.scalars().all()


@router.get("/{store_id}/locations/pincode/{pincode}", response_model=LocationResponse)
async def get_location_by_pincode(
    store_id: uuid.UUID,
    pincode: str,
    db: AsyncSession = Depends(get_async_db),
):
    """Check deliverability of a pincode."""
    result = await db.execute(
        select(Location).where(Location.store_id == store_id, Location.pincode == pincode)
    )
    location = result.scalar_one_or_none()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location
