"""Admin catalog router: stores, taxonomy, brands, attributes and specifications."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import (
    Brand,
    Category,
    Color,
    Product,
    ProductSpecification,
    Size,
    SpecificationField,
    SpecificationGroup,
    Store,
    SubCategory,
    Variant,
)
from services.store_service.routers._helpers import (
    assign_slug,
    get_owned_or_404,
    get_store_or_404,
    subcategory_record,
)
from services.store_service.schemas import (
    AttributeCreate,
    AttributeResponse,
    BrandCreate,
    BrandResponse,
    BrandUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithTree,
    SpecificationFieldCreate,
    SpecificationFieldResponse,
    SpecificationFieldUpdate,
    SpecificationGroupCreate,
    SpecificationGroupResponse,
    StoreCreate,
    StoreResponse,
    SubCategoryAdminResponse,
    SubCategoryCreate,
    SubCategoryResponse,
    SubCategoryUpdate,
)
from services.store_service.services.category_tree import (
    attach_subcategory_trees,
    breadcrumb_name,
    is_valid_parent,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["admin-store"])


# ============================================================================
# STORES
# ============================================================================


@router.get("/stores", response_model=list[StoreResponse])
async def list_stores(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List stores owned by the current admin."""
    query = select(Store).order_by(Store.created_at)
    if current_user.role != "service_role":
        query = query.where(Store.owner_id == current_user.user_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "/stores", response_model=StoreResponse, status_code=status.HTTP_201_CREATED
)
async def create_store(
    store_in: StoreCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    store = Store(name=store_in.name, owner_id=current_user.user_id)
    db.add(store)
    await db.commit()
    await db.refresh(store)
    logger.info("Store %s created by %s", store.id, current_user.user_id)
    return store


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/{store_id}/categories", response_model=list[CategoryWithTree])
async def list_categories(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List categories with their subcategory trees."""
    await get_store_or_404(db, store_id)

    categories = (
        await db.execute(
            select(Category)
            .where(Category.store_id == store_id)
            .order_by(Category.created_at.desc())
        )
    ).scalars().all()
    subcategories = (
        await db.execute(
            select(SubCategory)
            .where(SubCategory.store_id == store_id)
            .order_by(SubCategory.created_at)
        )
    ).scalars().all()

    return attach_subcategory_trees(
        [CategoryResponse.model_validate(c).model_dump() for c in categories],
        [subcategory_record(s) for s in subcategories],
        max_depth=get_settings().CATEGORY_TREE_DEPTH,
    )


@router.get("/{store_id}/categories/{category_id}", response_model=CategoryResponse)
async def get_category(
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_owned_or_404(db, Category, category_id, store_id, "Category")


@router.post(
    "/{store_id}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    store_id: uuid.UUID,
    category_in: CategoryCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a category; the slug is derived from the name when omitted."""
    await get_store_or_404(db, store_id)

    data = category_in.model_dump()
    data["slug"] = await assign_slug(
        db, Category, store_id, category_in.name, category_in.slug
    )
    category = Category(store_id=store_id, **data)
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info("Category %s created in store %s", category.slug, store_id)
    return category


@router.patch("/{store_id}/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    category_in: CategoryUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await get_owned_or_404(db, Category, category_id, store_id, "Category")

    update_data = category_in.model_dump(exclude_unset=True)
    if "slug" in update_data or "name" in update_data:
        update_data["slug"] = await assign_slug(
            db,
            Category,
            store_id,
            update_data.get("name") or category.name,
            update_data.get("slug"),
            exclude_id=category.id,
        )
    for field, value in update_data.items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return category


@router.delete(
    "/{store_id}/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_category(
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a category that no product or subcategory references."""
    category = await get_owned_or_404(db, Category, category_id, store_id, "Category")

    product_count = (
        await db.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
    ).scalar() or 0
    sub_count = (
        await db.execute(
            select(func.count(SubCategory.id)).where(
                SubCategory.category_id == category_id
            )
        )
    ).scalar() or 0
    if product_count or sub_count:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete category with products or subcategories",
        )

    await db.delete(category)
    await db.commit()


# ============================================================================
# SUBCATEGORIES
# ============================================================================


async def _subcategory_parent_map(db: AsyncSession, store_id: uuid.UUID) -> dict:
    rows = await db.execute(
        select(SubCategory.id, SubCategory.parent_id).where(
            SubCategory.store_id == store_id
        )
    )
    return {sub_id: parent_id for sub_id, parent_id in rows.all()}


async def _validate_subcategory_refs(
    db: AsyncSession,
    store_id: uuid.UUID,
    category_id: uuid.UUID,
    parent_id,
    subcategory_id=None,
):
    category = (
        await db.execute(
            select(Category).where(
                Category.id == category_id, Category.store_id == store_id
            )
        )
    ).scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=400, detail="Invalid category")

    if parent_id is None:
        return

    parent = (
        await db.execute(
            select(SubCategory).where(
                SubCategory.id == parent_id, SubCategory.store_id == store_id
            )
        )
    ).scalar_one_or_none()
    if not parent:
        raise HTTPException(status_code=400, detail="Invalid parent subcategory")
    if parent.category_id != category_id:
        raise HTTPException(
            status_code=400,
            detail="Parent subcategory must belong to the same category",
        )

    parent_of = await _subcategory_parent_map(db, store_id)
    if not is_valid_parent(subcategory_id, parent_id, parent_of):
        raise HTTPException(
            status_code=400,
            detail="Invalid parent: this would create a circular hierarchy",
        )


@router.get(
    "/{store_id}/subcategories", response_model=list[SubCategoryAdminResponse]
)
async def list_subcategories(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List subcategories with their full "Parent > Child" names."""
    await get_store_or_404(db, store_id)

    subcategories = (
        await db.execute(
            select(SubCategory)
            .where(SubCategory.store_id == store_id)
            .order_by(SubCategory.created_at.desc())
        )
    ).scalars().all()
    category_names = dict(
        (
            await db.execute(
                select(Category.id, Category.name).where(Category.store_id == store_id)
            )
        ).all()
    )

    by_id = {s.id: subcategory_record(s) for s in subcategories}
    responses = []
    for sub in subcategories:
        resp = SubCategoryResponse.model_validate(sub).model_dump()
        resp["display_name"] = breadcrumb_name(sub.id, by_id)
        resp["category_name"] = category_names.get(sub.category_id)
        responses.append(resp)
    return responses


@router.get(
    "/{store_id}/subcategories/{sub_category_id}", response_model=SubCategoryResponse
)
async def get_subcategory(
    store_id: uuid.UUID,
    sub_category_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_owned_or_404(
        db, SubCategory, sub_category_id, store_id, "Subcategory"
    )


@router.post(
    "/{store_id}/subcategories",
    response_model=SubCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory(
    store_id: uuid.UUID,
    sub_in: SubCategoryCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    await _validate_subcategory_refs(db, store_id, sub_in.category_id, sub_in.parent_id)

    data = sub_in.model_dump()
    data["slug"] = await assign_slug(db, SubCategory, store_id, sub_in.name, sub_in.slug)
    subcategory = SubCategory(store_id=store_id, **data)
    db.add(subcategory)
    await db.commit()
    await db.refresh(subcategory)

    logger.info("Subcategory %s created in store %s", subcategory.slug, store_id)
    return subcategory


@router.patch(
    "/{store_id}/subcategories/{sub_category_id}", response_model=SubCategoryResponse
)
async def update_subcategory(
    store_id: uuid.UUID,
    sub_category_id: uuid.UUID,
    sub_in: SubCategoryUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a subcategory, refusing parents that would close a loop."""
    subcategory = await get_owned_or_404(
        db, SubCategory, sub_category_id, store_id, "Subcategory"
    )

    update_data = sub_in.model_dump(exclude_unset=True)
    new_category_id = update_data.get("category_id")
    if new_category_id is not None and new_category_id != subcategory.category_id:
        child_count = (
            await db.execute(
                select(func.count(SubCategory.id)).where(
                    SubCategory.parent_id == subcategory.id
                )
            )
        ).scalar() or 0
        if child_count:
            raise HTTPException(
                status_code=400,
                detail="Cannot change the category of a subcategory with child subcategories",
            )
    if "category_id" in update_data or "parent_id" in update_data:
        await _validate_subcategory_refs(
            db,
            store_id,
            update_data.get("category_id") or subcategory.category_id,
            update_data.get("parent_id", subcategory.parent_id),
            subcategory_id=subcategory.id,
        )
    if "slug" in update_data or "name" in update_data:
        update_data["slug"] = await assign_slug(
            db,
            SubCategory,
            store_id,
            update_data.get("name") or subcategory.name,
            update_data.get("slug"),
            exclude_id=subcategory.id,
        )
    for field, value in update_data.items():
        setattr(subcategory, field, value)

    await db.commit()
    await db.refresh(subcategory)
    return subcategory


@router.delete(
    "/{store_id}/subcategories/{sub_category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_subcategory(
    store_id: uuid.UUID,
    sub_category_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    subcategory = await get_owned_or_404(
        db, SubCategory, sub_category_id, store_id, "Subcategory"
    )

    product_count = (
        await db.execute(
            select(func.count(Product.id)).where(
                Product.sub_category_id == sub_category_id
            )
        )
    ).scalar() or 0
    child_count = (
        await db.execute(
            select(func.count(SubCategory.id)).where(
                SubCategory.parent_id == sub_category_id
            )
        )
    ).scalar() or 0
    if product_count or child_count:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete subcategory with products or child subcategories",
        )

    await db.delete(subcategory)
    await db.commit()


# ============================================================================
# BRANDS
# ============================================================================


@router.get("/{store_id}/brands", response_model=list[BrandResponse])
async def list_brands(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(Brand).where(Brand.store_id == store_id).order_by(Brand.name)
    )
    return result.scalars().all()


@router.get("/{store_id}/brands/{brand_id}", response_model=BrandResponse)
async def get_brand(
    store_id: uuid.UUID,
    brand_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_owned_or_404(db, Brand, brand_id, store_id, "Brand")


@router.post(
    "/{store_id}/brands",
    response_model=BrandResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_brand(
    store_id: uuid.UUID,
    brand_in: BrandCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)

    data = brand_in.model_dump()
    data["slug"] = await assign_slug(db, Brand, store_id, brand_in.name, brand_in.slug)
    brand = Brand(store_id=store_id, **data)
    db.add(brand)
    await db.commit()
    await db.refresh(brand)
    return brand


@router.patch("/{store_id}/brands/{brand_id}", response_model=BrandResponse)
async def update_brand(
    store_id: uuid.UUID,
    brand_id: uuid.UUID,
    brand_in: BrandUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    brand = await get_owned_or_404(db, Brand, brand_id, store_id, "Brand")

    update_data = brand_in.model_dump(exclude_unset=True)
    if "slug" in update_data or "name" in update_data:
        update_data["slug"] = await assign_slug(
            db,
            Brand,
            store_id,
            update_data.get("name") or brand.name,
            update_data.get("slug"),
            exclude_id=brand.id,
        )
    for field, value in update_data.items():
        setattr(brand, field, value)

    await db.commit()
    await db.refresh(brand)
    return brand


@router.delete("/{store_id}/brands/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brand(
    store_id: uuid.UUID,
    brand_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    brand = await get_owned_or_404(db, Brand, brand_id, store_id, "Brand")

    product_count = (
        await db.execute(select(func.count(Product.id)).where(Product.brand_id == brand_id))
    ).scalar() or 0
    if product_count:
        raise HTTPException(
            status_code=400, detail="Cannot delete brand with associated products"
        )

    await db.delete(brand)
    await db.commit()


# ============================================================================
# SIZES & COLOURS
# ============================================================================


@router.get("/{store_id}/sizes", response_model=list[AttributeResponse])
async def list_sizes(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(Size).where(Size.store_id == store_id).order_by(Size.name)
    )
    return result.scalars().all()


@router.post(
    "/{store_id}/sizes",
    response_model=AttributeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_size(
    store_id: uuid.UUID,
    size_in: AttributeCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    size = Size(store_id=store_id, **size_in.model_dump())
    db.add(size)
    await db.commit()
    await db.refresh(size)
    return size


@router.delete("/{store_id}/sizes/{size_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_size(
    store_id: uuid.UUID,
    size_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    size = await get_owned_or_404(db, Size, size_id, store_id, "Size")
    in_use = (
        await db.execute(select(func.count(Variant.id)).where(Variant.size_id == size_id))
    ).scalar() or 0
    if in_use:
        raise HTTPException(status_code=400, detail="Size is used by product variants")
    await db.delete(size)
    await db.commit()


@router.get("/{store_id}/colors", response_model=list[AttributeResponse])
async def list_colors(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(Color).where(Color.store_id == store_id).order_by(Color.name)
    )
    return result.scalars().all()


@router.post(
    "/{store_id}/colors",
    response_model=AttributeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_color(
    store_id: uuid.UUID,
    color_in: AttributeCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    color = Color(store_id=store_id, **color_in.model_dump())
    db.add(color)
    await db.commit()
    await db.refresh(color)
    return color


@router.delete("/{store_id}/colors/{color_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_color(
    store_id: uuid.UUID,
    color_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    color = await get_owned_or_404(db, Color, color_id, store_id, "Color")
    in_use = (
        await db.execute(
            select(func.count(Variant.id)).where(Variant.color_id == color_id)
        )
    ).scalar() or 0
    if in_use:
        raise HTTPException(status_code=400, detail="Color is used by product variants")
    await db.delete(color)
    await db.commit()


# ============================================================================
# SPECIFICATIONS
# ============================================================================


async def _owned_by_store(db: AsyncSession, model, object_id, store_id) -> bool:
    result = await db.execute(
        select(model.id).where(model.id == object_id, model.store_id == store_id)
    )
    return result.scalar_one_or_none() is not None


async def _specification_usage(db: AsyncSession, *conditions) -> int:
    """Count product values recorded against the matching specification fields."""
    result = await db.execute(
        select(func.count(ProductSpecification.id))
        .join(
            SpecificationField,
            SpecificationField.id == ProductSpecification.specification_field_id,
        )
        .where(*conditions)
    )
    return result.scalar() or 0


async def _load_specification_field(
    db: AsyncSession, store_id: uuid.UUID, field_id: uuid.UUID
) -> SpecificationField:
    result = await db.execute(
        select(SpecificationField)
        .where(
            SpecificationField.id == field_id, SpecificationField.store_id == store_id
        )
        .options(selectinload(SpecificationField.group))
        .execution_options(populate_existing=True)
    )
    field = result.scalar_one_or_none()
    if not field:
        raise HTTPException(status_code=404, detail="Specification field not found")
    return field


@router.get(
    "/{store_id}/specification-groups",
    response_model=list[SpecificationGroupResponse],
)
async def list_specification_groups(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(SpecificationGroup)
        .where(SpecificationGroup.store_id == store_id)
        .order_by(SpecificationGroup.name)
    )
    return result.scalars().all()


@router.post(
    "/{store_id}/specification-groups",
    response_model=SpecificationGroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_specification_group(
    store_id: uuid.UUID,
    group_in: SpecificationGroupCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    group = SpecificationGroup(store_id=store_id, name=group_in.name)
    db.add(group)
    await db.commit()
    await db.refresh(group)
    return group


@router.patch(
    "/{store_id}/specification-groups/{group_id}",
    response_model=SpecificationGroupResponse,
)
async def update_specification_group(
    store_id: uuid.UUID,
    group_id: uuid.UUID,
    group_in: SpecificationGroupCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    group = await get_owned_or_404(
        db, SpecificationGroup, group_id, store_id, "Specification group"
    )
    group.name = group_in.name
    await db.commit()
    await db.refresh(group)
    return group


@router.delete(
    "/{store_id}/specification-groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_specification_group(
    store_id: uuid.UUID,
    group_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a group and its fields, unless a product has values for them."""
    group = await get_owned_or_404(
        db, SpecificationGroup, group_id, store_id, "Specification group"
    )
    if await _specification_usage(db, SpecificationField.group_id == group_id):
        raise HTTPException(
            status_code=400,
            detail="Specification group has fields used by products",
        )

    await db.refresh(group, attribute_names=["fields"])
    await db.delete(group)
    await db.commit()


@router.get(
    "/{store_id}/specification-fields",
    response_model=list[SpecificationFieldResponse],
)
async def list_specification_fields(
    store_id: uuid.UUID,
    group_id: Optional[uuid.UUID] = Query(None, alias="groupId"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    query = (
        select(SpecificationField)
        .where(SpecificationField.store_id == store_id)
        .options(selectinload(SpecificationField.group))
        .order_by(SpecificationField.name)
    )
    if group_id:
        query = query.where(SpecificationField.group_id == group_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "/{store_id}/specification-fields",
    response_model=SpecificationFieldResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_specification_field(
    store_id: uuid.UUID,
    field_in: SpecificationFieldCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    if not await _owned_by_store(db, SpecificationGroup, field_in.group_id, store_id):
        raise HTTPException(status_code=400, detail="Invalid specification group")

    field = SpecificationField(store_id=store_id, **field_in.model_dump())
    db.add(field)
    await db.commit()
    return await _load_specification_field(db, store_id, field.id)


@router.patch(
    "/{store_id}/specification-fields/{field_id}",
    response_model=SpecificationFieldResponse,
)
async def update_specification_field(
    store_id: uuid.UUID,
    field_id: uuid.UUID,
    field_in: SpecificationFieldUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    field = await _load_specification_field(db, store_id, field_id)

    update_data = field_in.model_dump(exclude_unset=True)
    if update_data.get("group_id") is not None and not await _owned_by_store(
        db, SpecificationGroup, update_data["group_id"], store_id
    ):
        raise HTTPException(status_code=400, detail="Invalid specification group")
    for key, value in update_data.items():
        if value is not None:
            setattr(field, key, value)

    await db.commit()
    return await _load_specification_field(db, store_id, field_id)


@router.delete(
    "/{store_id}/specification-fields/{field_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_specification_field(
    store_id: uuid.UUID,
    field_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    field = await _load_specification_field(db, store_id, field_id)
    if await _specification_usage(db, SpecificationField.id == field_id):
        raise HTTPException(
            status_code=400, detail="Specification field is used by products"
        )
    await db.delete(field)
    await db.commit()
