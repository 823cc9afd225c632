"""Admin router for delivery locations and location groups."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import Location, LocationGroup, VariantPrice
from services.store_service.routers._helpers import get_owned_or_404, get_store_or_404
from services.store_service.schemas import (
    LocationCreate,
    LocationGroupCreate,
    LocationGroupResponse,
    LocationGroupUpdate,
    LocationResponse,
    LocationUpdate,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["admin-store"])


async def _ensure_pincode_free(
    db: AsyncSession,
    store_id: uuid.UUID,
    pincode: str,
    exclude_id: Optional[uuid.UUID] = None,
):
    query = select(Location.id).where(
        Location.store_id == store_id, Location.pincode == pincode
    )
    if exclude_id is not None:
        query = query.where(Location.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=400, detail="Location with this pincode already exists"
        )


async def _ensure_group_in_store(
    db: AsyncSession, store_id: uuid.UUID, location_group_id: Optional[uuid.UUID]
):
    if location_group_id is None:
        return
    group = (
        await db.execute(
            select(LocationGroup.id).where(
                LocationGroup.id == location_group_id,
                LocationGroup.store_id == store_id,
            )
        )
    ).scalar_one_or_none()
    if group is None:
        raise HTTPException(status_code=400, detail="Invalid location group")


# ============================================================================
# LOCATIONS
# ============================================================================


@router.get("/{store_id}/locations", response_model=list[LocationResponse])
async def list_locations(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(Location)
        .where(Location.store_id == store_id)
        .order_by(Location.created_at.desc())
    )
    return result.scalars().all()


@router.get("/{store_id}/locations/{location_id}", response_model=LocationResponse)
async def get_location(
    store_id: uuid.UUID,
    location_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_owned_or_404(db, Location, location_id, store_id, "Location")


@router.post(
    "/{store_id}/locations",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_location(
    store_id: uuid.UUID,
    location_in: LocationCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    await _ensure_pincode_free(db, store_id, location_in.pincode)
    await _ensure_group_in_store(db, store_id, location_in.location_group_id)

    location = Location(store_id=store_id, **location_in.model_dump())
    db.add(location)
    await db.commit()
    await db.refresh(location)

    logger.info("Location %s created in store %s", location.pincode, store_id)
    return location


@router.patch("/{store_id}/locations/{location_id}", response_model=LocationResponse)
async def update_location(
    store_id: uuid.UUID,
    location_id: uuid.UUID,
    location_in: LocationUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    location = await get_owned_or_404(db, Location, location_id, store_id, "Location")

    update_data = location_in.model_dump(exclude_unset=True)
    if update_data.get("pincode"):
        await _ensure_pincode_free(
            db, store_id, update_data["pincode"], exclude_id=location.id
        )
    if "location_group_id" in update_data:
        await _ensure_group_in_store(db, store_id, update_data["location_group_id"])

    for field, value in update_data.items():
        setattr(location, field, value)

    await db.commit()
    await db.refresh(location)
    return location


@router.delete(
    "/{store_id}/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_location(
    store_id: uuid.UUID,
    location_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    location = await get_owned_or_404(db, Location, location_id, store_id, "Location")
    await db.delete(location)
    await db.commit()


# ============================================================================
# LOCATION GROUPS
# ============================================================================


async def _get_group_or_404(
    db: AsyncSession, store_id: uuid.UUID, group_id: uuid.UUID
) -> LocationGroup:
    result = await db.execute(
        select(LocationGroup)
        .where(LocationGroup.id == group_id, LocationGroup.store_id == store_id)
        .options(selectinload(LocationGroup.locations))
    )
    group = result.scalar_one_or_none()
    if not group:
        raise HTTPException(status_code=404, detail="Location group not found")
    return group


async def _assign_locations(
    db: AsyncSession,
    store_id: uuid.UUID,
    group: LocationGroup,
    location_ids: list[uuid.UUID],
):
    """Make ``location_ids`` the exact membership of ``group``."""
    locations = []
    if location_ids:
        result = await db.execute(
            select(Location).where(
                Location.id.in_(location_ids), Location.store_id == store_id
            )
        )
        locations = list(result.scalars().all())
        if len(locations) != len(set(location_ids)):
            raise HTTPException(status_code=400, detail="Some locations not found")
    group.locations = locations


@router.get("/{store_id}/location-groups", response_model=list[LocationGroupResponse])
async def list_location_groups(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_store_or_404(db, store_id)
    result = await db.execute(
        select(LocationGroup)
        .where(LocationGroup.store_id == store_id)
        .options(selectinload(LocationGroup.locations))
        .order_by(LocationGroup.name)
    )
    return result.scalars().all()


@router.get(
    "/{store_id}/location-groups/{group_id}", response_model=LocationGroupResponse
)
async def get_location_group(
    store_id: uuid.UUID,
    group_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_group_or_404(db, store_id, group_id)


@router.post(
    "/{store_id}/location-groups",
    response_model=LocationGroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_location_group(
    store_id: uuid.UUID,
    group_in: LocationGroupCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a location group, optionally moving locations into it."""
    await get_store_or_404(db, store_id)

    group = LocationGroup(store_id=store_id, name=group_in.name, locations=[])
    db.add(group)
    await _assign_locations(db, store_id, group, group_in.location_ids)
    await db.commit()

    return await _get_group_or_404(db, store_id, group.id)


@router.patch(
    "/{store_id}/location-groups/{group_id}", response_model=LocationGroupResponse
)
async def update_location_group(
    store_id: uuid.UUID,
    group_id: uuid.UUID,
    group_in: LocationGroupUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    group = await _get_group_or_404(db, store_id, group_id)

    if group_in.name is not None:
        group.name = group_in.name
    if group_in.location_ids is not None:
        await _assign_locations(db, store_id, group, group_in.location_ids)

    await db.commit()
    db.expire(group)
    return await _get_group_or_404(db, store_id, group_id)


@router.delete(
    "/{store_id}/location-groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_location_group(
    store_id: uuid.UUID,
    group_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a group that no variant price is keyed by."""
    group = await _get_group_or_404(db, store_id, group_id)

    price_count = (
        await db.execute(
            select(func.count(VariantPrice.id)).where(
                VariantPrice.location_group_id == group_id
            )
        )
    ).scalar() or 0
    if price_count:
        raise HTTPException(
            status_code=400, detail="Cannot delete location group used by variant prices"
        )

    for location in group.locations:
        location.location_group_id = None
    await db.delete(group)
    await db.commit()
