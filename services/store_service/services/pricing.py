"""Location-aware variant pricing."""

import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from libs.common.logging import get_logger
from services.store_service.errors import LocationNotFoundError
from services.store_service.models import Location
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class ResolvedPrice:
    """Price/MRP pair chosen for one variant."""

    price: Decimal
    mrp: Decimal
    location_group_id: Optional[uuid.UUID] = None


def resolve_variant_price(
    prices: Iterable[Mapping[str, Any]],
    location_group_id: Optional[uuid.UUID] = None,
) -> ResolvedPrice:
    """Pick the price record for ``location_group_id``.

    Falls back to the first record when no record matches (or no location
    was requested), and to a zero price when the variant has no prices.
    """
    records = list(prices)
    if not records:
        return ResolvedPrice(price=ZERO, mrp=ZERO)

    chosen = records[0]
    if location_group_id is not None:
        for record in records:
            if record["location_group_id"] == location_group_id:
                chosen = record
                break

    return ResolvedPrice(
        price=Decimal(str(chosen["price"])),
        mrp=Decimal(str(chosen["mrp"])),
        location_group_id=chosen["location_group_id"],
    )


async def resolve_location_group_id(
    db: AsyncSession,
    store_id: uuid.UUID,
    location_group_id: Optional[uuid.UUID] = None,
    pincode: Optional[str] = None,
) -> Optional[uuid.UUID]:
    """Work out which location group prices should be resolved against.

    An explicit group id wins; otherwise the pincode is looked up. An unknown
    pincode is the caller's mistake and raises LocationNotFoundError.
    """
    if location_group_id is not None or not pincode:
        return location_group_id

    result = await db.execute(
        select(Location).where(Location.store_id == store_id, Location.pincode == pincode)
    )
    location = result.scalar_one_or_none()
    if location is None:
        logger.info("Invalid pincode %s for store %s", pincode, store_id)
        raise LocationNotFoundError("Invalid pincode")
    return location.location_group_id


def parse_price_filter(value: Optional[str]) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """Parse the storefront ``price`` filter.

    ``"1000-5000"`` is an inclusive range and a bare number is a lower
    bound (the "5000 and above" bucket). Anything unparsable means no filter.
    """
    if not value:
        return None, None
    try:
        if "-" not in value:
            return Decimal(value), None
        low, high = value.split("-", 1)
        if not high:
            return None, None
        return Decimal(low), Decimal(high)
    except InvalidOperation:
        return None, None
