"""Short human-readable order numbers."""

import random
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.store_service.errors import OrderNumberAllocationError
from services.store_service.models import Order
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

MAX_ATTEMPTS = 100


def order_number_prefix(now: datetime) -> str:
    """Two-digit year followed by two-digit month, e.g. ``2610``."""
    return now.strftime("%y%m")


async def generate_order_number(
    db: AsyncSession,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Return an unused ``YYMM`` + 3-digit order number."""
    prefix = order_number_prefix(now or utc_now())
    rng = rng or random.Random()

    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = f"{prefix}{rng.randrange(1000):03d}"
        existing = await db.execute(
            select(Order.id).where(Order.order_number == candidate)
        )
        if existing.scalar_one_or_none() is None:
            return candidate
        logger.warning(
            "Order number %s already exists, retrying (attempt %d)", candidate, attempt
        )

    raise OrderNumberAllocationError(
        "Failed to generate a unique order number after maximum attempts"
    )
