"""Best-selling products over a recent time window."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Hashable, Iterable, Iterator, Mapping, Optional

from libs.common.datetime_utils import as_utc, utc_now
from libs.common.logging import get_logger
from services.store_service.errors import InvalidTimeFrameError
from services.store_service.models import (
    Order,
    OrderItem,
    Product,
    ProductSpecification,
    SpecificationField,
    Variant,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

# Label -> window length in days; None means no lower bound.
TIME_FRAMES: dict[str, Optional[int]] = {
    "7 days": 7,
    "30 days": 30,
    "90 days": 90,
    "all time": None,
}
DEFAULT_TIME_FRAME = "30 days"


@dataclass(frozen=True)
class SalesTotal:
    product_id: Hashable
    total_sold: int


def window_start(time_frame: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Return the earliest order timestamp counted for ``time_frame``."""
    if time_frame not in TIME_FRAMES:
        raise InvalidTimeFrameError("Invalid time frame")
    days = TIME_FRAMES[time_frame]
    if days is None:
        return None
    return (now or utc_now()) - timedelta(days=days)


def paid_line_items(
    orders: Iterable[Mapping[str, Any]], since: Optional[datetime] = None
) -> Iterator[tuple[Hashable, int]]:
    """Yield ``(product_id, quantity)`` for every item of a paid order in the window."""
    for order in orders:
        if not order["is_paid"]:
            continue
        if since is not None and as_utc(order["created_at"]) < since:
            continue
        for item in order["items"]:
            yield item["product_id"], item["quantity"]


def tally_units_sold(line_items: Iterable[tuple[Hashable, int]]) -> dict[Hashable, int]:
    """Sum quantities per product, keeping first-seen order."""
    totals: dict[Hashable, int] = {}
    for product_id, quantity in line_items:
        totals[product_id] = totals.get(product_id, 0) + quantity
    return totals


def rank_and_paginate(
    totals: Mapping[Hashable, int], page: int = 1, limit: int = 12
) -> list[SalesTotal]:
    """Sort totals descending (stable on ties) and return the requested page."""
    ranked = sorted(
        (SalesTotal(product_id, total) for product_id, total in totals.items()),
        key=lambda entry: entry.total_sold,
        reverse=True,
    )
    start = (max(page, 1) - 1) * limit
    return ranked[start : start + limit]


async def fetch_hot_deals(
    db: AsyncSession,
    store_id: uuid.UUID,
    *,
    category_id: Optional[uuid.UUID] = None,
    time_frame: str = DEFAULT_TIME_FRAME,
    page: int = 1,
    limit: int = 12,
    now: Optional[datetime] = None,
) -> list[tuple[Product, int]]:
    """Return ``(product, total_sold)`` pairs for one page of hot deals."""
    since = window_start(time_frame, now)

    query = (
        select(Variant.product_id, OrderItem.quantity)
        .join(Order, Order.id == OrderItem.order_id)
        .join(Variant, Variant.id == OrderItem.variant_id)
        .join(Product, Product.id == Variant.product_id)
        .where(
            Order.store_id == store_id,
            Order.is_paid.is_(True),
            Product.is_archived.is_(False),
        )
        .order_by(Order.created_at, OrderItem.id)
    )
    if since is not None:
        query = query.where(Order.created_at >= since)
    if category_id is not None:
        query = query.where(Product.category_id == category_id)

    rows = (await db.execute(query)).all()
    if not rows:
        logger.info("No paid orders for store %s in %s", store_id, time_frame)
        return []

    page_totals = rank_and_paginate(tally_units_sold(rows), page=page, limit=limit)
    if not page_totals:
        return []

    product_ids = [entry.product_id for entry in page_totals]
    products_result = await db.execute(
        select(Product)
        .where(Product.id.in_(product_ids), Product.store_id == store_id)
        .options(
            selectinload(Product.category),
            selectinload(Product.brand),
            selectinload(Product.variants).selectinload(Variant.media),
            selectinload(Product.variants).selectinload(Variant.variant_prices),
            selectinload(Product.variants).selectinload(Variant.size),
            selectinload(Product.variants).selectinload(Variant.color),
            selectinload(Product.specifications)
            .selectinload(ProductSpecification.specification_field)
            .selectinload(SpecificationField.group),
        )
    )
    products = {product.id: product for product in products_result.scalars().all()}

    deals = [
        (products[entry.product_id], entry.total_sold)
        for entry in page_totals
        if entry.product_id in products
    ]
    logger.info("Found %d hot deal products for store %s", len(deals), store_id)
    return deals
