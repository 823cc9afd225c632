"""Payment confirmation: mark an order paid and take its items out of stock.

Everything happens in one database transaction so a failure part-way leaves
neither the order nor any variant stock changed.
"""

import uuid
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.store_service.errors import OrderNotFoundError
from services.store_service.models import (
    Order,
    StockMovement,
    StockMovementReason,
    Variant,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


@dataclass(frozen=True)
class StockChange:
    variant_id: uuid.UUID
    quantity: int
    stock_before: int
    stock_after: int


def plan_stock_decrements(
    items: Iterable[tuple[uuid.UUID, int]],
    stock_by_variant: Mapping[uuid.UUID, int],
) -> list[StockChange]:
    """Compute new stock levels for the given ``(variant_id, quantity)`` items.

    Quantities for the same variant are summed and stock is floored at zero.
    Variants missing from ``stock_by_variant`` are skipped.
    """
    wanted: dict[uuid.UUID, int] = {}
    for variant_id, quantity in items:
        wanted[variant_id] = wanted.get(variant_id, 0) + quantity

    changes = []
    for variant_id, quantity in wanted.items():
        if variant_id not in stock_by_variant:
            logger.warning("Variant %s no longer exists, skipping stock update", variant_id)
            continue
        before = stock_by_variant[variant_id]
        changes.append(
            StockChange(
                variant_id=variant_id,
                quantity=quantity,
                stock_before=before,
                stock_after=max(0, before - quantity),
            )
        )
    return changes


def _apply_change(db: AsyncSession, variant: Variant, change: StockChange, order: Order):
    variant.stock = change.stock_after
    db.add(
        StockMovement(
            variant_id=variant.id,
            order_id=order.id,
            reason=StockMovementReason.SALE,
            quantity=change.stock_after - change.stock_before,
            stock_before=change.stock_before,
            stock_after=change.stock_after,
            notes=f"Order {order.order_number}",
        )
    )


async def mark_order_paid(
    db: AsyncSession,
    order_id: uuid.UUID,
    *,
    address: Optional[str] = None,
    phone: Optional[str] = None,
) -> tuple[Order, bool]:
    """Flip ``order_id`` to paid and decrement stock for its items.

    Returns ``(order, applied)``; ``applied`` is False when the order was
    already paid, in which case nothing is changed.
    """
    # The row lock makes concurrent deliveries for one payment queue up here,
    # so only the first sees is_paid False
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.order_items))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise OrderNotFoundError("Order not found")

    if order.is_paid:
        logger.info("Order %s already paid, skipping", order.order_number)
        return order, False

    try:
        items = [(item.variant_id, item.quantity) for item in order.order_items]
        variant_ids = {variant_id for variant_id, _ in items}
        variants_result = await db.execute(
            select(Variant)
            .where(Variant.id.in_(variant_ids))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        variants = {variant.id: variant for variant in variants_result.scalars().all()}

        changes = plan_stock_decrements(
            items, {variant_id: v.stock for variant_id, v in variants.items()}
        )

        order.is_paid = True
        order.paid_at = utc_now()
        if address is not None:
            order.address = address
        if phone is not None:
            order.phone = phone

        for change in changes:
            _apply_change(db, variants[change.variant_id], change, order)

        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Failed to confirm payment for order %s", order_id)
        raise

    await db.refresh(order)
    logger.info(
        "Order %s marked paid, %d variant(s) decremented",
        order.order_number,
        len(changes),
    )
    return order, True
