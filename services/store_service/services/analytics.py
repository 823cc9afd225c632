"""Dashboard revenue figures over paid orders."""

import calendar
import uuid
from decimal import Decimal
from typing import Iterable

from services.store_service.models import Order, OrderItem, Product, Variant
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

MONTH_NAMES = [calendar.month_abbr[month] for month in range(1, 13)]


def item_revenue(item: OrderItem) -> Decimal:
    """Quantity times the variant's first listed price (zero without prices)."""
    prices = item.variant.variant_prices if item.variant is not None else []
    price = prices[0].price if prices else Decimal("0")
    return Decimal(item.quantity) * Decimal(price)


def order_revenue(order: Order) -> Decimal:
    return sum((item_revenue(item) for item in order.order_items), Decimal("0"))


def monthly_revenue(orders: Iterable[Order]) -> list[dict]:
    """Bucket order revenue by calendar month, Jan..Dec."""
    totals = [Decimal("0")] * 12
    for order in orders:
        totals[order.created_at.month - 1] += order_revenue(order)
    return [{"name": name, "total": total} for name, total in zip(MONTH_NAMES, totals)]


async def load_paid_orders(db: AsyncSession, store_id: uuid.UUID) -> list[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.store_id == store_id, Order.is_paid.is_(True))
        .options(
            selectinload(Order.order_items)
            .selectinload(OrderItem.variant)
            .selectinload(Variant.variant_prices)
        )
    )
    return list(result.scalars().all())


async def count_sales(db: AsyncSession, store_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Order.id)).where(
            Order.store_id == store_id, Order.is_paid.is_(True)
        )
    )
    return result.scalar() or 0


async def count_products_in_stock(db: AsyncSession, store_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(distinct(Variant.product_id)))
        .join(Product, Product.id == Variant.product_id)
        .where(Product.store_id == store_id, Variant.stock > 0)
    )
    return result.scalar() or 0
