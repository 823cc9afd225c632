"""Admin router for orders and the dashboard overview."""

import uuid
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Order, OrderItem, Variant
from services.store_service.routers._helpers import get_store_or_404
from services.store_service.schemas import (
    DashboardResponse,
    OrderResponse,
    OrderSummary,
)
from services.store_service.services.analytics import (
    count_products_in_stock,
    count_sales,
    load_paid_orders,
    monthly_revenue,
    order_revenue,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["admin-store"])


def _describe_item(item: OrderItem) -> str:
    variant = item.variant
    if variant is None:
        return "Unknown item"
    details = ", ".join(
        part for part in (
            variant.size.value if variant.size else None,
            variant.color.name if variant.color else None,
        )
        if part
    )
    name = variant.product.name if variant.product else "Unknown product"
    return f"{name} ({details})" if details else name


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/{store_id}/orders", response_model=list[OrderSummary])
async def list_orders(
    store_id: uuid.UUID,
    is_paid: Optional[bool] = Query(None, alias="isPaid"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List orders with line descriptions and totals, newest first."""
    await get_store_or_404(db, store_id)

    query = (
        select(Order)
        .where(Order.store_id == store_id)
        .options(
            selectinload(Order.order_items)
            .selectinload(OrderItem.variant)
            .selectinload(Variant.product),
            selectinload(Order.order_items)
            .selectinload(OrderItem.variant)
            .selectinload(Variant.variant_prices),
            selectinload(Order.order_items)
            .selectinload(OrderItem.variant)
            .selectinload(Variant.size),
            selectinload(Order.order_items)
            .selectinload(OrderItem.variant)
            .selectinload(Variant.color),
        )
        .order_by(Order.created_at.desc())
    )
    if is_paid is not None:
        query = query.where(Order.is_paid == is_paid)

    orders = (await db.execute(query)).scalars().all()
    return [
        OrderSummary(
            id=order.id,
            order_number=order.order_number,
            phone=order.phone,
            address=order.address,
            products=", ".join(_describe_item(item) for item in order.order_items),
            total_price=order_revenue(order),
            is_paid=order.is_paid,
            created_at=order.created_at,
        )
        for order in orders
    ]


@router.get("/{store_id}/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    store_id: uuid.UUID,
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.store_id == store_id)
        .options(selectinload(Order.order_items))
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/{store_id}/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Revenue, sales and stock overview for the store."""
    await get_store_or_404(db, store_id)

    paid_orders = await load_paid_orders(db, store_id)
    graph = monthly_revenue(paid_orders)

    return DashboardResponse(
        total_revenue=sum(
            (order_revenue(order) for order in paid_orders), Decimal("0")
        ),
        sales_count=await count_sales(db, store_id),
        products_in_stock=await count_products_in_stock(db, store_id),
        graph_revenue=graph,
    )
