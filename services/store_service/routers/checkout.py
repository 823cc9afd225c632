"""Storefront checkout: price the cart server-side and open a Razorpay order."""

import json
import uuid
from decimal import ROUND_HALF_UP, Decimal

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.rate_limit import payment_limit
from libs.db.session import get_async_db
from services.store_service.models import Order, OrderItem, Product, Variant
from services.store_service.razorpay_client import (
    RazorpayClient,
    RazorpayError,
    get_razorpay_client,
)
from services.store_service.routers._helpers import get_store_or_404, price_records
from services.store_service.schemas import CheckoutRequest, CheckoutResponse
from services.store_service.services.order_numbers import generate_order_number
from services.store_service.services.pricing import resolve_variant_price
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["store"])


def to_paise(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def _load_reusable_order(
    db: AsyncSession, store_id: uuid.UUID, order_id: uuid.UUID
) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.store_id == store_id)
        .options(selectinload(Order.order_items))
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.is_paid:
        raise HTTPException(status_code=400, detail="Order has already been paid")
    return order


@router.post("/{store_id}/checkout", response_model=CheckoutResponse)
@payment_limit
async def checkout(
    request: Request,
    store_id: uuid.UUID,
    checkout_in: CheckoutRequest,
    db: AsyncSession = Depends(get_async_db),
    razorpay: RazorpayClient = Depends(get_razorpay_client),
):
    """
    Create (or re-open) an unpaid order for the cart and a matching gateway order.

    Unit prices are resolved from the stored variant prices for each line's
    location group; client-side prices are never trusted.
    """
    settings = get_settings()
    await get_store_or_404(db, store_id)

    if not checkout_in.products:
        raise HTTPException(status_code=400, detail="Variant IDs are required")

    requested: dict[uuid.UUID, int] = {}
    for item in checkout_in.products:
        requested[item.id] = requested.get(item.id, 0) + item.quantity

    result = await db.execute(
        select(Variant)
        .join(Product, Product.id == Variant.product_id)
        .where(Variant.id.in_(requested.keys()), Product.store_id == store_id)
        .options(selectinload(Variant.variant_prices))
    )
    variants = {variant.id: variant for variant in result.scalars().all()}
    if len(variants) != len(requested):
        raise HTTPException(status_code=400, detail="Some variants not found")

    for variant_id, quantity in requested.items():
        if variants[variant_id].stock < quantity:
            raise HTTPException(
                status_code=400, detail=f"Insufficient stock for variant {variant_id}"
            )

    order_items = []
    amount = 0
    for item in checkout_in.products:
        resolved = resolve_variant_price(
            price_records(variants[item.id]), item.location_group_id
        )
        order_items.append(
            OrderItem(
                variant_id=item.id,
                quantity=item.quantity,
                unit_price=resolved.price,
                location_group_id=resolved.location_group_id,
            )
        )
        amount += to_paise(resolved.price) * item.quantity

    if amount <= 0:
        raise HTTPException(
            status_code=400, detail="Total amount must be greater than zero"
        )

    if checkout_in.order_id:
        order = await _load_reusable_order(db, store_id, checkout_in.order_id)
        order.order_items = order_items
    else:
        order = Order(
            id=uuid.uuid4(),
            store_id=store_id,
            order_number=await generate_order_number(db),
            order_items=order_items,
        )
        db.add(order)
    if checkout_in.phone is not None:
        order.phone = checkout_in.phone
    if checkout_in.address is not None:
        order.address = checkout_in.address
    order.amount_paise = amount
    await db.flush()

    try:
        gateway_order = await razorpay.create_order(
            amount=amount,
            currency=settings.PAYMENT_CURRENCY,
            receipt=str(order.id),
            notes={
                "orderId": str(order.id),
                "locationGroupIds": json.dumps(
                    [
                        str(item.location_group_id) if item.location_group_id else None
                        for item in checkout_in.products
                    ]
                ),
            },
        )
    except RazorpayError as e:
        await db.rollback()
        logger.error("Checkout failed for store %s: %s", store_id, e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to initialize payment",
        )

    order.gateway_order_id = gateway_order.id
    await db.commit()

    logger.info(
        "Checkout order %s (%s) created for %d paise",
        order.order_number,
        gateway_order.id,
        amount,
    )
    return CheckoutResponse(
        order_id=order.id,
        order_number=order.order_number,
        gateway_order_id=gateway_order.id,
        amount=amount,
        currency=gateway_order.currency,
        key=razorpay.key_id,
    )
