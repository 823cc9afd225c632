"""Razorpay webhook handler."""

import json
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.razorpay_client import verify_webhook_signature
from services.store_service.services.stock import mark_order_paid
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["webhooks"])
logger = get_logger(__name__)

PAID_EVENTS = ("payment.authorized", "order.paid")


@router.post("/webhook")
async def razorpay_webhook(
    request: Request,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Razorpay webhook endpoint (no auth; verified by x-razorpay-signature).

    Paid events mark the order paid and take its items out of stock. Replays
    of an already-paid order are acknowledged without touching stock.
    """
    raw = await request.body()
    signature = request.headers.get("x-razorpay-signature")
    if not verify_webhook_signature(raw, signature, get_settings().RAZORPAY_WEBHOOK_SECRET):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook signature"
        )

    try:
        payload = json.loads(raw.decode("utf-8") or "{}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed webhook payload")

    event = payload.get("event")
    if event not in PAID_EVENTS:
        logger.info("Ignoring webhook event %s", event)
        return {"received": True}

    payment = ((payload.get("payload") or {}).get("payment") or {}).get("entity") or {}
    notes = payment.get("notes") or {}
    raw_order_id = notes.get("orderId")
    if not raw_order_id:
        raise HTTPException(status_code=400, detail="Order ID not found in webhook")
    try:
        order_id = uuid.UUID(str(raw_order_id))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid order ID in webhook")

    order, applied = await mark_order_paid(
        db,
        order_id,
        address=notes.get("address") or None,
        phone=payment.get("contact") or None,
    )
    logger.info(
        "Webhook %s for order %s handled (applied=%s)",
        event,
        order.order_number,
        applied,
    )
    return {"received": True, "order_id": str(order.id), "applied": applied}
