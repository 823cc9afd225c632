"""Integration tests for storefront checkout.

The Razorpay client is swapped for an in-memory fake through the
get_razorpay_client dependency.
"""

import json
import uuid

import pytest
from services.store_service.app.main import app
from services.store_service.models import Order
from services.store_service.razorpay_client import (
    GatewayOrder,
    RazorpayError,
    get_razorpay_client,
)
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from tests.factories import OrderFactory


class FakeRazorpay:
    key_id = "rzp_test_key"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def create_order(self, amount, currency, receipt, notes=None):
        self.calls.append(
            {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        )
        if self.fail:
            raise RazorpayError("gateway down", 503)
        return GatewayOrder(
            id=f"order_{len(self.calls)}", amount=amount, currency=currency, receipt=receipt
        )


@pytest.fixture
def razorpay():
    fake = FakeRazorpay()
    app.dependency_overrides[get_razorpay_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_razorpay_client, None)


async def _orders(db):
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.order_items))
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


# ---------------------------------------------------------------------------
# POST /api/{store_id}/checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_prices_cart_for_location_group(
    client, db_session, catalog, razorpay
):
    response = await client.post(
        f"/api/{catalog.store.id}/checkout",
        json={
            "products": [
                {
                    "id": str(catalog.variant.id),
                    "quantity": 2,
                    "locationGroupId": str(catalog.rural.id),
                }
            ],
            "phone": "+919999999999",
            "address": "1 MG Road",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 16000
    assert data["currency"] == "INR"
    assert data["gateway_order_id"] == "order_1"
    assert data["key"] == "rzp_test_key"

    call = razorpay.calls[0]
    assert call["receipt"] == data["order_id"]
    assert call["notes"]["orderId"] == data["order_id"]
    assert json.loads(call["notes"]["locationGroupIds"]) == [str(catalog.rural.id)]

    orders = await _orders(db_session)
    assert len(orders) == 1
    order = orders[0]
    assert order.is_paid is False
    assert order.gateway_order_id == "order_1"
    assert order.amount_paise == 16000
    assert order.order_items[0].location_group_id == catalog.rural.id
    assert str(order.order_items[0].unit_price) == "80.00"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_without_group_uses_first_price(client, catalog, razorpay):
    response = await client.post(
        f"/api/{catalog.store.id}/checkout",
        json={"products": [{"id": str(catalog.variant.id), "quantity": 1}]},
    )

    assert response.status_code == 200
    assert response.json()["amount"] == 10000


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_rejects_bad_carts(client, catalog, razorpay):
    url = f"/api/{catalog.store.id}/checkout"

    empty = await client.post(url, json={"products": []})
    assert empty.status_code == 400
    assert empty.json()["detail"] == "Variant IDs are required"

    unknown = await client.post(
        url, json={"products": [{"id": str(uuid.uuid4()), "quantity": 1}]}
    )
    assert unknown.status_code == 400
    assert unknown.json()["detail"] == "Some variants not found"

    too_many = await client.post(
        url, json={"products": [{"id": str(catalog.variant.id), "quantity": 11}]}
    )
    assert too_many.status_code == 400
    assert too_many.json()["detail"].startswith("Insufficient stock")

    zero_quantity = await client.post(
        url, json={"products": [{"id": str(catalog.variant.id), "quantity": 0}]}
    )
    assert zero_quantity.status_code == 422

    assert razorpay.calls == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_gateway_failure_leaves_no_order(client, db_session, catalog, razorpay):
    razorpay.fail = True

    response = await client.post(
        f"/api/{catalog.store.id}/checkout",
        json={"products": [{"id": str(catalog.variant.id), "quantity": 1}]},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to initialize payment"
    assert await _orders(db_session) == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_reuses_unpaid_order(client, db_session, catalog, razorpay):
    url = f"/api/{catalog.store.id}/checkout"
    first = await client.post(
        url, json={"products": [{"id": str(catalog.variant.id), "quantity": 1}]}
    )
    order_id = first.json()["order_id"]

    second = await client.post(
        url,
        json={
            "orderId": order_id,
            "products": [{"id": str(catalog.variant.id), "quantity": 3}],
        },
    )

    assert second.status_code == 200
    assert second.json()["order_id"] == order_id
    assert second.json()["amount"] == 30000
    orders = await _orders(db_session)
    assert len(orders) == 1
    assert [item.quantity for item in orders[0].order_items] == [3]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_refuses_paid_order(client, db_session, catalog, razorpay):
    paid = OrderFactory.create(store_id=catalog.store.id, is_paid=True)
    db_session.add(paid)
    await db_session.commit()

    response = await client.post(
        f"/api/{catalog.store.id}/checkout",
        json={
            "orderId": str(paid.id),
            "products": [{"id": str(catalog.variant.id), "quantity": 1}],
        },
    )

    assert response.status_code == 400
