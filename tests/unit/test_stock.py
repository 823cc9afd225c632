"""Unit tests for payment confirmation and stock decrements.

mark_order_paid is called directly with the db_session fixture; the HTTP
webhook around it is covered in the integration tests.
"""

import uuid

import pytest
from services.store_service.errors import OrderNotFoundError
from services.store_service.models import Order, StockMovement, Variant
from services.store_service.services import stock as stock_service
from services.store_service.services.stock import mark_order_paid, plan_stock_decrements
from sqlalchemy import select, update
from tests.factories import OrderFactory, OrderItemFactory, VariantFactory


async def _make_order(db, catalog, items):
    """Insert an unpaid order with ``(variant, quantity)`` items."""
    order = OrderFactory.create(store_id=catalog.store.id)
    db.add(order)
    await db.commit()
    db.add_all(
        [
            OrderItemFactory.create(order_id=order.id, variant_id=variant.id, quantity=qty)
            for variant, qty in items
        ]
    )
    await db.commit()
    return order


async def _stock_of(db, variant_id):
    result = await db.execute(select(Variant.stock).where(Variant.id == variant_id))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# plan_stock_decrements
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_plan_sums_quantities_and_floors_at_zero():
    a, b = uuid.uuid4(), uuid.uuid4()

    changes = plan_stock_decrements([(a, 2), (b, 5), (a, 3)], {a: 10, b: 3})

    by_id = {change.variant_id: change for change in changes}
    assert by_id[a].quantity == 5
    assert by_id[a].stock_after == 5
    assert by_id[b].stock_before == 3
    assert by_id[b].stock_after == 0


@pytest.mark.unit
def test_plan_skips_deleted_variants():
    kept, gone = uuid.uuid4(), uuid.uuid4()

    changes = plan_stock_decrements([(kept, 1), (gone, 1)], {kept: 4})

    assert [change.variant_id for change in changes] == [kept]


# ---------------------------------------------------------------------------
# mark_order_paid
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid_decrements_stock_and_records_movement(db_session, catalog):
    order = await _make_order(db_session, catalog, [(catalog.variant, 3)])

    paid, applied = await mark_order_paid(
        db_session, order.id, address="1 MG Road", phone="+919999999999"
    )

    assert applied is True
    assert paid.is_paid is True
    assert paid.paid_at is not None
    assert paid.address == "1 MG Road"
    assert await _stock_of(db_session, catalog.variant.id) == 7

    movements = (await db_session.execute(select(StockMovement))).scalars().all()
    assert len(movements) == 1
    assert movements[0].quantity == -3
    assert movements[0].order_id == order.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid_is_idempotent(db_session, catalog):
    order = await _make_order(db_session, catalog, [(catalog.variant, 4)])

    await mark_order_paid(db_session, order.id)
    _, applied = await mark_order_paid(db_session, order.id)

    assert applied is False
    assert await _stock_of(db_session, catalog.variant.id) == 6


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid_never_goes_negative(db_session, catalog):
    order = await _make_order(db_session, catalog, [(catalog.variant, 25)])

    await mark_order_paid(db_session, order.id)

    assert await _stock_of(db_session, catalog.variant.id) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failure_midway_changes_nothing(db_session, catalog, monkeypatch):
    """A failure on the second variant leaves the order unpaid and all stock intact."""
    second = VariantFactory.create(product_id=catalog.product.id, stock=5)
    db_session.add(second)
    await db_session.commit()
    order = await _make_order(db_session, catalog, [(catalog.variant, 2), (second, 1)])

    original = stock_service._apply_change
    calls = []

    def _flaky_apply(db, variant, change, order):
        calls.append(variant.id)
        if len(calls) == 2:
            raise RuntimeError("database went away")
        return original(db, variant, change, order)

    monkeypatch.setattr(stock_service, "_apply_change", _flaky_apply)
    # The rollback expires loaded rows, so keep plain ids for the checks
    first_id, second_id, order_id = catalog.variant.id, second.id, order.id

    with pytest.raises(RuntimeError):
        await mark_order_paid(db_session, order_id)

    assert await _stock_of(db_session, first_id) == 10
    assert await _stock_of(db_session, second_id) == 5
    is_paid = await db_session.execute(select(Order.is_paid).where(Order.id == order_id))
    assert is_paid.scalar_one() is False
    assert (await db_session.execute(select(StockMovement))).scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_order_raises(db_session):
    with pytest.raises(OrderNotFoundError):
        await mark_order_paid(db_session, uuid.uuid4())


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid_rereads_order_paid_elsewhere(db_session, catalog):
    """An order paid by another delivery is not decremented again."""
    order = await _make_order(db_session, catalog, [(catalog.variant, 3)])
    # Commit the paid flag behind the session's back; the loaded order stays unpaid
    await db_session.execute(
        update(Order)
        .where(Order.id == order.id)
        .values(is_paid=True)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()
    assert order.is_paid is False

    paid, applied = await mark_order_paid(db_session, order.id)

    assert applied is False
    assert paid.is_paid is True
    assert await _stock_of(db_session, catalog.variant.id) == 10
    assert (await db_session.execute(select(StockMovement))).scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid_decrements_from_committed_stock(db_session, catalog):
    order = await _make_order(db_session, catalog, [(catalog.variant, 3)])
    await db_session.execute(
        update(Variant)
        .where(Variant.id == catalog.variant.id)
        .values(stock=4)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()

    await mark_order_paid(db_session, order.id)

    assert await _stock_of(db_session, catalog.variant.id) == 1
    movement = (await db_session.execute(select(StockMovement))).scalar_one()
    assert movement.quantity == -3
