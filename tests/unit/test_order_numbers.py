"""Unit tests for order number allocation."""

import random
from datetime import datetime, timezone

import pytest
from services.store_service.errors import OrderNumberAllocationError
from services.store_service.services import order_numbers
from services.store_service.services.order_numbers import (
    generate_order_number,
    order_number_prefix,
)
from tests.factories import OrderFactory

OCT_2026 = datetime(2026, 10, 19, tzinfo=timezone.utc)


@pytest.mark.unit
def test_prefix_is_year_and_month():
    assert order_number_prefix(OCT_2026) == "2610"
    assert order_number_prefix(datetime(2027, 1, 1)) == "2701"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_number_has_prefix_and_three_digits(db_session):
    number = await generate_order_number(db_session, now=OCT_2026)

    assert len(number) == 7
    assert number.startswith("2610")
    assert number[4:].isdigit()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_taken_number_is_skipped(db_session, store):
    first = await generate_order_number(db_session, now=OCT_2026, rng=random.Random(7))
    db_session.add(OrderFactory.create(store_id=store.id, order_number=first))
    await db_session.commit()

    second = await generate_order_number(db_session, now=OCT_2026, rng=random.Random(7))

    assert second != first
    assert second.startswith("2610")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_gives_up_after_max_attempts(db_session, store, monkeypatch):
    monkeypatch.setattr(order_numbers, "MAX_ATTEMPTS", 3)

    class _StuckRandom(random.Random):
        def randrange(self, *args, **kwargs):
            return 42

    db_session.add(OrderFactory.create(store_id=store.id, order_number="2610042"))
    await db_session.commit()

    with pytest.raises(OrderNumberAllocationError):
        await generate_order_number(db_session, now=OCT_2026, rng=_StuckRandom())
