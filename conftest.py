import os
from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator

# Settings are read at import time by the db/auth/rate-limit modules, so the
# test environment has to be in place before anything from libs is imported.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "whsec_test"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import get_settings

# Clear cached settings to reload with new env vars
get_settings.cache_clear()
settings = get_settings()

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.base import Base
from libs.db.session import get_async_db
from services.store_service import models as _store_models  # noqa: F401
from services.store_service.app.main import app
from services.store_service.models import Store
from tests.factories import (
    CategoryFactory,
    LocationFactory,
    LocationGroupFactory,
    ProductFactory,
    VariantFactory,
    VariantPriceFactory,
)

ADMIN_USER_ID = "admin-user"


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(user_id=ADMIN_USER_ID, email="admin@example.com", role="admin")


@pytest_asyncio.fixture
async def client(db_session, admin_user) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app, the test DB session and an admin user.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[require_admin] = lambda: admin_user

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def store(db_session) -> Store:
    store = Store(name="Test Store", owner_id=ADMIN_USER_ID)
    db_session.add(store)
    await db_session.commit()
    return store


@pytest_asyncio.fixture
async def catalog(db_session, store) -> SimpleNamespace:
    """
    One category, two location groups and one product with a single variant.

    The variant costs 100/120 in ``metro`` (its first price) and 80/90 in
    ``rural``; pincode 560001 belongs to ``metro`` and 600001 to ``rural``.
    """
    category = CategoryFactory.create(store_id=store.id, name="Shoes", slug="shoes")
    metro = LocationGroupFactory.create(store_id=store.id, name="Metro")
    rural = LocationGroupFactory.create(store_id=store.id, name="Rural")
    db_session.add_all([category, metro, rural])
    await db_session.commit()

    metro_location = LocationFactory.create(
        store_id=store.id, location_group_id=metro.id, pincode="560001"
    )
    rural_location = LocationFactory.create(
        store_id=store.id, location_group_id=rural.id, pincode="600001"
    )
    product = ProductFactory.create(
        store_id=store.id, category_id=category.id, name="Runner", slug="runner"
    )
    db_session.add_all([metro_location, rural_location, product])
    await db_session.commit()

    variant = VariantFactory.create(product_id=product.id, stock=10, sku="RUN-1")
    db_session.add(variant)
    await db_session.commit()

    db_session.add_all(
        [
            VariantPriceFactory.create(
                variant_id=variant.id,
                location_group_id=metro.id,
                price=Decimal("100.00"),
                mrp=Decimal("120.00"),
                position=0,
            ),
            VariantPriceFactory.create(
                variant_id=variant.id,
                location_group_id=rural.id,
                price=Decimal("80.00"),
                mrp=Decimal("90.00"),
                position=1,
            ),
        ]
    )
    await db_session.commit()

    return SimpleNamespace(
        store=store,
        category=category,
        metro=metro,
        rural=rural,
        product=product,
        variant=variant,
    )
