"""Integration tests for storefront search."""

from datetime import timedelta

import pytest
from libs.common.datetime_utils import utc_now
from tests.factories import BrandFactory, ProductFactory, SubCategoryFactory


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_spans_all_result_types(client, db_session, catalog):
    store_id = catalog.store.id
    running = SubCategoryFactory.create(
        store_id=store_id, category_id=catalog.category.id, name="Road"
    )
    db_session.add_all([running, BrandFactory.create(store_id=store_id, name="RunCo")])
    await db_session.commit()
    db_session.add(
        SubCategoryFactory.create(
            store_id=store_id,
            category_id=catalog.category.id,
            parent_id=running.id,
            name="Trail Running",
        )
    )
    await db_session.commit()

    response = await client.get(
        f"/api/{store_id}/search-item", params={"query": "RUN", "limit": 8}
    )

    assert response.status_code == 200
    data = response.json()
    assert [b["name"] for b in data["brands"]] == ["RunCo"]
    # A parent is returned when one of its descendants matches
    assert {s["name"] for s in data["sub_categories"]} == {"Road", "Trail Running"}
    assert [p["name"] for p in data["products"]] == ["Runner"]
    assert data["pagination"]["limit"] == 8
    assert data["pagination"]["total_products"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_requires_query(client, catalog):
    response = await client.get(
        f"/api/{catalog.store.id}/search-item", params={"query": "  "}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Search query is required"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_brand_filter(client, db_session, catalog):
    brand = BrandFactory.create(store_id=catalog.store.id, name="Acme")
    db_session.add(brand)
    await db_session.commit()
    db_session.add(
        ProductFactory.create(
            store_id=catalog.store.id,
            category_id=catalog.category.id,
            brand_id=brand.id,
            name="Acme Runner",
        )
    )
    await db_session.commit()

    response = await client.get(
        f"/api/{catalog.store.id}/search-item",
        params={"query": "runner", "brandName": "Acme"},
    )
    assert [p["name"] for p in response.json()["products"]] == ["Acme Runner"]

    unknown = await client.get(
        f"/api/{catalog.store.id}/search-item",
        params={"query": "runner", "brandName": "Nobody"},
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_product_pages_are_contiguous(client, db_session, catalog):
    store_id = catalog.store.id
    now = utc_now()
    db_session.add_all(
        [
            ProductFactory.create(
                store_id=store_id,
                category_id=catalog.category.id,
                name=f"Lamp {n}",
                created_at=now - timedelta(minutes=n),
            )
            for n in range(1, 5)
        ]
    )
    await db_session.commit()

    # limit 8 leaves two product slots per page
    pages = [
        await client.get(
            f"/api/{store_id}/search-item",
            params={"query": "lamp", "limit": 8, "page": page},
        )
        for page in (1, 2, 3)
    ]

    names = [[p["name"] for p in page.json()["products"]] for page in pages]
    assert names == [["Lamp 1", "Lamp 2"], ["Lamp 3", "Lamp 4"], []]
