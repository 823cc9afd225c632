"""Integration tests for storefront product listing, detail, hot deals and reviews."""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from libs.common.datetime_utils import utc_now
from services.store_service.models import ProductSpecification
from tests.factories import (
    BrandFactory,
    CategoryFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    ReviewFactory,
    SpecificationFieldFactory,
    SpecificationGroupFactory,
    SubCategoryFactory,
    VariantFactory,
    VariantPriceFactory,
)


def _resolved(product_json):
    return product_json["variants"][0]["resolved_price"]


async def _add_product(db, catalog, name, price, stock=5, **overrides):
    """Insert a product with one variant priced in the metro group."""
    overrides.setdefault("category_id", catalog.category.id)
    product = ProductFactory.create(store_id=catalog.store.id, name=name, **overrides)
    db.add(product)
    await db.commit()
    variant = VariantFactory.create(product_id=product.id, stock=stock)
    db.add(variant)
    await db.commit()
    db.add(
        VariantPriceFactory.create(
            variant_id=variant.id,
            location_group_id=catalog.metro.id,
            price=Decimal(price),
            mrp=Decimal(price),
        )
    )
    await db.commit()
    return product, variant


# ---------------------------------------------------------------------------
# GET /api/{store_id}/products
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_prices_resolve_for_pincode(client, catalog):
    response = await client.get(
        f"/api/{catalog.store.id}/products", params={"pincode": "600001"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 1
    resolved = _resolved(data["products"][0])
    assert Decimal(str(resolved["price"])) == Decimal("80.00")
    assert Decimal(str(resolved["mrp"])) == Decimal("90.00")
    assert resolved["location_group_id"] == str(catalog.rural.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_without_location_first_price_is_used(client, catalog):
    response = await client.get(f"/api/{catalog.store.id}/products")

    resolved = _resolved(response.json()["products"][0])
    assert Decimal(str(resolved["price"])) == Decimal("100.00")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_pincode_is_404(client, catalog):
    response = await client.get(
        f"/api/{catalog.store.id}/products", params={"pincode": "999999"}
    )

    assert response.status_code == 404
    assert response.json()["code"] == "LOCATION_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_archived_products_are_hidden(client, db_session, catalog):
    await _add_product(db_session, catalog, "Old", "10.00", is_archived=True)

    response = await client.get(f"/api/{catalog.store.id}/products")

    assert [p["name"] for p in response.json()["products"]] == ["Runner"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_slug_filter_returns_single_product(client, catalog):
    response = await client.get(
        f"/api/{catalog.store.id}/products", params={"slug": "runner"}
    )
    assert response.json()["total_count"] == 1
    assert response.json()["products"][0]["id"] == str(catalog.product.id)

    missing = await client.get(
        f"/api/{catalog.store.id}/products", params={"slug": "nope"}
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_price_range_uses_shoppers_group(client, db_session, catalog):
    await _add_product(db_session, catalog, "Premium", "5000.00")

    in_range = await client.get(
        f"/api/{catalog.store.id}/products",
        params={"locationGroupId": str(catalog.metro.id), "price": "50-500"},
    )
    assert [p["name"] for p in in_range.json()["products"]] == ["Runner"]

    above = await client.get(
        f"/api/{catalog.store.id}/products",
        params={"locationGroupId": str(catalog.metro.id), "price": "1000"},
    )
    assert [p["name"] for p in above.json()["products"]] == ["Premium"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_brand_and_featured_filters(client, db_session, catalog):
    brand = BrandFactory.create(store_id=catalog.store.id, name="Acme")
    db_session.add(brand)
    await db_session.commit()
    await _add_product(
        db_session, catalog, "Acme Boot", "10.00", brand_id=brand.id, is_featured=True
    )

    by_brand = await client.get(
        f"/api/{catalog.store.id}/products", params={"brandId": str(brand.id)}
    )
    assert [p["name"] for p in by_brand.json()["products"]] == ["Acme Boot"]
    assert by_brand.json()["products"][0]["brand"]["name"] == "Acme"

    featured = await client.get(
        f"/api/{catalog.store.id}/products", params={"isFeatured": "true"}
    )
    assert featured.json()["total_count"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_subcategory_must_match_category(client, db_session, catalog):
    other = CategoryFactory.create(store_id=catalog.store.id)
    db_session.add(other)
    await db_session.commit()
    sub = SubCategoryFactory.create(store_id=catalog.store.id, category_id=other.id)
    db_session.add(sub)
    await db_session.commit()

    mismatch = await client.get(
        f"/api/{catalog.store.id}/products",
        params={"categoryId": str(catalog.category.id), "subCategoryId": str(sub.id)},
    )
    assert mismatch.status_code == 400

    unknown = await client.get(
        f"/api/{catalog.store.id}/products", params={"subCategoryId": str(uuid.uuid4())}
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_ratings_and_pagination(client, db_session, catalog):
    await _add_product(db_session, catalog, "Second", "10.00")
    db_session.add_all(
        [
            ReviewFactory.create(product_id=catalog.product.id, rating=5),
            ReviewFactory.create(product_id=catalog.product.id, rating=4),
            ReviewFactory.create(product_id=catalog.product.id, rating=4),
        ]
    )
    await db_session.commit()

    page = await client.get(
        f"/api/{catalog.store.id}/products", params={"page": 2, "limit": 1}
    )
    assert page.json()["total_count"] == 2
    assert len(page.json()["products"]) == 1

    detail = await client.get(
        f"/api/{catalog.store.id}/products/{catalog.product.id}"
    )
    assert detail.status_code == 200
    assert detail.json()["number_of_ratings"] == 3
    assert detail.json()["average_rating"] == pytest.approx(4.33)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_variant_ids_rejected(client, catalog):
    response = await client.get(
        f"/api/{catalog.store.id}/products", params={"variantIds": "not-a-uuid"}
    )

    assert response.status_code == 400

    matching = await client.get(
        f"/api/{catalog.store.id}/products",
        params={"variantIds": f"{catalog.variant.id},{uuid.uuid4()}"},
    )
    assert matching.json()["total_count"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_product_detail_includes_related(client, db_session, catalog):
    store_id = catalog.store.id
    now = utc_now()
    for age, name in enumerate(["Newest", "Newer", "New", "Older", "Oldest"]):
        await _add_product(
            db_session, catalog, name, "10.00", created_at=now - timedelta(hours=age + 1)
        )
    await _add_product(db_session, catalog, "Retired", "10.00", is_archived=True)
    bags = CategoryFactory.create(store_id=store_id, name="Bags")
    db_session.add(bags)
    await db_session.commit()
    await _add_product(db_session, catalog, "Tote", "20.00", category_id=bags.id)

    url = f"/api/{store_id}/products/{catalog.product.id}"
    detail = await client.get(url, params={"includeRelated": "true", "pincode": "560001"})
    plain = await client.get(url)

    assert detail.status_code == 200
    related = detail.json()["related_products"]
    assert [p["name"] for p in related] == ["Newest", "Newer", "New", "Older"]
    assert Decimal(str(_resolved(related[0])["price"])) == Decimal("10.00")
    assert detail.json()["name"] == "Runner"
    assert plain.json()["related_products"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_product_detail_lists_specifications(client, db_session, catalog):
    group = SpecificationGroupFactory.create(store_id=catalog.store.id, name="Build")
    db_session.add(group)
    await db_session.commit()
    field = SpecificationFieldFactory.create(
        store_id=catalog.store.id, group_id=group.id, name="Weight"
    )
    db_session.add(field)
    await db_session.commit()
    db_session.add(
        ProductSpecification(
            product_id=catalog.product.id, specification_field_id=field.id, value="250 g"
        )
    )
    await db_session.commit()

    response = await client.get(f"/api/{catalog.store.id}/products/{catalog.product.id}")

    specs = response.json()["specifications"]
    assert len(specs) == 1
    assert specs[0]["value"] == "250 g"
    assert specs[0]["specification_field"]["name"] == "Weight"
    assert specs[0]["specification_field"]["group"]["name"] == "Build"


# ---------------------------------------------------------------------------
# GET /api/{store_id}/products/hot-deals
# ---------------------------------------------------------------------------


async def _paid_order(db, store_id, variant, quantity, age_days=1, is_paid=True):
    order = OrderFactory.create(
        store_id=store_id,
        is_paid=is_paid,
        created_at=utc_now() - timedelta(days=age_days),
    )
    db.add(order)
    await db.commit()
    db.add(OrderItemFactory.create(order_id=order.id, variant_id=variant.id, quantity=quantity))
    await db.commit()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hot_deals_rank_by_units_sold(client, db_session, catalog):
    best, best_variant = await _add_product(db_session, catalog, "Best Seller", "10.00")
    store_id = catalog.store.id
    await _paid_order(db_session, store_id, catalog.variant, 2)
    await _paid_order(db_session, store_id, best_variant, 5)
    await _paid_order(db_session, store_id, catalog.variant, 100, is_paid=False)
    await _paid_order(db_session, store_id, catalog.variant, 50, age_days=60)

    response = await client.get(f"/api/{store_id}/products/hot-deals")

    assert response.status_code == 200
    assert [(p["name"], p["total_sold"]) for p in response.json()] == [
        ("Best Seller", 5),
        ("Runner", 2),
    ]

    all_time = await client.get(
        f"/api/{store_id}/products/hot-deals", params={"timeFrame": "all time"}
    )
    assert all_time.json()[0]["name"] == "Runner"
    assert all_time.json()[0]["total_sold"] == 52


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hot_deals_category_filter(client, db_session, catalog):
    store_id = catalog.store.id
    bags = CategoryFactory.create(store_id=store_id, name="Bags")
    db_session.add(bags)
    await db_session.commit()
    _, best_variant = await _add_product(db_session, catalog, "Best Seller", "10.00")
    _, tote_variant = await _add_product(
        db_session, catalog, "Tote", "20.00", category_id=bags.id
    )
    await _paid_order(db_session, store_id, catalog.variant, 2)
    await _paid_order(db_session, store_id, best_variant, 5)
    await _paid_order(db_session, store_id, tote_variant, 7)

    shoes = await client.get(
        f"/api/{store_id}/products/hot-deals",
        params={"categoryId": str(catalog.category.id)},
    )
    totes = await client.get(
        f"/api/{store_id}/products/hot-deals", params={"categoryId": str(bags.id)}
    )
    everything = await client.get(f"/api/{store_id}/products/hot-deals")

    assert [(p["name"], p["total_sold"]) for p in shoes.json()] == [
        ("Best Seller", 5),
        ("Runner", 2),
    ]
    assert [(p["name"], p["total_sold"]) for p in totes.json()] == [("Tote", 7)]
    assert [p["name"] for p in everything.json()] == ["Tote", "Best Seller", "Runner"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hot_deals_empty_and_invalid_time_frame(client, catalog):
    empty = await client.get(f"/api/{catalog.store.id}/products/hot-deals")
    assert empty.status_code == 200
    assert empty.json() == []

    invalid = await client.get(
        f"/api/{catalog.store.id}/products/hot-deals", params={"timeFrame": "1 year"}
    )
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "INVALID_TIME_FRAME"


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_and_list_reviews(client, catalog):
    url = f"/api/{catalog.store.id}/products/{catalog.product.id}/reviews"
    payload = {
        "user_id": "shopper-1",
        "user_name": "Asha",
        "rating": 3,
        "text": "Runs small",
        "images": ["https://cdn.example.com/r1.jpg"],
    }

    created = await client.post(url, json=payload)
    assert created.status_code == 201
    assert created.json()["images"] == ["https://cdn.example.com/r1.jpg"]

    await client.post(url, json={**payload, "rating": 5, "text": "Love them"})

    listed = await client.get(url)
    assert [r["rating"] for r in listed.json()] == [5, 3]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_review_validation(client, catalog):
    missing = await client.post(
        f"/api/{catalog.store.id}/products/{uuid.uuid4()}/reviews",
        json={"user_id": "u", "user_name": "U", "rating": 4, "text": "ok"},
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Product does not exist"

    bad_rating = await client.post(
        f"/api/{catalog.store.id}/products/{catalog.product.id}/reviews",
        json={"user_id": "u", "user_name": "U", "rating": 6, "text": "ok"},
    )
    assert bad_rating.status_code == 422
