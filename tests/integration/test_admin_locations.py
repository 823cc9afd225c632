"""Integration tests for admin delivery locations and location groups."""

import uuid

import pytest
from services.store_service.models import Location
from sqlalchemy import select

# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_crud(client, catalog):
    url = f"/admin/{catalog.store.id}/locations"
    body = {"pincode": "110001", "city": "Delhi", "state": "Delhi", "country": "India"}

    created = await client.post(url, json=body)
    assert created.status_code == 201
    assert created.json()["delivery_days"] == 1
    assert created.json()["location_group_id"] is None

    duplicate = await client.post(url, json={**body, "city": "New Delhi"})
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Location with this pincode already exists"

    location_url = f"{url}/{created.json()['id']}"
    renamed = await client.patch(location_url, json={"city": "New Delhi"})
    assert renamed.status_code == 200
    assert renamed.json()["city"] == "New Delhi"

    clash = await client.patch(location_url, json={"pincode": "560001"})
    assert clash.status_code == 400

    assert len((await client.get(url)).json()) == 3
    assert (await client.delete(location_url)).status_code == 204
    assert (await client.get(location_url)).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_group_must_belong_to_store(client, catalog):
    response = await client.post(
        f"/admin/{catalog.store.id}/locations",
        json={
            "pincode": "110001",
            "city": "Delhi",
            "state": "Delhi",
            "country": "India",
            "location_group_id": str(uuid.uuid4()),
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid location group"


# ---------------------------------------------------------------------------
# Location groups
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_group_membership(client, catalog):
    store_id = catalog.store.id
    location = await client.post(
        f"/admin/{store_id}/locations",
        json={"pincode": "110001", "city": "Delhi", "state": "Delhi", "country": "India"},
    )
    location_id = location.json()["id"]

    group = await client.post(
        f"/admin/{store_id}/location-groups",
        json={"name": "North", "location_ids": [location_id]},
    )
    assert group.status_code == 201
    assert [loc["pincode"] for loc in group.json()["locations"]] == ["110001"]

    group_url = f"/admin/{store_id}/location-groups/{group.json()['id']}"
    cleared = await client.patch(group_url, json={"name": "North India", "location_ids": []})
    assert cleared.status_code == 200
    assert cleared.json()["name"] == "North India"
    assert cleared.json()["locations"] == []

    missing = await client.patch(group_url, json={"location_ids": [str(uuid.uuid4())]})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Some locations not found"

    names = [g["name"] for g in (await client.get(f"/admin/{store_id}/location-groups")).json()]
    assert names == ["Metro", "North India", "Rural"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_location_group(client, db_session, catalog):
    store_id = catalog.store.id

    priced = await client.delete(f"/admin/{store_id}/location-groups/{catalog.metro.id}")
    assert priced.status_code == 400
    assert priced.json()["detail"] == "Cannot delete location group used by variant prices"

    location = await client.post(
        f"/admin/{store_id}/locations",
        json={"pincode": "110001", "city": "Delhi", "state": "Delhi", "country": "India"},
    )
    group = await client.post(
        f"/admin/{store_id}/location-groups",
        json={"name": "North", "location_ids": [location.json()["id"]]},
    )

    deleted = await client.delete(f"/admin/{store_id}/location-groups/{group.json()['id']}")
    assert deleted.status_code == 204

    stored = (
        await db_session.execute(
            select(Location)
            .where(Location.id == uuid.UUID(location.json()["id"]))
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert stored.location_group_id is None
