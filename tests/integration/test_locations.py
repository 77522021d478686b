"""Integration tests for training locations."""

import uuid

import pytest
from sqlalchemy import select
from tests.factories import LocationFactory

from services.audit_service.models import AuditLog


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_crud(client, admin_headers):
    response = await client.post(
        "/api/locations/",
        json={
            "name": "Viharamahadevi Park",
            "address": "Colombo 07",
            "latitude": 6.91,
            "longitude": 79.86,
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    location = response.json()
    assert location["place_url"] == "https://www.google.com/maps?q=6.91,79.86"
    assert location["is_active"] is True

    response = await client.patch(
        f"/api/locations/{location['id']}",
        json={"latitude": 7.29, "longitude": 80.63},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["place_url"] == "https://www.google.com/maps?q=7.29,80.63"

    listing = await client.get("/api/locations/", headers=admin_headers)
    assert listing.status_code == 200
    assert [loc["id"] for loc in listing.json()] == [location["id"]]

    response = await client.delete(
        f"/api/locations/{location['id']}", headers=admin_headers
    )
    assert response.status_code == 204

    response = await client.get(f"/api/locations/{location['id']}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "LOCATION_NOT_FOUND"

    listing = await client.get("/api/locations/", headers=admin_headers)
    assert listing.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_explicit_place_url_is_kept(client, admin_headers):
    response = await client.post(
        "/api/locations/",
        json={
            "name": "Indoor Gym",
            "address": "Kandy",
            "latitude": 7.0,
            "longitude": 80.0,
            "place_url": "https://maps.test/gym",
        },
        headers=admin_headers,
    )
    assert response.json()["place_url"] == "https://maps.test/gym"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_mutations_are_audited(client, admin_headers, admin_user, db_session):
    response = await client.post(
        "/api/locations/",
        json={"name": "Beach", "address": "Galle"},
        headers=admin_headers,
    )
    location_id = response.json()["id"]
    await client.delete(f"/api/locations/{location_id}", headers=admin_headers)

    result = await db_session.execute(
        select(AuditLog)
        .where(AuditLog.entity_type == "Location")
        .order_by(AuditLog.timestamp.asc())
    )
    entries = result.scalars().all()
    assert [e.action for e in entries] == ["CREATE_LOCATION", "DELETE_LOCATION"]
    assert all(e.entity_id == location_id for e in entries)
    assert all(e.actor_id == admin_user.id for e in entries)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_validation(client, admin_headers):
    response = await client.post(
        "/api/locations/",
        json={"name": "", "address": "x", "latitude": 120},
        headers=admin_headers,
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"body.name", "body.latitude"} <= fields


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_missing_location(client, admin_headers):
    response = await client.patch(
        f"/api/locations/{uuid.uuid4()}", json={"name": "x"}, headers=admin_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", ["name", "address", "is_active"])
async def test_update_location_rejects_null(client, admin_headers, db_session, field):
    location = LocationFactory.create()
    db_session.add(location)
    await db_session.commit()

    response = await client.patch(
        f"/api/locations/{location.id}", json={field: None}, headers=admin_headers
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert f"body.{field}" in {error["field"] for error in body["errors"]}

    response = await client.get(f"/api/locations/{location.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == location.name


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_location_may_clear_coordinates(client, admin_headers, db_session):
    location = LocationFactory.create(latitude=6.91, longitude=79.86)
    db_session.add(location)
    await db_session.commit()

    response = await client.patch(
        f"/api/locations/{location.id}",
        json={"latitude": None, "longitude": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["latitude"] is None
    assert response.json()["longitude"] is None
