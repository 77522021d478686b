"""Integration tests for CRM contacts and their notes."""

import uuid

import pytest
from tests.factories import CrmContactFactory

from services.crm_service.models import CrmContactStatus


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_contact_defaults_to_lead(client, admin_headers, parent_user):
    response = await client.post(
        "/api/crm/",
        json={
            "parent_id": str(parent_user.id),
            "name": "Jane Parent",
            "email": "Jane@Test.com",
            "source": "instagram",
            "metadata": {"campaign": "spring"},
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "LEAD"
    assert body["email"] == "jane@test.com"
    assert body["metadata"] == {"campaign": "spring"}
    assert body["notes"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_contact_parent_must_be_a_parent(client, admin_headers, coach_user):
    response = await client.post(
        "/api/crm/", json={"parent_id": str(coach_user.id)}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["error_code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_contacts_filters(client, admin_headers, parent_user, db_session):
    db_session.add_all(
        [
            CrmContactFactory.create(parent_id=parent_user.id, name="Linked"),
            CrmContactFactory.create(name="Won", status=CrmContactStatus.CONVERTED),
            CrmContactFactory.create(name="Fresh"),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/crm/", params={"status": "CONVERTED"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["data"]] == ["Won"]

    response = await client.get(
        "/api/crm/", params={"parent_id": str(parent_user.id)}, headers=admin_headers
    )
    assert [c["name"] for c in response.json()["data"]] == ["Linked"]

    response = await client.get("/api/crm/", headers=admin_headers)
    assert response.json()["meta"]["total"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_contact_status(client, admin_headers, db_session):
    contact = CrmContactFactory.create()
    db_session.add(contact)
    await db_session.commit()

    response = await client.patch(
        f"/api/crm/{contact.id}",
        json={"status": "QUALIFIED", "source": None},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "QUALIFIED"
    assert response.json()["source"] is None

    response = await client.patch(
        f"/api/crm/{contact.id}", json={"status": None}, headers=admin_headers
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert "body.status" in fields


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_notes_in_order(client, admin_headers, admin_user, db_session):
    contact = CrmContactFactory.create()
    db_session.add(contact)
    await db_session.commit()

    for text in ("Called, no answer", "Booked a trial"):
        response = await client.post(
            f"/api/crm/{contact.id}/notes", json={"note": text}, headers=admin_headers
        )
        assert response.status_code == 200

    notes = response.json()["notes"]
    assert [n["text"] for n in notes] == ["Called, no answer", "Booked a trial"]
    assert notes[0]["author_id"] == str(admin_user.id)

    response = await client.post(
        f"/api/crm/{contact.id}/notes", json={"note": ""}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_contact(client, admin_headers, db_session):
    contact = CrmContactFactory.create()
    db_session.add(contact)
    await db_session.commit()

    response = await client.delete(f"/api/crm/{contact.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/crm/{contact.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "CRM_CONTACT_NOT_FOUND"

    response = await client.post(
        f"/api/crm/{uuid.uuid4()}/notes", json={"note": "x"}, headers=admin_headers
    )
    assert response.status_code == 404
