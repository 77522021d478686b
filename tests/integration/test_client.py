"""Integration tests for the signed-in parent and coach views under /api/me."""

import pytest
from tests.factories import (
    InvoiceFactory,
    KidFactory,
    SessionFactory,
    UserFactory,
)

from services.invoices_service.models import InvoiceType
from services.sessions_service.models import SessionType


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_me(client, parent_headers, parent_user):
    response = await client.get("/api/me", headers=parent_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(parent_user.id)
    assert body["email"] == "parent@test.com"
    assert body["parent_profile"] == {"name": "Test Parent", "location": "Colombo"}
    assert "password_hash" not in body


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_me_requires_token(client):
    response = await client.get("/api/me")
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_parent_updates_profile(client, parent_headers):
    response = await client.patch(
        "/api/me", json={"location": "Kandy"}, headers=parent_headers
    )

    assert response.status_code == 200
    assert response.json()["parent_profile"] == {
        "name": "Test Parent",
        "location": "Kandy",
    }

    response = await client.patch(
        "/api/me",
        json={"name": "Renamed Parent", "phone": "+94779999999"},
        headers=parent_headers,
    )
    body = response.json()
    assert body["parent_profile"]["name"] == "Renamed Parent"
    assert body["parent_profile"]["location"] == "Kandy"
    assert body["phone"] == "+94779999999"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_coach_name_goes_to_coach_profile(client, coach_headers):
    response = await client.patch(
        "/api/me", json={"name": "Coach Nimal"}, headers=coach_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["coach_profile"]["name"] == "Coach Nimal"
    assert body["parent_profile"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_password_change_allows_new_login(client, parent_headers):
    response = await client.patch(
        "/api/me", json={"password": "new-secret-1"}, headers=parent_headers
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/auth/login",
        json={"email": "parent@test.com", "password": "new-secret-1"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_kids_is_parent_only(
    client, parent_headers, coach_headers, parent_user, db_session
):
    other_parent = UserFactory.parent()
    db_session.add(other_parent)
    await db_session.flush()
    db_session.add_all(
        [
            KidFactory.create(parent_id=parent_user.id, name="Mine"),
            KidFactory.create(parent_id=other_parent.id, name="Theirs"),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/me/kids", headers=parent_headers)
    assert response.status_code == 200
    assert [kid["name"] for kid in response.json()] == ["Mine"]

    response = await client.get("/api/me/kids", headers=coach_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_sessions_by_role(
    client,
    parent_headers,
    coach_headers,
    admin_headers,
    parent_user,
    coach_user,
    db_session,
):
    other_coach = UserFactory.coach()
    db_session.add(other_coach)
    kid = KidFactory.create(parent_id=parent_user.id)
    stranger = KidFactory.create(parent_id=None)
    db_session.add_all([kid, stranger])
    await db_session.flush()

    individual = SessionFactory.create(coach_id=coach_user.id, kid_id=kid.id)
    group = SessionFactory.create(
        coach_id=other_coach.id, type=SessionType.GROUP, capacity=10
    )
    group.kids = [kid]
    unrelated = SessionFactory.create(coach_id=other_coach.id, kid_id=stranger.id)
    db_session.add_all([individual, group, unrelated])
    await db_session.commit()

    response = await client.get("/api/me/sessions", headers=parent_headers)
    assert response.status_code == 200
    ids = {s["id"] for s in response.json()["data"]}
    assert ids == {str(individual.id), str(group.id)}
    assert response.json()["meta"]["total"] == 2

    response = await client.get("/api/me/sessions", headers=coach_headers)
    assert [s["id"] for s in response.json()["data"]] == [str(individual.id)]

    response = await client.get("/api/me/sessions", headers=admin_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_invoices(
    client, parent_headers, coach_headers, parent_user, coach_user, db_session
):
    other_parent = UserFactory.parent()
    db_session.add(other_parent)
    await db_session.flush()
    mine = InvoiceFactory.create(parent_id=parent_user.id)
    theirs = InvoiceFactory.create(parent_id=other_parent.id)
    payout = InvoiceFactory.create(
        type=InvoiceType.COACH_PAYOUT, coach_id=coach_user.id
    )
    db_session.add_all([mine, theirs, payout])
    await db_session.commit()

    response = await client.get("/api/me/invoices", headers=parent_headers)
    assert response.status_code == 200
    assert [i["id"] for i in response.json()["data"]] == [str(mine.id)]

    response = await client.get("/api/me/invoices", headers=coach_headers)
    assert [i["id"] for i in response.json()["data"]] == [str(payout.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_invoice_pdf(client, parent_headers, parent_user, db_session):
    other_parent = UserFactory.parent()
    db_session.add(other_parent)
    await db_session.flush()
    mine = InvoiceFactory.create(parent_id=parent_user.id)
    theirs = InvoiceFactory.create(parent_id=other_parent.id)
    db_session.add_all([mine, theirs])
    await db_session.commit()

    response = await client.get(f"/api/me/invoices/{mine.id}/pdf", headers=parent_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    response = await client.get(
        f"/api/me/invoices/{theirs.id}/pdf", headers=parent_headers
    )
    assert response.status_code == 404
    assert response.json()["error_code"] == "INVOICE_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", ["phone", "name", "password"])
async def test_profile_update_rejects_null(client, parent_headers, field):
    response = await client.patch("/api/me", json={field: None}, headers=parent_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert f"body.{field}" in {error["field"] for error in body["errors"]}
