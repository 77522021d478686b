"""Integration tests for kid profiles and parent links."""

import uuid

import pytest
from tests.factories import KidFactory

from services.sessions_service.models import SessionType


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_kids_filters(client, admin_headers, parent_user, db_session):
    db_session.add_all(
        [
            KidFactory.create(parent_id=parent_user.id, name="Group Kid"),
            KidFactory.create(
                parent_id=parent_user.id,
                name="Solo Kid",
                session_type=SessionType.INDIVIDUAL,
            ),
            KidFactory.create(name="Orphan Kid"),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/kids/", params={"parent_id": str(parent_user.id)}, headers=admin_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["total"] == 2
    assert all(kid["parent"]["id"] == str(parent_user.id) for kid in body["data"])

    response = await client.get(
        "/api/kids/", params={"session_type": "INDIVIDUAL"}, headers=admin_headers
    )
    assert [kid["name"] for kid in response.json()["data"]] == ["Solo Kid"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_kid_progress(client, admin_headers, db_session):
    kid = KidFactory.create()
    db_session.add(kid)
    await db_session.commit()

    response = await client.patch(
        f"/api/kids/{kid.id}",
        json={"achievements": ["First lap"], "milestones": ["Can swim 10m"]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["achievements"] == ["First lap"]
    assert body["milestones"] == ["Can swim 10m"]
    assert body["name"] == "Test Kid"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_link_and_unlink_parent(client, admin_headers, parent_user, db_session):
    kid = KidFactory.create()
    db_session.add(kid)
    await db_session.commit()

    response = await client.post(
        f"/api/kids/{kid.id}/link-parent",
        json={"parent_id": str(parent_user.id)},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["parent"]["email"] == "parent@test.com"

    response = await client.delete(
        f"/api/kids/{kid.id}/unlink-parent", headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["parent_id"] is None
    assert response.json()["parent"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_link_parent_rejects_non_parent(client, admin_headers, coach_user, db_session):
    kid = KidFactory.create()
    db_session.add(kid)
    await db_session.commit()

    response = await client.post(
        f"/api/kids/{kid.id}/link-parent",
        json={"parent_id": str(coach_user.id)},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_kid(client, admin_headers):
    response = await client.get(f"/api/kids/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "KID_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "field",
    [
        "name",
        "gender",
        "birth_date",
        "currently_in_sports",
        "medical_conditions",
        "session_type",
        "achievements",
        "milestones",
    ],
)
async def test_update_kid_rejects_null(client, admin_headers, db_session, field):
    kid = KidFactory.create(achievements=["First lap"])
    db_session.add(kid)
    await db_session.commit()

    response = await client.patch(
        f"/api/kids/{kid.id}", json={field: None}, headers=admin_headers
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert f"body.{field}" in {error["field"] for error in body["errors"]}

    response = await client.get(f"/api/kids/{kid.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["achievements"] == ["First lap"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_kid_may_clear_goal(client, admin_headers, db_session):
    kid = KidFactory.create(goal="Swim 50m")
    db_session.add(kid)
    await db_session.commit()

    response = await client.patch(
        f"/api/kids/{kid.id}", json={"goal": None}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["goal"] is None
