"""Integration tests for free-session, reschedule and extra-session requests."""

import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from tests.factories import (
    ExtraSessionRequestFactory,
    FreeSessionRequestFactory,
    KidFactory,
    LocationFactory,
    RescheduleRequestFactory,
    SessionFactory,
    UserFactory,
)

from services.requests_service.models import RequestStatus

NEW_TIME = datetime(2030, 7, 4, 15, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def location(db_session):
    location = LocationFactory.create()
    db_session.add(location)
    await db_session.commit()
    return location


@pytest_asyncio.fixture
async def booked_session(db_session, coach_user, parent_user, location):
    kid = KidFactory.create(parent_id=parent_user.id)
    db_session.add(kid)
    await db_session.flush()
    session = SessionFactory.create(
        coach_id=coach_user.id, location_id=location.id, kid_id=kid.id
    )
    db_session.add(session)
    await db_session.commit()
    return session


# ---------------------------------------------------------------------------
# Free sessions
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_free_session_request(client, location, admin_headers):
    response = await client.post(
        "/api/requests/free-sessions",
        json={
            "parent_name": "Curious Parent",
            "phone": "+94770002222",
            "email": "Curious@Test.com",
            "kid_name": "Rae",
            "session_type": "GROUP",
            "location_id": str(location.id),
            "preferred_date_time": "2030-03-01T08:00:00Z",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["email"] == "curious@test.com"
    assert body["location"]["name"] == "Test Park"

    count = await client.get("/api/requests/free-sessions/count", headers=admin_headers)
    assert count.json() == {"count": 1}

    audit = await client.get(
        "/api/audit/",
        params={"entity_type": "FreeSessionRequest"},
        headers=admin_headers,
    )
    entry = audit.json()["data"][0]
    assert entry["action"] == "CREATE_FREE_SESSION_REQUEST"
    assert entry["actor_id"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_free_session_request_unknown_location(client):
    response = await client.post(
        "/api/requests/free-sessions",
        json={
            "parent_name": "P",
            "phone": "1",
            "email": "p@test.com",
            "kid_name": "K",
            "session_type": "INDIVIDUAL",
            "location_id": str(uuid.uuid4()),
        },
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_select_free_session_sends_confirmation(
    client, admin_headers, booked_session, notifier, db_session
):
    request = FreeSessionRequestFactory.create(email="trial@test.com")
    db_session.add(request)
    await db_session.commit()

    response = await client.post(
        f"/api/requests/free-sessions/{request.id}/select",
        json={"session_id": str(booked_session.id)},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "SELECTED"
    assert body["selected_session"]["id"] == str(booked_session.id)
    assert notifier.sent == [
        {
            "kind": "free_session",
            "email": "trial@test.com",
            "phone": "+94771111111",
            "parent_name": "Prospective Parent",
            "kid_name": "Trial Kid",
            "session_id": str(booked_session.id),
        }
    ]

    again = await client.post(
        f"/api/requests/free-sessions/{request.id}/select", headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["error_code"] == "INVALID_STATUS_TRANSITION"

    done = await client.post(
        f"/api/requests/free-sessions/{request.id}/complete", headers=admin_headers
    )
    assert done.status_code == 200
    assert done.json()["status"] == "COMPLETED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_not_selected_request_cannot_complete(client, admin_headers, db_session):
    request = FreeSessionRequestFactory.create()
    db_session.add(request)
    await db_session.commit()

    response = await client.post(
        f"/api/requests/free-sessions/{request.id}/not-select", headers=admin_headers
    )
    assert response.json()["status"] == "NOT_SELECTED"

    response = await client.post(
        f"/api/requests/free-sessions/{request.id}/complete", headers=admin_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_free_session_requests_by_status(client, admin_headers, db_session):
    db_session.add_all(
        [
            FreeSessionRequestFactory.create(),
            FreeSessionRequestFactory.create(status=RequestStatus.SELECTED),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/requests/free-sessions",
        params={"status": "SELECTED"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert [r["status"] for r in response.json()["data"]] == ["SELECTED"]

    response = await client.get("/api/requests/free-sessions")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Reschedules
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_parent_requests_reschedule(client, parent_headers, parent_user, booked_session):
    response = await client.post(
        "/api/requests/reschedules",
        json={
            "session_id": str(booked_session.id),
            "new_date_time": "2030-06-01T16:00:00Z",
            "reason": "School event",
        },
        headers=parent_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["requester"]["id"] == str(parent_user.id)
    assert body["session"]["id"] == str(booked_session.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_cannot_request_reschedule(client, admin_headers, booked_session):
    response = await client.post(
        "/api/requests/reschedules",
        json={
            "session_id": str(booked_session.id),
            "new_date_time": "2030-06-01T16:00:00Z",
            "reason": "x",
        },
        headers=admin_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_approve_reschedule_moves_session(
    client, admin_headers, parent_user, booked_session, notifier, db_session
):
    request = RescheduleRequestFactory.create(
        session_id=booked_session.id,
        requested_by=parent_user.id,
        new_date_time=NEW_TIME,
    )
    db_session.add(request)
    await db_session.commit()

    response = await client.post(
        f"/api/requests/reschedules/{request.id}/approve", headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "APPROVED"
    assert body["processed_at"] is not None

    session = await client.get(f"/api/sessions/{booked_session.id}", headers=admin_headers)
    assert session.json()["date_time"].startswith("2030-07-04T15:00:00")
    assert [n["kind"] for n in notifier.sent] == ["session_change"]
    assert notifier.sent[0]["email"] == "parent@test.com"

    again = await client.post(
        f"/api/requests/reschedules/{request.id}/deny", headers=admin_headers
    )
    assert again.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_deny_reschedule_leaves_session(
    client, admin_headers, parent_user, booked_session, db_session
):
    original = booked_session.date_time
    request = RescheduleRequestFactory.create(
        session_id=booked_session.id, requested_by=parent_user.id
    )
    db_session.add(request)
    await db_session.commit()

    response = await client.post(
        f"/api/requests/reschedules/{request.id}/deny", headers=admin_headers
    )
    assert response.json()["status"] == "DENIED"

    session = await client.get(f"/api/sessions/{booked_session.id}", headers=admin_headers)
    assert session.json()["date_time"].startswith(original.strftime("%Y-%m-%dT%H:%M:%S"))

    count = await client.get("/api/requests/reschedules/count", headers=admin_headers)
    assert count.json() == {"count": 0}


# ---------------------------------------------------------------------------
# Extra sessions
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_extra_session_request_flow(
    client, parent_headers, admin_headers, parent_user, coach_user, location, db_session
):
    kid = KidFactory.create(parent_id=parent_user.id, name="Own Kid")
    db_session.add(kid)
    await db_session.commit()

    response = await client.post(
        "/api/requests/extra-sessions",
        json={
            "kid_id": str(kid.id),
            "coach_id": str(coach_user.id),
            "session_type": "INDIVIDUAL",
            "location_id": str(location.id),
            "preferred_date_time": "2030-05-05T09:00:00Z",
        },
        headers=parent_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["parent"]["id"] == str(parent_user.id)
    assert body["kid"]["name"] == "Own Kid"
    assert body["coach"]["id"] == str(coach_user.id)

    count = await client.get("/api/requests/extra-sessions/count", headers=admin_headers)
    assert count.json() == {"count": 1}

    response = await client.post(
        f"/api/requests/extra-sessions/{body['id']}/approve", headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "APPROVED"
    assert response.json()["processed_at"] is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_extra_session_for_someone_elses_kid(
    client, parent_headers, coach_user, location, db_session
):
    other_parent = UserFactory.parent()
    db_session.add(other_parent)
    await db_session.flush()
    kid = KidFactory.create(parent_id=other_parent.id)
    db_session.add(kid)
    await db_session.commit()

    response = await client.post(
        "/api/requests/extra-sessions",
        json={
            "kid_id": str(kid.id),
            "coach_id": str(coach_user.id),
            "session_type": "GROUP",
            "location_id": str(location.id),
            "preferred_date_time": "2030-05-05T09:00:00Z",
        },
        headers=parent_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_deny_extra_session_once(
    client, admin_headers, parent_user, coach_user, location, db_session
):
    kid = KidFactory.create(parent_id=parent_user.id)
    db_session.add(kid)
    await db_session.flush()
    request = ExtraSessionRequestFactory.create(
        parent_id=parent_user.id,
        kid_id=kid.id,
        coach_id=coach_user.id,
        location_id=location.id,
    )
    db_session.add(request)
    await db_session.commit()

    response = await client.post(
        f"/api/requests/extra-sessions/{request.id}/deny", headers=admin_headers
    )
    assert response.json()["status"] == "DENIED"

    response = await client.post(
        f"/api/requests/extra-sessions/{request.id}/approve", headers=admin_headers
    )
    assert response.status_code == 409

    response = await client.post(
        f"/api/requests/extra-sessions/{uuid.uuid4()}/approve", headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["error_code"] == "REQUEST_NOT_FOUND"
