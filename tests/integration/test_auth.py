"""Integration tests for login, parent self-registration and /auth/me."""

import pytest
from tests.factories import DEFAULT_PASSWORD, UserFactory

from services.users_service.models import UserStatus


def _registration(email="new.parent@test.com"):
    return {
        "email": email,
        "phone": "+94775555555",
        "password": "secret123",
        "name": "New Parent",
        "location": "Kandy",
        "kids": [
            {
                "name": "Ava",
                "gender": "female",
                "birth_date": "2017-02-03",
                "session_type": "GROUP",
            }
        ],
    }


# ---------------------------------------------------------------------------
# POST /api/auth/login
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_returns_token_and_user(client, parent_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "PARENT@test.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "parent@test.com"
    assert "password_hash" not in body["user"]

    me = await client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["id"] == str(parent_user.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_wrong_password(client, parent_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "parent@test.com", "password": "not-it"},
    )

    assert response.status_code == 401
    body = response.json()
    assert body["error_code"] == "INVALID_CREDENTIALS"
    assert body["path"] == "/api/auth/login"
    assert body["status_code"] == 401
    assert "timestamp" in body


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_unknown_email_looks_like_wrong_password(client):
    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@test.com", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_rejects_unapproved_and_inactive_accounts(client, db_session):
    pending = UserFactory.parent(email="pending@test.com", is_approved=False)
    inactive = UserFactory.coach(email="gone@test.com", status=UserStatus.INACTIVE)
    db_session.add_all([pending, inactive])
    await db_session.commit()

    response = await client.post(
        "/api/auth/login",
        json={"email": "pending@test.com", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 403
    assert response.json()["error_code"] == "ACCOUNT_NOT_APPROVED"

    response = await client.post(
        "/api/auth/login",
        json={"email": "gone@test.com", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 403
    assert response.json()["error_code"] == "ACCOUNT_INACTIVE"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_validation_error_envelope(client):
    response = await client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    fields = {error["field"] for error in body["errors"]}
    assert "body.email" in fields
    assert "body.password" in fields


# ---------------------------------------------------------------------------
# POST /api/auth/register
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_creates_unapproved_parent_with_kids(client):
    response = await client.post("/api/auth/register", json=_registration())

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "PARENT"
    assert body["is_approved"] is False
    assert body["parent_profile"]["name"] == "New Parent"
    assert len(body["kids"]) == 1
    assert body["kids"][0]["is_approved"] is False

    login = await client.post(
        "/api/auth/login",
        json={"email": "new.parent@test.com", "password": "secret123"},
    )
    assert login.status_code == 403
    assert login.json()["error_code"] == "ACCOUNT_NOT_APPROVED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_duplicate_email(client, parent_user):
    response = await client.post(
        "/api/auth/register", json=_registration(email="parent@test.com")
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_requires_a_kid(client):
    payload = _registration()
    payload["kids"] = []
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_requires_token(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_garbage_token_rejected(client):
    response = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer nope"}
    )
    assert response.status_code == 401
