"""Integration tests for discount and promotion codes."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from tests.factories import CodeFactory

from services.audit_service.models import AuditLog
from services.codes_service.models import CodeStatus, CodeType


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_code_uppercases_and_audits(client, admin_headers, db_session):
    response = await client.post(
        "/api/codes/",
        json={
            "code": " summer25 ",
            "type": "DISCOUNT",
            "discount_percentage": 25,
            "usage_limit": 50,
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "SUMMER25"
    assert body["usage_count"] == 0
    assert body["status"] == "ACTIVE"
    assert body["is_expired"] is False

    result = await db_session.execute(
        select(AuditLog).where(AuditLog.action == "CREATE_CODE")
    )
    assert result.scalar_one().entity_id == body["id"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_discount_code_needs_an_amount(client, admin_headers):
    response = await client.post(
        "/api/codes/", json={"code": "NOTHING", "type": "DISCOUNT"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_INPUT"

    response = await client.post(
        "/api/codes/", json={"code": "FREEBIE", "type": "PROMOTION"}, headers=admin_headers
    )
    assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_code_conflicts(client, admin_headers, db_session):
    db_session.add(CodeFactory.create(code="WELCOME"))
    await db_session.commit()

    response = await client.post(
        "/api/codes/",
        json={"code": "welcome", "type": "DISCOUNT", "discount_amount": 500},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "CODE_ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_code(client, admin_headers, db_session):
    code = CodeFactory.create()
    other = CodeFactory.create(code="TAKEN")
    db_session.add_all([code, other])
    await db_session.commit()

    response = await client.patch(
        f"/api/codes/{code.id}",
        json={"status": "INACTIVE", "discount_percentage": None, "discount_amount": 250},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "INACTIVE"
    assert body["discount_percentage"] is None
    assert body["discount_amount"] == 250

    response = await client.patch(
        f"/api/codes/{code.id}", json={"discount_amount": None}, headers=admin_headers
    )
    assert response.status_code == 400

    response = await client.patch(
        f"/api/codes/{code.id}", json={"code": "taken"}, headers=admin_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", ["code", "type", "usage_limit", "status"])
async def test_update_code_rejects_null(client, admin_headers, db_session, field):
    code = CodeFactory.create()
    db_session.add(code)
    await db_session.commit()

    response = await client.patch(
        f"/api/codes/{code.id}", json={field: None}, headers=admin_headers
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert f"body.{field}" in {error["field"] for error in body["errors"]}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_filters_and_expiry(client, admin_headers, db_session):
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    db_session.add_all(
        [
            CodeFactory.create(code="OLD", expiry_date=yesterday),
            CodeFactory.create(
                code="PROMO",
                type=CodeType.PROMOTION,
                discount_percentage=None,
                status=CodeStatus.INACTIVE,
            ),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/codes/", params={"type": "DISCOUNT"}, headers=admin_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["code"] == "OLD"
    assert body["data"][0]["is_expired"] is True

    response = await client.get(
        "/api/codes/", params={"status": "INACTIVE"}, headers=admin_headers
    )
    assert [c["code"] for c in response.json()["data"]] == ["PROMO"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_code(client, admin_headers, db_session):
    code = CodeFactory.create()
    db_session.add(code)
    await db_session.commit()

    response = await client.delete(f"/api/codes/{code.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/codes/{code.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "CODE_NOT_FOUND"

    response = await client.delete(f"/api/codes/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_codes_are_admin_only(client, parent_headers):
    response = await client.get("/api/codes/", headers=parent_headers)
    assert response.status_code == 403
