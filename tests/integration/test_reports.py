"""Integration tests for report generation and export."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from tests.factories import (
    InvoiceFactory,
    KidFactory,
    LocationFactory,
    ReportFactory,
    SessionFactory,
)

from services.invoices_service.models import InvoiceStatus
from services.reports_service.models import ReportType
from services.sessions_service.models import SessionStatus, SessionType

JANUARY = {
    "start_date": "2024-01-01T00:00:00Z",
    "end_date": "2024-01-31T00:00:00Z",
}


def _at(month, day):
    return datetime(2024, month, day, 10, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def january_sessions(db_session, coach_user, parent_user):
    location = LocationFactory.create(name="Riverside")
    kids = [
        KidFactory.create(parent_id=parent_user.id, achievements=["Lap"]),
        KidFactory.create(parent_id=parent_user.id, currently_in_sports=True),
    ]
    db_session.add(location)
    db_session.add_all(kids)
    await db_session.flush()

    sessions = [
        SessionFactory.create(
            coach_id=coach_user.id,
            location_id=location.id,
            type=SessionType.GROUP,
            capacity=10,
            kids=kids,
            status=SessionStatus.COMPLETED,
            date_time=_at(1, 10),
        ),
        SessionFactory.create(
            coach_id=coach_user.id,
            location_id=location.id,
            kid_id=kids[0].id,
            status=SessionStatus.CANCELLED,
            date_time=_at(1, 31),
            is_free_session=True,
        ),
        SessionFactory.create(
            coach_id=coach_user.id,
            location_id=location.id,
            kid_id=kids[1].id,
            date_time=_at(2, 20),
        ),
    ]
    db_session.add_all(sessions)
    await db_session.commit()
    return sessions


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_attendance_report(
    client, admin_headers, admin_user, january_sessions
):
    response = await client.post(
        "/api/reports/generate",
        json={"type": "ATTENDANCE", **JANUARY},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "GENERATED"
    assert body["title"] == "Attendance Report"
    assert body["generated_by"] == str(admin_user.id)
    assert body["generator"]["email"] == "admin@test.com"
    assert body["generated_at"] is not None

    data = body["data"]
    assert data["total_sessions"] == 2
    assert data["total_kids_booked"] == 3
    assert data["completed_sessions"] == 1
    assert data["cancelled_sessions"] == 1
    assert data["completion_rate"] == 50.0
    assert "total_sessions: 2" in body["summary"]
    assert "  COMPLETED: 1" in body["summary"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_session_summary_with_filters(
    client, admin_headers, january_sessions
):
    response = await client.post(
        "/api/reports/generate",
        json={
            "type": "SESSION_SUMMARY",
            "title": "January sessions",
            "filters": {"location_id": str(january_sessions[0].location_id)},
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert response.json()["title"] == "January sessions"
    assert data["total_sessions"] == 3
    assert data["by_type"] == {"INDIVIDUAL": 2, "GROUP": 1}
    assert data["by_location"] == {"Riverside": 3}
    assert data["free_sessions"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_financial_report(client, admin_headers, parent_user, db_session):
    db_session.add_all(
        [
            InvoiceFactory.create(
                parent_id=parent_user.id,
                total_amount=100.0,
                status=InvoiceStatus.PAID,
                due_date=_at(1, 5),
            ),
            InvoiceFactory.create(
                parent_id=parent_user.id, total_amount=40.0, due_date=_at(1, 20)
            ),
            InvoiceFactory.create(
                parent_id=parent_user.id, total_amount=999.0, due_date=_at(3, 1)
            ),
        ]
    )
    await db_session.commit()

    response = await client.post(
        "/api/reports/generate",
        json={"type": "FINANCIAL", **JANUARY},
        headers=admin_headers,
    )

    data = response.json()["data"]
    assert data["total_invoices"] == 2
    assert data["total_amount"] == 140.0
    assert data["paid_amount"] == 100.0
    assert data["pending_amount"] == 40.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_performance_report(client, admin_headers, january_sessions):
    response = await client.post(
        "/api/reports/generate", json={"type": "PERFORMANCE"}, headers=admin_headers
    )

    data = response.json()["data"]
    assert data["total_kids"] == 2
    assert data["kids_in_sports"] == 1
    assert data["achievements_recorded"] == 1
    assert data["sessions_attended"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_custom_report(client, admin_headers, parent_user, coach_user):
    response = await client.post(
        "/api/reports/generate",
        json={
            "type": "CUSTOM",
            "filters": {"include_users": True, "user_role": "PARENT"},
        },
        headers=admin_headers,
    )

    data = response.json()["data"]
    assert list(data) == ["users"]
    assert data["users"]["total_users"] == 1
    assert data["users"]["by_role"]["PARENT"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_rejects_bad_input(client, admin_headers):
    response = await client.post(
        "/api/reports/generate",
        json={
            "type": "ATTENDANCE",
            "start_date": "2024-02-01T00:00:00Z",
            "end_date": "2024-01-01T00:00:00Z",
        },
        headers=admin_headers,
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/reports/generate",
        json={"type": "ATTENDANCE", "filters": {"coach_id": "nope"}},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_export_generated_report_csv(client, admin_headers, january_sessions):
    generated = await client.post(
        "/api/reports/generate",
        json={"type": "ATTENDANCE", **JANUARY},
        headers=admin_headers,
    )
    report_id = generated.json()["id"]

    response = await client.get(
        f"/api/reports/{report_id}/export/csv", headers=admin_headers
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0] == "Key,Value"
    assert "total_sessions,2" in lines
    assert "by_status.COMPLETED,1" in lines


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pending_report_cannot_be_exported(client, admin_headers):
    response = await client.post(
        "/api/reports/",
        json={"type": "FINANCIAL", "title": "Q1 finance", **JANUARY},
        headers=admin_headers,
    )
    assert response.status_code == 201
    report = response.json()
    assert report["status"] == "PENDING"
    assert report["data"] is None
    assert report["summary"] == []

    response = await client.get(
        f"/api/reports/{report['id']}/export/csv", headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_and_delete_reports(client, admin_headers, db_session):
    financial = ReportFactory.create(type=ReportType.FINANCIAL, title="Finance")
    attendance = ReportFactory.create()
    db_session.add_all([financial, attendance])
    await db_session.commit()

    response = await client.get(
        "/api/reports/", params={"type": "FINANCIAL"}, headers=admin_headers
    )
    assert [r["id"] for r in response.json()["data"]] == [str(financial.id)]

    response = await client.delete(f"/api/reports/{attendance.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/reports/{attendance.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "REPORT_NOT_FOUND"
