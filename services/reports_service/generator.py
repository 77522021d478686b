"""Report aggregations.

Each report type reads the rows in its date range, then folds them into a
plain dict that is stored on the report as its ``data`` snapshot. The
``summarize_*`` helpers are pure so they can be checked without a database.
"""

import uuid
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.auth.models import UserRole
from libs.common.datetime_utils import range_end, range_start
from libs.common.errors import BadRequestError
from services.invoices_service.models import Invoice, InvoiceStatus, InvoiceType
from services.kids_service.models import Kid
from services.reports_service.models import ReportType
from services.sessions_service.models import Session, SessionStatus, SessionType
from services.users_service.models import User, UserStatus

DateBound = Optional[Union[date, datetime]]

NOT_AVAILABLE = "N/A"
INDENT = "  "


def default_title(report_type: ReportType) -> str:
    """``SESSION_SUMMARY`` becomes ``Session Summary Report``."""
    words = report_type.value.replace("_", " ").title()
    return f"{words} Report"


def percentage(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)


def zero_counts(keys: Iterable) -> Dict[str, int]:
    return {getattr(key, "value", key): 0 for key in keys}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _as_uuid(filters: dict, key: str) -> Optional[uuid.UUID]:
    value = filters.get(key)
    if value in (None, ""):
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise BadRequestError(f"Filter '{key}' must be a valid id")


def _as_enum(filters: dict, key: str, enum_cls):
    value = filters.get(key)
    if value in (None, ""):
        return None
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise BadRequestError(f"Filter '{key}' must be one of: {allowed}")


# ---------------------------------------------------------------------------
# Pure summaries
# ---------------------------------------------------------------------------


def summarize_attendance(sessions: Sequence[Session]) -> Dict[str, Any]:
    by_status = zero_counts(SessionStatus)
    kids_booked = 0
    for session in sessions:
        by_status[session.status.value] += 1
        kids_booked += len(session.booked_kids)

    total = len(sessions)
    completed = by_status[SessionStatus.COMPLETED.value]
    return {
        "total_sessions": total,
        "by_status": by_status,
        "total_kids_booked": kids_booked,
        "completed_sessions": completed,
        "cancelled_sessions": by_status[SessionStatus.CANCELLED.value],
        "completion_rate": percentage(completed, total),
    }


def summarize_sessions(sessions: Sequence[Session]) -> Dict[str, Any]:
    by_type = zero_counts(SessionType)
    by_status = zero_counts(SessionStatus)
    by_location: Dict[str, int] = {}
    free_sessions = 0
    for session in sessions:
        by_type[session.type.value] += 1
        by_status[session.status.value] += 1
        name = session.location.name if session.location else NOT_AVAILABLE
        by_location[name] = by_location.get(name, 0) + 1
        if session.is_free_session:
            free_sessions += 1

    return {
        "total_sessions": len(sessions),
        "by_type": by_type,
        "by_status": by_status,
        "by_location": by_location,
        "free_sessions": free_sessions,
    }


def summarize_invoices(invoices: Sequence[Invoice]) -> Dict[str, Any]:
    by_status = zero_counts(InvoiceStatus)
    amounts = {status: 0.0 for status in InvoiceStatus}
    for invoice in invoices:
        by_status[invoice.status.value] += 1
        amounts[invoice.status] += invoice.total_amount or 0.0

    return {
        "total_invoices": len(invoices),
        "total_amount": round(sum(amounts.values()), 2),
        "paid_amount": round(amounts[InvoiceStatus.PAID], 2),
        "pending_amount": round(amounts[InvoiceStatus.PENDING], 2),
        "overdue_amount": round(amounts[InvoiceStatus.OVERDUE], 2),
        "by_status": by_status,
    }


def summarize_kids(
    kids: Sequence[Kid], completed_sessions: Sequence[Session] = ()
) -> Dict[str, Any]:
    by_session_type = zero_counts(SessionType)
    in_sports = achievements = milestones = 0
    for kid in kids:
        by_session_type[kid.session_type.value] += 1
        if kid.currently_in_sports:
            in_sports += 1
        achievements += len(kid.achievements or [])
        milestones += len(kid.milestones or [])

    kid_ids = {kid.id for kid in kids}
    attended = sum(
        1
        for session in completed_sessions
        for kid in session.booked_kids
        if kid.id in kid_ids
    )

    return {
        "total_kids": len(kids),
        "by_session_type": by_session_type,
        "kids_in_sports": in_sports,
        "achievements_recorded": achievements,
        "milestones_recorded": milestones,
        "sessions_attended": attended,
    }


def summarize_users(users: Sequence[User]) -> Dict[str, Any]:
    by_role = zero_counts(UserRole)
    by_status = zero_counts(UserStatus)
    for user in users:
        by_role[user.role.value] += 1
        by_status[user.status.value] += 1
    return {"total_users": len(users), "by_role": by_role, "by_status": by_status}


# ---------------------------------------------------------------------------
# Tree rendering and flattening
# ---------------------------------------------------------------------------


def _display(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _children(value: Any) -> Optional[List[Tuple[str, Any]]]:
    if isinstance(value, dict):
        return [(str(key), item) for key, item in value.items()]
    if isinstance(value, (list, tuple)):
        return [(str(index), item) for index, item in enumerate(value)]
    return None


def render_report_tree(data: Any, depth: int = 0) -> List[str]:
    """
    Render nested report data as indented ``key: value`` lines.

    Containers get a ``key:`` header line with their children indented one
    level below. Empty containers render as ``key: (none)``.
    """
    lines: List[str] = []
    for key, value in _children(data) or []:
        prefix = INDENT * depth
        nested = _children(value)
        if nested is None:
            lines.append(f"{prefix}{key}: {_display(value)}")
        elif not nested:
            lines.append(f"{prefix}{key}: (none)")
        else:
            lines.append(f"{prefix}{key}:")
            lines.extend(render_report_tree(value, depth + 1))
    return lines


def flatten_report(data: Any, prefix: str = "") -> List[Tuple[str, str]]:
    """Flatten nested data into ``(dotted.key, value)`` pairs for CSV export."""
    rows: List[Tuple[str, str]] = []
    for key, value in _children(data) or []:
        path = f"{prefix}.{key}" if prefix else key
        nested = _children(value)
        if nested:
            rows.extend(flatten_report(value, path))
        elif nested is not None:
            rows.append((path, ""))
        else:
            rows.append((path, _display(value)))
    return rows


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def inclusive_end(end: DateBound) -> Optional[datetime]:
    """A midnight end bound is read as a bare date and covers that whole day."""
    if isinstance(end, datetime) and end.time() == time.min:
        return range_end(end.date())
    return range_end(end)


def _bounded(query, column, start: DateBound, end: DateBound):
    if start:
        query = query.where(column >= range_start(start))
    if end:
        query = query.where(column <= inclusive_end(end))
    return query


async def _load_sessions(
    db: AsyncSession,
    start: DateBound,
    end: DateBound,
    filters: dict,
    status: Optional[SessionStatus] = None,
) -> List[Session]:
    query = select(Session).options(
        selectinload(Session.location),
        selectinload(Session.kid),
        selectinload(Session.kids),
    )
    query = _bounded(query, Session.date_time, start, end)
    location_id = _as_uuid(filters, "location_id")
    if location_id:
        query = query.where(Session.location_id == location_id)
    coach_id = _as_uuid(filters, "coach_id")
    if coach_id:
        query = query.where(Session.coach_id == coach_id)
    if status:
        query = query.where(Session.status == status)
    result = await db.execute(query.order_by(Session.date_time.asc()))
    return list(result.scalars().all())


async def _load_invoices(
    db: AsyncSession, start: DateBound, end: DateBound, filters: dict
) -> List[Invoice]:
    query = _bounded(select(Invoice), Invoice.due_date, start, end)
    parent_id = _as_uuid(filters, "parent_id")
    if parent_id:
        query = query.where(Invoice.parent_id == parent_id)
    coach_id = _as_uuid(filters, "coach_id")
    if coach_id:
        query = query.where(Invoice.coach_id == coach_id)
    invoice_type = _as_enum(filters, "type", InvoiceType)
    if invoice_type:
        query = query.where(Invoice.type == invoice_type)
    result = await db.execute(query)
    return list(result.scalars().all())


async def _load_kids(
    db: AsyncSession,
    start: DateBound,
    end: DateBound,
    session_type: Optional[SessionType] = None,
) -> List[Kid]:
    query = _bounded(select(Kid), Kid.created_at, start, end)
    if session_type:
        query = query.where(Kid.session_type == session_type)
    result = await db.execute(query)
    return list(result.scalars().all())


async def _load_users(
    db: AsyncSession, start: DateBound, end: DateBound, role: Optional[UserRole] = None
) -> List[User]:
    query = _bounded(select(User), User.created_at, start, end)
    if role:
        query = query.where(User.role == role)
    result = await db.execute(query)
    return list(result.scalars().all())


async def build_report_data(
    db: AsyncSession,
    report_type: ReportType,
    start: DateBound = None,
    end: DateBound = None,
    filters: Optional[dict] = None,
) -> Dict[str, Any]:
    """Aggregate the snapshot for one report type."""
    filters = filters or {}

    if report_type == ReportType.ATTENDANCE:
        return summarize_attendance(await _load_sessions(db, start, end, filters))

    if report_type == ReportType.SESSION_SUMMARY:
        return summarize_sessions(await _load_sessions(db, start, end, filters))

    if report_type == ReportType.FINANCIAL:
        return summarize_invoices(await _load_invoices(db, start, end, filters))

    if report_type == ReportType.PERFORMANCE:
        kids = await _load_kids(
            db, start, end, _as_enum(filters, "session_type", SessionType)
        )
        completed = await _load_sessions(
            db, start, end, {}, status=SessionStatus.COMPLETED
        )
        return summarize_kids(kids, completed)

    data: Dict[str, Any] = {}
    if _as_bool(filters.get("include_sessions")):
        data["sessions"] = summarize_sessions(
            await _load_sessions(db, start, end, filters)
        )
    if _as_bool(filters.get("include_invoices")):
        data["invoices"] = summarize_invoices(
            await _load_invoices(db, start, end, filters)
        )
    if _as_bool(filters.get("include_users")):
        data["users"] = summarize_users(
            await _load_users(db, start, end, _as_enum(filters, "user_role", UserRole))
        )
    if _as_bool(filters.get("include_kids")):
        data["kids"] = summarize_kids(
            await _load_kids(
                db, start, end, _as_enum(filters, "kid_session_type", SessionType)
            )
        )
    return data
