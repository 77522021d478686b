"""Session scheduling: group/individual composition, capacity and change notices."""

import uuid
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.auth.models import UserRole
from libs.common.datetime_utils import ensure_utc, range_end, range_start
from libs.common.errors import BadRequestError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.communications_service.notifications import NotificationService
from services.kids_service.models import Kid
from services.locations_service.models import Location
from services.sessions_service.models import (
    DEFAULT_CAPACITY,
    Session,
    SessionStatus,
    SessionType,
)
from services.sessions_service.schemas import SessionCreate, SessionUpdate
from services.users_service.models import User

logger = get_logger(__name__)

ENTITY_TYPE = "Session"


def session_load_options():
    """Return selectinload options for everything a session response shows."""
    return [
        selectinload(Session.coach),
        selectinload(Session.location),
        selectinload(Session.kid).selectinload(Kid.parent),
        selectinload(Session.kids).selectinload(Kid.parent),
    ]


def validate_composition(
    session_type: SessionType,
    kid_count: int,
    kid_id: Optional[uuid.UUID],
    capacity: int,
) -> None:
    """
    Group sessions need at least one kid and no more kids than capacity.
    Individual sessions need a kid_id.
    """
    if session_type == SessionType.GROUP:
        if kid_count == 0:
            raise BadRequestError("Group sessions require at least one kid")
        if kid_count > capacity:
            raise BadRequestError(
                "Number of kids exceeds session capacity",
                ErrorCode.INVALID_SESSION_CAPACITY,
            )
    elif not kid_id:
        raise BadRequestError("Individual sessions require a kid ID")


def describe_changes(session: Session, update_data: dict) -> List[str]:
    """Human-readable list of the notifiable changes an update makes."""
    changes = []
    if "date_time" in update_data and update_data["date_time"] is not None:
        new_time = ensure_utc(update_data["date_time"])
        if new_time != ensure_utc(session.date_time):
            changes.append(f"date/time changed to {new_time:%Y-%m-%d %H:%M} UTC")
    if (
        update_data.get("location_id") is not None
        and update_data["location_id"] != session.location_id
    ):
        changes.append("location changed")
    if update_data.get("status") is not None and update_data["status"] != session.status:
        changes.append(f"status changed to {update_data['status'].value}")
    return changes


async def get_session_or_404(db: AsyncSession, session_id: uuid.UUID) -> Session:
    result = await db.execute(
        select(Session)
        .options(*session_load_options())
        .where(Session.id == session_id)
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise NotFoundError("Session not found", ErrorCode.SESSION_NOT_FOUND)
    return session


async def list_sessions(
    db: AsyncSession,
    params: PaginationParams,
    coach_id: Optional[uuid.UUID] = None,
    location_id: Optional[uuid.UUID] = None,
    status: Optional[SessionStatus] = None,
    start_date: Optional[Union[date, datetime]] = None,
    end_date: Optional[Union[date, datetime]] = None,
    kid_ids: Optional[Sequence[uuid.UUID]] = None,
) -> Tuple[List[Session], PageMeta]:
    query = select(Session).options(*session_load_options())
    if coach_id:
        query = query.where(Session.coach_id == coach_id)
    if location_id:
        query = query.where(Session.location_id == location_id)
    if status:
        query = query.where(Session.status == status)
    if start_date:
        query = query.where(Session.date_time >= range_start(start_date))
    if end_date:
        query = query.where(Session.date_time <= range_end(end_date))
    if kid_ids is not None:
        query = query.where(
            Session.kid_id.in_(kid_ids) | Session.kids.any(Kid.id.in_(kid_ids))
        )

    query = query.order_by(Session.date_time.asc())
    return await paginate(db, query, params)


async def _get_coach(db: AsyncSession, coach_id: uuid.UUID) -> User:
    coach = await db.get(User, coach_id)
    if not coach:
        raise NotFoundError("Coach not found", ErrorCode.USER_NOT_FOUND)
    if coach.role != UserRole.COACH:
        raise BadRequestError("Sessions must be assigned to a coach")
    return coach


async def _get_location(db: AsyncSession, location_id: uuid.UUID) -> Location:
    location = await db.get(Location, location_id)
    if not location:
        raise NotFoundError("Location not found", ErrorCode.LOCATION_NOT_FOUND)
    return location


async def _get_kids(db: AsyncSession, kid_ids: Sequence[uuid.UUID]) -> List[Kid]:
    unique_ids = list(dict.fromkeys(kid_ids))
    if not unique_ids:
        return []
    result = await db.execute(select(Kid).where(Kid.id.in_(unique_ids)))
    kids = {kid.id: kid for kid in result.scalars().all()}
    missing = [kid_id for kid_id in unique_ids if kid_id not in kids]
    if missing:
        raise NotFoundError(f"Kid not found: {missing[0]}", ErrorCode.KID_NOT_FOUND)
    return [kids[kid_id] for kid_id in unique_ids]


async def _get_kid(db: AsyncSession, kid_id: uuid.UUID) -> Kid:
    kid = await db.get(Kid, kid_id)
    if not kid:
        raise NotFoundError("Kid not found", ErrorCode.KID_NOT_FOUND)
    return kid


async def create_session(
    db: AsyncSession, payload: SessionCreate, actor_id: uuid.UUID
) -> Session:
    capacity = payload.capacity or DEFAULT_CAPACITY[payload.type]
    validate_composition(payload.type, len(set(payload.kids)), payload.kid_id, capacity)

    await _get_coach(db, payload.coach_id)
    await _get_location(db, payload.location_id)

    session = Session(
        id=uuid.uuid4(),
        type=payload.type,
        coach_id=payload.coach_id,
        location_id=payload.location_id,
        date_time=payload.date_time,
        duration=payload.duration,
        capacity=capacity,
        status=payload.status,
        is_free_session=payload.is_free_session,
    )
    if payload.type == SessionType.GROUP:
        session.kids = await _get_kids(db, payload.kids)
    else:
        session.kid_id = (await _get_kid(db, payload.kid_id)).id
        session.kids = []

    db.add(session)
    record_audit(
        db,
        actor_id,
        "CREATE_SESSION",
        ENTITY_TYPE,
        session.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Created {session.type.value} session {session.id}")
    return await get_session_or_404(db, session.id)


async def update_session(
    db: AsyncSession,
    session_id: uuid.UUID,
    payload: SessionUpdate,
    actor_id: uuid.UUID,
    notifier: Optional[NotificationService] = None,
) -> Session:
    session = await get_session_or_404(db, session_id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("coach_id"):
        await _get_coach(db, update_data["coach_id"])
    if update_data.get("location_id"):
        await _get_location(db, update_data["location_id"])

    new_kids = None
    if update_data.get("kids") is not None:
        new_kids = await _get_kids(db, update_data.pop("kids"))
    if update_data.get("kid_id"):
        await _get_kid(db, update_data["kid_id"])

    new_type = update_data.get("type")
    if new_type and new_type != session.type:
        # A type switch resets what the old type implied, as create would
        update_data.setdefault("capacity", DEFAULT_CAPACITY[new_type])
        if new_type == SessionType.INDIVIDUAL:
            new_kids = []
        else:
            update_data.setdefault("kid_id", None)

    session_type = update_data.get("type") or session.type
    capacity = update_data.get("capacity") or session.capacity
    kid_count = len(new_kids) if new_kids is not None else len(session.kids)
    kid_id = update_data["kid_id"] if "kid_id" in update_data else session.kid_id
    validate_composition(session_type, kid_count, kid_id, capacity)

    changes = describe_changes(session, update_data)

    for field, value in update_data.items():
        # Only kid_id may be cleared through a partial update
        if value is None and field != "kid_id":
            continue
        setattr(session, field, value)
    if new_kids is not None:
        session.kids = new_kids

    record_audit(
        db,
        actor_id,
        "UPDATE_SESSION",
        ENTITY_TYPE,
        session.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    logger.info(f"Updated session {session.id}")

    session = await get_session_or_404(db, session.id)
    if changes and notifier:
        await notify_session_change(notifier, session, "; ".join(changes))
    return session


async def notify_session_change(
    notifier: NotificationService, session: Session, changes: str
) -> None:
    """Tell the parent of every booked kid about a change, once per parent."""
    notified = set()
    for kid in session.booked_kids:
        parent = kid.parent
        if not parent or parent.id in notified:
            continue
        notified.add(parent.id)
        await notifier.send_session_change(
            parent.email, parent.phone, str(session.id), changes
        )


async def delete_session(
    db: AsyncSession, session_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    session = await get_session_or_404(db, session_id)
    await db.delete(session)
    record_audit(db, actor_id, "DELETE_SESSION", ENTITY_TYPE, session_id)
    await db.commit()
    logger.info(f"Deleted session {session_id}")


async def count_sessions_between(
    db: AsyncSession, start: datetime, end: datetime
) -> int:
    result = await db.execute(
        select(func.count(Session.id)).where(
            Session.date_time >= start, Session.date_time < end
        )
    )
    return result.scalar_one() or 0


async def get_weekly_summary(
    db: AsyncSession, start: datetime, end: datetime
) -> Dict[str, object]:
    """
    Count sessions in [start, end) by type and by status.
    Every enum member is present in the breakdowns, zero when unused.
    """
    result = await db.execute(
        select(Session.type, Session.status, func.count(Session.id))
        .where(Session.date_time >= start, Session.date_time < end)
        .group_by(Session.type, Session.status)
    )

    by_type = {t.value: 0 for t in SessionType}
    by_status = {s.value: 0 for s in SessionStatus}
    total = 0
    for session_type, session_status, count in result.all():
        by_type[session_type.value] += count
        by_status[session_status.value] += count
        total += count

    return {"total": total, "by_type": by_type, "by_status": by_status}
