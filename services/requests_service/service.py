"""Free-session, reschedule and extra-session requests."""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.auth.models import AuthUser, UserRole
from libs.common.datetime_utils import utc_now
from libs.common.errors import BadRequestError, ErrorCode, ForbiddenError, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.communications_service.notifications import NotificationService
from services.kids_service.models import Kid
from services.locations_service.models import Location
from services.requests_service.models import (
    ExtraSessionRequest,
    FreeSessionRequest,
    RequestStatus,
    RescheduleRequest,
)
from services.requests_service.schemas import (
    ExtraSessionRequestCreate,
    FreeSessionRequestCreate,
    FreeSessionSelect,
    RescheduleRequestCreate,
)
from services.requests_service.transitions import ensure_transition
from services.sessions_service.service import (
    describe_changes,
    get_session_or_404,
    notify_session_change,
)
from services.users_service.models import User

logger = get_logger(__name__)

FREE_SESSION = "FreeSessionRequest"
RESCHEDULE = "RescheduleRequest"
EXTRA_SESSION = "ExtraSessionRequest"


async def _count_pending(db: AsyncSession, model) -> int:
    result = await db.execute(
        select(func.count(model.id)).where(model.status == RequestStatus.PENDING)
    )
    return result.scalar_one() or 0


async def _get_location(db: AsyncSession, location_id: uuid.UUID) -> Location:
    location = await db.get(Location, location_id)
    if not location:
        raise NotFoundError("Location not found", ErrorCode.LOCATION_NOT_FOUND)
    return location


# ---------------------------------------------------------------------------
# Free sessions
# ---------------------------------------------------------------------------


def _free_session_options():
    return [
        selectinload(FreeSessionRequest.location),
        selectinload(FreeSessionRequest.selected_session),
    ]


async def get_free_session_request_or_404(
    db: AsyncSession, request_id: uuid.UUID
) -> FreeSessionRequest:
    result = await db.execute(
        select(FreeSessionRequest)
        .options(*_free_session_options())
        .where(FreeSessionRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError(
            "Free session request not found", ErrorCode.REQUEST_NOT_FOUND
        )
    return request


async def create_free_session_request(
    db: AsyncSession, payload: FreeSessionRequestCreate
) -> FreeSessionRequest:
    """Public booking form. There is no actor, so the audit entry has none."""
    if payload.location_id:
        await _get_location(db, payload.location_id)

    request = FreeSessionRequest(
        id=uuid.uuid4(), status=RequestStatus.PENDING, **payload.model_dump()
    )
    db.add(request)
    record_audit(
        db,
        None,
        "CREATE_FREE_SESSION_REQUEST",
        FREE_SESSION,
        request.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Free session requested for {request.kid_name} by {request.email}")
    return await get_free_session_request_or_404(db, request.id)


async def list_free_session_requests(
    db: AsyncSession,
    params: PaginationParams,
    status: Optional[RequestStatus] = None,
) -> Tuple[List[FreeSessionRequest], PageMeta]:
    query = select(FreeSessionRequest).options(*_free_session_options())
    if status:
        query = query.where(FreeSessionRequest.status == status)
    query = query.order_by(FreeSessionRequest.created_at.desc())
    return await paginate(db, query, params)


async def count_pending_free_session_requests(db: AsyncSession) -> int:
    return await _count_pending(db, FreeSessionRequest)


async def select_free_session_request(
    db: AsyncSession,
    request_id: uuid.UUID,
    payload: FreeSessionSelect,
    actor_id: uuid.UUID,
    notifier: Optional[NotificationService] = None,
) -> FreeSessionRequest:
    """
    Accept a free session request, optionally pinning it to a session, and
    send the confirmation to the parent.
    """
    request = await get_free_session_request_or_404(db, request_id)
    ensure_transition(FREE_SESSION, request.status, RequestStatus.SELECTED)
    if payload.session_id:
        await get_session_or_404(db, payload.session_id)
        request.selected_session_id = payload.session_id

    request.status = RequestStatus.SELECTED
    record_audit(
        db,
        actor_id,
        "SELECT_FREE_SESSION_REQUEST",
        FREE_SESSION,
        request.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Selected free session request {request.id}")

    request = await get_free_session_request_or_404(db, request.id)
    if notifier:
        await notifier.send_free_session_confirmation(
            request.email,
            request.phone,
            request.parent_name,
            request.kid_name,
            str(request.selected_session_id) if request.selected_session_id else None,
        )
    return request


async def _move_free_session_request(
    db: AsyncSession,
    request_id: uuid.UUID,
    target: RequestStatus,
    action: str,
    actor_id: uuid.UUID,
) -> FreeSessionRequest:
    request = await get_free_session_request_or_404(db, request_id)
    ensure_transition(FREE_SESSION, request.status, target)
    request.status = target
    record_audit(db, actor_id, action, FREE_SESSION, request.id)
    await db.commit()
    logger.info(f"Free session request {request.id} is now {target.value}")
    return await get_free_session_request_or_404(db, request.id)


async def not_select_free_session_request(
    db: AsyncSession, request_id: uuid.UUID, actor_id: uuid.UUID
) -> FreeSessionRequest:
    return await _move_free_session_request(
        db,
        request_id,
        RequestStatus.NOT_SELECTED,
        "NOT_SELECT_FREE_SESSION_REQUEST",
        actor_id,
    )


async def complete_free_session_request(
    db: AsyncSession, request_id: uuid.UUID, actor_id: uuid.UUID
) -> FreeSessionRequest:
    return await _move_free_session_request(
        db,
        request_id,
        RequestStatus.COMPLETED,
        "COMPLETE_FREE_SESSION_REQUEST",
        actor_id,
    )


# ---------------------------------------------------------------------------
# Reschedules
# ---------------------------------------------------------------------------


def _reschedule_options():
    return [
        selectinload(RescheduleRequest.session),
        selectinload(RescheduleRequest.requester),
    ]


async def get_reschedule_request_or_404(
    db: AsyncSession, request_id: uuid.UUID
) -> RescheduleRequest:
    result = await db.execute(
        select(RescheduleRequest)
        .options(*_reschedule_options())
        .where(RescheduleRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError("Reschedule request not found", ErrorCode.REQUEST_NOT_FOUND)
    return request


async def create_reschedule_request(
    db: AsyncSession, payload: RescheduleRequestCreate, current_user: AuthUser
) -> RescheduleRequest:
    await get_session_or_404(db, payload.session_id)

    request = RescheduleRequest(
        id=uuid.uuid4(),
        session_id=payload.session_id,
        requested_by=current_user.user_id,
        new_date_time=payload.new_date_time,
        reason=payload.reason,
        status=RequestStatus.PENDING,
    )
    db.add(request)
    record_audit(
        db,
        current_user.user_id,
        "CREATE_RESCHEDULE_REQUEST",
        RESCHEDULE,
        request.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Reschedule requested for session {payload.session_id}")
    return await get_reschedule_request_or_404(db, request.id)


async def list_reschedule_requests(
    db: AsyncSession,
    params: PaginationParams,
    status: Optional[RequestStatus] = None,
) -> Tuple[List[RescheduleRequest], PageMeta]:
    query = select(RescheduleRequest).options(*_reschedule_options())
    if status:
        query = query.where(RescheduleRequest.status == status)
    query = query.order_by(RescheduleRequest.created_at.desc())
    return await paginate(db, query, params)


async def count_pending_reschedule_requests(db: AsyncSession) -> int:
    return await _count_pending(db, RescheduleRequest)


async def approve_reschedule_request(
    db: AsyncSession,
    request_id: uuid.UUID,
    actor_id: uuid.UUID,
    notifier: Optional[NotificationService] = None,
) -> RescheduleRequest:
    """
    Approve the request and move the session to the requested time in the
    same transaction. Parents of booked kids are told about the new time.
    """
    request = await get_reschedule_request_or_404(db, request_id)
    ensure_transition(RESCHEDULE, request.status, RequestStatus.APPROVED)

    session = await get_session_or_404(db, request.session_id)
    changes = describe_changes(session, {"date_time": request.new_date_time})
    session.date_time = request.new_date_time

    request.status = RequestStatus.APPROVED
    request.processed_at = utc_now()
    record_audit(
        db,
        actor_id,
        "APPROVE_RESCHEDULE_REQUEST",
        RESCHEDULE,
        request.id,
        {"session_id": request.session_id, "new_date_time": request.new_date_time},
    )
    await db.commit()
    logger.info(f"Approved reschedule {request.id} for session {session.id}")

    if notifier and changes:
        session = await get_session_or_404(db, request.session_id)
        await notify_session_change(notifier, session, "; ".join(changes))
    return await get_reschedule_request_or_404(db, request.id)


async def deny_reschedule_request(
    db: AsyncSession, request_id: uuid.UUID, actor_id: uuid.UUID
) -> RescheduleRequest:
    request = await get_reschedule_request_or_404(db, request_id)
    ensure_transition(RESCHEDULE, request.status, RequestStatus.DENIED)
    request.status = RequestStatus.DENIED
    request.processed_at = utc_now()
    record_audit(db, actor_id, "DENY_RESCHEDULE_REQUEST", RESCHEDULE, request.id)
    await db.commit()
    logger.info(f"Denied reschedule {request.id}")
    return await get_reschedule_request_or_404(db, request.id)


# ---------------------------------------------------------------------------
# Extra sessions
# ---------------------------------------------------------------------------


def _extra_session_options():
    return [
        selectinload(ExtraSessionRequest.parent),
        selectinload(ExtraSessionRequest.kid),
        selectinload(ExtraSessionRequest.coach),
        selectinload(ExtraSessionRequest.location),
    ]


async def get_extra_session_request_or_404(
    db: AsyncSession, request_id: uuid.UUID
) -> ExtraSessionRequest:
    result = await db.execute(
        select(ExtraSessionRequest)
        .options(*_extra_session_options())
        .where(ExtraSessionRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError(
            "Extra session request not found", ErrorCode.REQUEST_NOT_FOUND
        )
    return request


async def create_extra_session_request(
    db: AsyncSession, payload: ExtraSessionRequestCreate, current_user: AuthUser
) -> ExtraSessionRequest:
    kid = await db.get(Kid, payload.kid_id)
    if not kid:
        raise NotFoundError("Kid not found", ErrorCode.KID_NOT_FOUND)
    if kid.parent_id != current_user.user_id:
        raise ForbiddenError("You can only request sessions for your own kids")

    coach = await db.get(User, payload.coach_id)
    if not coach:
        raise NotFoundError("Coach not found", ErrorCode.USER_NOT_FOUND)
    if coach.role != UserRole.COACH:
        raise BadRequestError("Extra sessions must be requested with a coach")
    await _get_location(db, payload.location_id)

    request = ExtraSessionRequest(
        id=uuid.uuid4(),
        parent_id=current_user.user_id,
        status=RequestStatus.PENDING,
        **payload.model_dump(),
    )
    db.add(request)
    record_audit(
        db,
        current_user.user_id,
        "CREATE_EXTRA_SESSION_REQUEST",
        EXTRA_SESSION,
        request.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Extra session requested for kid {kid.id}")
    return await get_extra_session_request_or_404(db, request.id)


async def list_extra_session_requests(
    db: AsyncSession,
    params: PaginationParams,
    status: Optional[RequestStatus] = None,
) -> Tuple[List[ExtraSessionRequest], PageMeta]:
    query = select(ExtraSessionRequest).options(*_extra_session_options())
    if status:
        query = query.where(ExtraSessionRequest.status == status)
    query = query.order_by(ExtraSessionRequest.created_at.desc())
    return await paginate(db, query, params)


async def count_pending_extra_session_requests(db: AsyncSession) -> int:
    return await _count_pending(db, ExtraSessionRequest)


async def _decide_extra_session_request(
    db: AsyncSession,
    request_id: uuid.UUID,
    target: RequestStatus,
    action: str,
    actor_id: uuid.UUID,
) -> ExtraSessionRequest:
    request = await get_extra_session_request_or_404(db, request_id)
    ensure_transition(EXTRA_SESSION, request.status, target)
    request.status = target
    request.processed_at = utc_now()
    record_audit(db, actor_id, action, EXTRA_SESSION, request.id)
    await db.commit()
    logger.info(f"Extra session request {request.id} is now {target.value}")
    return await get_extra_session_request_or_404(db, request.id)


async def approve_extra_session_request(
    db: AsyncSession, request_id: uuid.UUID, actor_id: uuid.UUID
) -> ExtraSessionRequest:
    return await _decide_extra_session_request(
        db, request_id, RequestStatus.APPROVED, "APPROVE_EXTRA_SESSION_REQUEST", actor_id
    )


async def deny_extra_session_request(
    db: AsyncSession, request_id: uuid.UUID, actor_id: uuid.UUID
) -> ExtraSessionRequest:
    return await _decide_extra_session_request(
        db, request_id, RequestStatus.DENIED, "DENY_EXTRA_SESSION_REQUEST", actor_id
    )
