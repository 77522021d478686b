import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin, require_roles
from libs.auth.models import AuthUser, UserRole
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.common.rate_limit import auth_rate, limiter
from libs.db.session import get_async_db
from services.communications_service.notifications import (
    NotificationService,
    get_notification_service,
)
from services.requests_service import service as request_service
from services.requests_service.models import RequestStatus
from services.requests_service.schemas import (
    CountResponse,
    ExtraSessionRequestCreate,
    ExtraSessionRequestResponse,
    FreeSessionRequestCreate,
    FreeSessionRequestResponse,
    FreeSessionSelect,
    RescheduleRequestCreate,
    RescheduleRequestResponse,
)

router = APIRouter(prefix="/requests", tags=["requests"])


# ==================================================================
# FREE SESSIONS
# ==================================================================


@router.post(
    "/free-sessions",
    response_model=FreeSessionRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(auth_rate)
async def create_free_session_request(
    request: Request,
    request_in: FreeSessionRequestCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Public booking form for a free trial session.
    """
    return await request_service.create_free_session_request(db, request_in)


@router.get("/free-sessions", response_model=Page[FreeSessionRequestResponse])
async def list_free_session_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await request_service.list_free_session_requests(
        db, params, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/free-sessions/count", response_model=CountResponse)
async def count_free_session_requests(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Number of free session requests still waiting for a decision.
    """
    return {"count": await request_service.count_pending_free_session_requests(db)}


@router.post(
    "/free-sessions/{request_id}/select", response_model=FreeSessionRequestResponse
)
async def select_free_session_request(
    request_id: uuid.UUID,
    select_in: Optional[FreeSessionSelect] = None,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    return await request_service.select_free_session_request(
        db, request_id, select_in or FreeSessionSelect(), current_user.user_id, notifier
    )


@router.post(
    "/free-sessions/{request_id}/not-select",
    response_model=FreeSessionRequestResponse,
)
async def not_select_free_session_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.not_select_free_session_request(
        db, request_id, current_user.user_id
    )


@router.post(
    "/free-sessions/{request_id}/complete", response_model=FreeSessionRequestResponse
)
async def complete_free_session_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.complete_free_session_request(
        db, request_id, current_user.user_id
    )


# ==================================================================
# RESCHEDULES
# ==================================================================


@router.post(
    "/reschedules",
    response_model=RescheduleRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reschedule_request(
    request_in: RescheduleRequestCreate,
    current_user: AuthUser = Depends(require_roles(UserRole.PARENT, UserRole.COACH)),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.create_reschedule_request(db, request_in, current_user)


@router.get("/reschedules", response_model=Page[RescheduleRequestResponse])
async def list_reschedule_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await request_service.list_reschedule_requests(
        db, params, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/reschedules/count", response_model=CountResponse)
async def count_reschedule_requests(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return {"count": await request_service.count_pending_reschedule_requests(db)}


@router.post(
    "/reschedules/{request_id}/approve", response_model=RescheduleRequestResponse
)
async def approve_reschedule_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Approve a reschedule. The session moves to the requested time.
    """
    return await request_service.approve_reschedule_request(
        db, request_id, current_user.user_id, notifier
    )


@router.post("/reschedules/{request_id}/deny", response_model=RescheduleRequestResponse)
async def deny_reschedule_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.deny_reschedule_request(
        db, request_id, current_user.user_id
    )


# ==================================================================
# EXTRA SESSIONS
# ==================================================================


@router.post(
    "/extra-sessions",
    response_model=ExtraSessionRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_extra_session_request(
    request_in: ExtraSessionRequestCreate,
    current_user: AuthUser = Depends(require_roles(UserRole.PARENT)),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.create_extra_session_request(
        db, request_in, current_user
    )


@router.get("/extra-sessions", response_model=Page[ExtraSessionRequestResponse])
async def list_extra_session_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await request_service.list_extra_session_requests(
        db, params, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/extra-sessions/count", response_model=CountResponse)
async def count_extra_session_requests(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return {"count": await request_service.count_pending_extra_session_requests(db)}


@router.post(
    "/extra-sessions/{request_id}/approve", response_model=ExtraSessionRequestResponse
)
async def approve_extra_session_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.approve_extra_session_request(
        db, request_id, current_user.user_id
    )


@router.post(
    "/extra-sessions/{request_id}/deny", response_model=ExtraSessionRequestResponse
)
async def deny_extra_session_request(
    request_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await request_service.deny_extra_session_request(
        db, request_id, current_user.user_id
    )
