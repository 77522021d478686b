import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.communications_service.notifications import (
    NotificationService,
    get_notification_service,
)
from services.sessions_service import service as session_service
from services.sessions_service.models import SessionStatus
from services.sessions_service.schemas import (
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/", response_model=Page[SessionResponse])
async def list_sessions(
    coach_id: Optional[uuid.UUID] = Query(None),
    location_id: Optional[uuid.UUID] = Query(None),
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List sessions in chronological order.
    """
    items, meta = await session_service.list_sessions(
        db, params, coach_id, location_id, status_filter, start_date, end_date
    )
    return {"data": items, "meta": meta}


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Get details of a specific session.
    """
    return await session_service.get_session_or_404(db, session_id)


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    session_in: SessionCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Create a new session (Admin only).
    """
    return await session_service.create_session(db, session_in, current_user.user_id)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: uuid.UUID,
    session_in: SessionUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Update a session. Parents of booked kids hear about time, place and
    status changes.
    """
    return await session_service.update_session(
        db, session_id, session_in, current_user.user_id, notifier
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Delete a session.
    """
    await session_service.delete_session(db, session_id, current_user.user_id)
