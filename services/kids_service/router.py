import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.kids_service import service as kid_service
from services.kids_service.schemas import KidDetailResponse, KidUpdate, LinkParentRequest
from services.sessions_service.models import SessionType

router = APIRouter(prefix="/kids", tags=["kids"])


@router.get("/", response_model=Page[KidDetailResponse])
async def list_kids(
    parent_id: Optional[uuid.UUID] = Query(None),
    session_type: Optional[SessionType] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await kid_service.list_kids(db, params, parent_id, session_type)
    return {"data": items, "meta": meta}


@router.get("/{kid_id}", response_model=KidDetailResponse)
async def get_kid(
    kid_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await kid_service.get_kid_or_404(db, kid_id)


@router.patch("/{kid_id}", response_model=KidDetailResponse)
async def update_kid(
    kid_id: uuid.UUID,
    kid_in: KidUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await kid_service.update_kid(db, kid_id, kid_in, current_user.user_id)


@router.post("/{kid_id}/link-parent", response_model=KidDetailResponse)
async def link_parent(
    kid_id: uuid.UUID,
    link_in: LinkParentRequest,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await kid_service.link_parent(
        db, kid_id, link_in.parent_id, current_user.user_id
    )


@router.delete("/{kid_id}/unlink-parent", response_model=KidDetailResponse)
async def unlink_parent(
    kid_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await kid_service.unlink_parent(db, kid_id, current_user.user_id)
