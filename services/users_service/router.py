import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser, UserRole
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.users_service import service as user_service
from services.users_service.models import UserStatus
from services.users_service.parent_schemas import (
    ParentCreate,
    ParentDetailResponse,
    ParentUpdate,
)
from services.users_service.schemas import CoachCreate, CoachUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


# ==================================================================
# PARENTS
# ==================================================================


@router.get("/parents", response_model=Page[UserResponse])
async def list_parents(
    search: Optional[str] = Query(None, description="Match email, phone or name"),
    location: Optional[str] = Query(None),
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List parents, newest first. Deleted parents only appear when asked for.
    """
    items, meta = await user_service.list_users(
        db, UserRole.PARENT, params, search, location, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/parents/{parent_id}", response_model=ParentDetailResponse)
async def get_parent(
    parent_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    parent = await user_service.get_user_or_404(db, parent_id, UserRole.PARENT)
    kids = await user_service.list_kids_for_parent(db, parent.id)
    return ParentDetailResponse.build(parent, kids)


@router.post(
    "/parents",
    response_model=ParentDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_parent(
    parent_in: ParentCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Create an approved parent account with at least one kid.
    """
    parent, kids = await user_service.create_parent(db, parent_in, current_user.user_id)
    return ParentDetailResponse.build(parent, kids)


@router.patch("/parents/{parent_id}", response_model=UserResponse)
async def update_parent(
    parent_id: uuid.UUID,
    parent_in: ParentUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.update_parent(
        db, parent_id, parent_in, current_user.user_id
    )


@router.delete("/parents/{parent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parent(
    parent_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Soft delete: the parent is marked DELETED and hidden from listings.
    """
    await user_service.delete_parent(db, parent_id, current_user.user_id)


@router.post("/parents/{parent_id}/approve", response_model=UserResponse)
async def approve_parent(
    parent_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.approve_parent(db, parent_id, current_user.user_id)


# ==================================================================
# COACHES
# ==================================================================


@router.get("/coaches", response_model=Page[UserResponse])
async def list_coaches(
    search: Optional[str] = Query(None, description="Match email, phone or name"),
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await user_service.list_users(
        db, UserRole.COACH, params, search, None, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/coaches/{coach_id}", response_model=UserResponse)
async def get_coach(
    coach_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.get_user_or_404(db, coach_id, UserRole.COACH)


@router.post("/coaches", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_coach(
    coach_in: CoachCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.create_coach(db, coach_in, current_user.user_id)


@router.patch("/coaches/{coach_id}", response_model=UserResponse)
async def update_coach(
    coach_id: uuid.UUID,
    coach_in: CoachUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.update_coach(db, coach_id, coach_in, current_user.user_id)


@router.delete("/coaches/{coach_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_coach(
    coach_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Coaches are deactivated rather than deleted.
    """
    await user_service.deactivate_coach(db, coach_id, current_user.user_id)
