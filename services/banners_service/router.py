import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.banners_service import service as banner_service
from services.banners_service.models import TargetAudience
from services.banners_service.schemas import (
    BannerCreate,
    BannerReorder,
    BannerResponse,
    BannerUpdate,
)

router = APIRouter(prefix="/banners", tags=["banners"])


@router.get("/", response_model=List[BannerResponse])
async def list_banners(
    active: Optional[bool] = Query(None),
    target_audience: Optional[TargetAudience] = Query(None),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List banners in display order.
    """
    return await banner_service.list_banners(db, active, target_audience)


@router.patch("/reorder", response_model=List[BannerResponse])
async def reorder_banners(
    reorder_in: BannerReorder,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Put the listed banners first, at positions 0..N-1.
    """
    return await banner_service.reorder_banners(db, reorder_in, current_user.user_id)


@router.get("/{banner_id}", response_model=BannerResponse)
async def get_banner(
    banner_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await banner_service.get_banner_or_404(db, banner_id)


@router.post("/", response_model=BannerResponse, status_code=status.HTTP_201_CREATED)
async def create_banner(
    banner_in: BannerCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await banner_service.create_banner(db, banner_in, current_user.user_id)


@router.patch("/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: uuid.UUID,
    banner_in: BannerUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await banner_service.update_banner(
        db, banner_id, banner_in, current_user.user_id
    )


@router.delete("/{banner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_banner(
    banner_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await banner_service.delete_banner(db, banner_id, current_user.user_id)
