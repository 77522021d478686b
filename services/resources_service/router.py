import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.resources_service import service as resource_service
from services.resources_service.models import ResourceAudience, ResourceType
from services.resources_service.schemas import (
    ResourceCreate,
    ResourceResponse,
    ResourceUpdate,
)

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("/", response_model=Page[ResourceResponse])
async def list_resources(
    target_audience: Optional[ResourceAudience] = Query(None),
    type_filter: Optional[ResourceType] = Query(None, alias="type"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await resource_service.list_resources(
        db, params, target_audience, type_filter
    )
    return {"data": items, "meta": meta}


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await resource_service.get_resource_or_404(db, resource_id)


@router.post("/", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    resource_in: ResourceCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await resource_service.create_resource(db, resource_in, current_user.user_id)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: uuid.UUID,
    resource_in: ResourceUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await resource_service.update_resource(
        db, resource_id, resource_in, current_user.user_id
    )


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await resource_service.delete_resource(db, resource_id, current_user.user_id)
