import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.codes_service import service as code_service
from services.codes_service.models import CodeStatus, CodeType
from services.codes_service.schemas import CodeCreate, CodeResponse, CodeUpdate

router = APIRouter(prefix="/codes", tags=["codes"])


@router.get("/", response_model=Page[CodeResponse])
async def list_codes(
    type_filter: Optional[CodeType] = Query(None, alias="type"),
    status_filter: Optional[CodeStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List discount and promotion codes, newest first.
    """
    items, meta = await code_service.list_codes(db, params, type_filter, status_filter)
    return {"data": items, "meta": meta}


@router.get("/{code_id}", response_model=CodeResponse)
async def get_code(
    code_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await code_service.get_code_or_404(db, code_id)


@router.post("/", response_model=CodeResponse, status_code=status.HTTP_201_CREATED)
async def create_code(
    code_in: CodeCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await code_service.create_code(db, code_in, current_user.user_id)


@router.patch("/{code_id}", response_model=CodeResponse)
async def update_code(
    code_id: uuid.UUID,
    code_in: CodeUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await code_service.update_code(db, code_id, code_in, current_user.user_id)


@router.delete("/{code_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_code(
    code_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await code_service.delete_code(db, code_id, current_user.user_id)
