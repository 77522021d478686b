import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.crm_service import service as crm_service
from services.crm_service.models import CrmContactStatus
from services.crm_service.schemas import (
    CrmContactCreate,
    CrmContactResponse,
    CrmContactUpdate,
    CrmNoteCreate,
)

router = APIRouter(prefix="/crm", tags=["crm"])


@router.get("/", response_model=Page[CrmContactResponse])
async def list_contacts(
    status_filter: Optional[CrmContactStatus] = Query(None, alias="status"),
    parent_id: Optional[uuid.UUID] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await crm_service.list_contacts(db, params, status_filter, parent_id)
    return {"data": items, "meta": meta}


@router.get("/{contact_id}", response_model=CrmContactResponse)
async def get_contact(
    contact_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_service.get_contact_or_404(db, contact_id)


@router.post(
    "/", response_model=CrmContactResponse, status_code=status.HTTP_201_CREATED
)
async def create_contact(
    contact_in: CrmContactCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_service.create_contact(db, contact_in, current_user.user_id)


@router.patch("/{contact_id}", response_model=CrmContactResponse)
async def update_contact(
    contact_id: uuid.UUID,
    contact_in: CrmContactUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await crm_service.update_contact(
        db, contact_id, contact_in, current_user.user_id
    )


@router.post("/{contact_id}/notes", response_model=CrmContactResponse)
async def add_note(
    contact_id: uuid.UUID,
    note_in: CrmNoteCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Append a timestamped note signed by the caller.
    """
    return await crm_service.add_note(db, contact_id, note_in, current_user.user_id)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await crm_service.delete_contact(db, contact_id, current_user.user_id)
