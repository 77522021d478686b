import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import get_current_user, require_roles
from libs.auth.models import AuthUser, UserRole
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.client_service import service as client_service
from services.client_service.schemas import ProfileUpdate
from services.invoices_service.router import pdf_response
from services.invoices_service.schemas import InvoiceResponse
from services.invoices_service.service import render_invoice_pdf
from services.kids_service.schemas import KidResponse
from services.sessions_service.schemas import SessionResponse
from services.users_service.schemas import UserResponse
from services.users_service.service import get_user_or_404, list_kids_for_parent

router = APIRouter(prefix="/me", tags=["client"])


@router.get("", response_model=UserResponse)
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_user_or_404(db, current_user.user_id)


@router.patch("", response_model=UserResponse)
async def update_me(
    profile_in: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await client_service.update_profile(db, current_user, profile_in)


@router.get("/kids", response_model=List[KidResponse])
async def get_my_kids(
    current_user: AuthUser = Depends(require_roles(UserRole.PARENT)),
    db: AsyncSession = Depends(get_async_db),
):
    return await list_kids_for_parent(db, current_user.user_id)


@router.get("/sessions", response_model=Page[SessionResponse])
async def get_my_sessions(
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Parents see the sessions their kids are booked on; coaches see their own.
    """
    items, meta = await client_service.my_sessions(db, current_user, params)
    return {"data": items, "meta": meta}


@router.get("/invoices", response_model=Page[InvoiceResponse])
async def get_my_invoices(
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await client_service.my_invoices(db, current_user, params)
    return {"data": items, "meta": meta}


@router.get("/invoices/{invoice_id}/pdf")
async def get_my_invoice_pdf(
    invoice_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    invoice = await client_service.get_my_invoice(db, current_user, invoice_id)
    return pdf_response(render_invoice_pdf(invoice), f"invoice-{invoice.id}.pdf")
