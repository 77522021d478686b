import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.csv_export import csv_response
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.communications_service.notifications import (
    NotificationService,
    get_notification_service,
)
from services.invoices_service import service as invoice_service
from services.invoices_service.models import InvoiceStatus, InvoiceType
from services.invoices_service.schemas import (
    InvoiceCreate,
    InvoiceResponse,
    PaymentStatusUpdate,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/", response_model=Page[InvoiceResponse])
async def list_invoices(
    type_filter: Optional[InvoiceType] = Query(None, alias="type"),
    parent_id: Optional[uuid.UUID] = Query(None),
    coach_id: Optional[uuid.UUID] = Query(None),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List invoices ordered by due date.
    """
    items, meta = await invoice_service.list_invoices(
        db, params, type_filter, parent_id, coach_id, status_filter
    )
    return {"data": items, "meta": meta}


@router.get("/export/csv")
async def export_invoices_csv(
    type_filter: Optional[InvoiceType] = Query(None, alias="type"),
    parent_id: Optional[uuid.UUID] = Query(None),
    coach_id: Optional[uuid.UUID] = Query(None),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    content = await invoice_service.export_csv(
        db, type_filter, parent_id, coach_id, status_filter
    )
    return csv_response(content, "invoices.csv")


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await invoice_service.get_invoice_or_404(db, invoice_id)


@router.get("/{invoice_id}/pdf")
async def get_invoice_pdf(
    invoice_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    invoice = await invoice_service.get_invoice_or_404(db, invoice_id)
    return pdf_response(
        invoice_service.render_invoice_pdf(invoice), f"invoice-{invoice.id}.pdf"
    )


@router.post("/", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_in: InvoiceCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await invoice_service.create_invoice(db, invoice_in, current_user.user_id)


@router.patch("/{invoice_id}/payment-status", response_model=InvoiceResponse)
async def update_payment_status(
    invoice_id: uuid.UUID,
    status_in: PaymentStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Mark an invoice PAID, PENDING or OVERDUE. Parents are notified of changes
    to their invoices.
    """
    return await invoice_service.update_payment_status(
        db, invoice_id, status_in, current_user.user_id, notifier
    )
