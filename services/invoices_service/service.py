"""Parent invoices and coach payouts."""

import uuid
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.auth.models import UserRole
from libs.common.csv_export import write_csv
from libs.common.datetime_utils import utc_now
from libs.common.errors import BadRequestError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from libs.common.pdf import generate_invoice_pdf
from services.audit_service.service import record_audit
from services.communications_service.notifications import NotificationService
from services.invoices_service.models import Invoice, InvoiceStatus, InvoiceType
from services.invoices_service.schemas import InvoiceCreate, PaymentStatusUpdate
from services.users_service.models import User

logger = get_logger(__name__)

ENTITY_TYPE = "Invoice"

CSV_HEADER = ["ID", "Type", "Parent/Coach", "Total Amount", "Status", "Due Date", "Paid At"]


def compute_total(items: Iterable) -> float:
    """Sum of line item amounts, accepting dicts or objects with .amount."""
    total = 0.0
    for item in items:
        amount = item["amount"] if isinstance(item, dict) else item.amount
        total += float(amount)
    return round(total, 2)


def invoice_party(invoice: Invoice) -> Optional[User]:
    """The parent for a parent invoice, the coach for a payout."""
    if invoice.type == InvoiceType.PARENT_INVOICE:
        return invoice.parent
    return invoice.coach


def invoice_csv_rows(invoices: Sequence[Invoice]) -> List[list]:
    rows = []
    for invoice in invoices:
        party = invoice_party(invoice)
        rows.append(
            [
                str(invoice.id),
                invoice.type.value,
                party.email if party else "N/A",
                invoice.total_amount,
                invoice.status.value,
                invoice.due_date.isoformat(),
                invoice.paid_at.isoformat() if invoice.paid_at else "N/A",
            ]
        )
    return rows


def _filtered_query(
    type_filter: Optional[InvoiceType] = None,
    parent_id: Optional[uuid.UUID] = None,
    coach_id: Optional[uuid.UUID] = None,
    status: Optional[InvoiceStatus] = None,
):
    query = select(Invoice).options(
        selectinload(Invoice.parent), selectinload(Invoice.coach)
    )
    if type_filter:
        query = query.where(Invoice.type == type_filter)
    if parent_id:
        query = query.where(Invoice.parent_id == parent_id)
    if coach_id:
        query = query.where(Invoice.coach_id == coach_id)
    if status:
        query = query.where(Invoice.status == status)
    return query.order_by(Invoice.due_date.asc())


async def list_invoices(
    db: AsyncSession,
    params: PaginationParams,
    type_filter: Optional[InvoiceType] = None,
    parent_id: Optional[uuid.UUID] = None,
    coach_id: Optional[uuid.UUID] = None,
    status: Optional[InvoiceStatus] = None,
) -> Tuple[List[Invoice], PageMeta]:
    query = _filtered_query(type_filter, parent_id, coach_id, status)
    return await paginate(db, query, params)


async def get_invoice_or_404(db: AsyncSession, invoice_id: uuid.UUID) -> Invoice:
    result = await db.execute(
        select(Invoice)
        .options(selectinload(Invoice.parent), selectinload(Invoice.coach))
        .where(Invoice.id == invoice_id)
        .execution_options(populate_existing=True)
    )
    invoice = result.scalar_one_or_none()
    if not invoice:
        raise NotFoundError("Invoice not found", ErrorCode.INVOICE_NOT_FOUND)
    return invoice


async def _ensure_party(db: AsyncSession, user_id: uuid.UUID, role: UserRole) -> User:
    user = await db.get(User, user_id)
    if not user or user.role != role:
        raise NotFoundError(
            f"{role.value.capitalize()} not found", ErrorCode.USER_NOT_FOUND
        )
    return user


async def create_invoice(
    db: AsyncSession, payload: InvoiceCreate, actor_id: uuid.UUID
) -> Invoice:
    """
    Create a PENDING invoice. The total is always computed from the items.
    """
    if payload.type == InvoiceType.PARENT_INVOICE and not payload.parent_id:
        raise BadRequestError("Parent invoices require a parent_id")
    if payload.type == InvoiceType.COACH_PAYOUT and not payload.coach_id:
        raise BadRequestError("Coach payouts require a coach_id")
    if payload.parent_id:
        await _ensure_party(db, payload.parent_id, UserRole.PARENT)
    if payload.coach_id:
        await _ensure_party(db, payload.coach_id, UserRole.COACH)

    items = [item.model_dump() for item in payload.items]
    invoice = Invoice(
        id=uuid.uuid4(),
        type=payload.type,
        parent_id=payload.parent_id,
        coach_id=payload.coach_id,
        items=items,
        total_amount=compute_total(items),
        status=InvoiceStatus.PENDING,
        due_date=payload.due_date,
        export_fields=payload.export_fields,
    )
    db.add(invoice)
    record_audit(
        db,
        actor_id,
        "CREATE_INVOICE",
        ENTITY_TYPE,
        invoice.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Created {invoice.type.value} {invoice.id} for {invoice.total_amount}")
    return await get_invoice_or_404(db, invoice.id)


async def update_payment_status(
    db: AsyncSession,
    invoice_id: uuid.UUID,
    payload: PaymentStatusUpdate,
    actor_id: uuid.UUID,
    notifier: Optional[NotificationService] = None,
) -> Invoice:
    invoice = await get_invoice_or_404(db, invoice_id)

    invoice.status = payload.status
    if payload.status == InvoiceStatus.PAID:
        invoice.paid_at = payload.paid_at or invoice.paid_at or utc_now()
    else:
        invoice.paid_at = None

    record_audit(
        db,
        actor_id,
        "UPDATE_INVOICE_PAYMENT_STATUS",
        ENTITY_TYPE,
        invoice.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    logger.info(f"Invoice {invoice.id} marked {invoice.status.value}")

    invoice = await get_invoice_or_404(db, invoice.id)
    if notifier and invoice.type == InvoiceType.PARENT_INVOICE and invoice.parent:
        await notifier.send_invoice_update(
            str(invoice.id),
            invoice.parent.email,
            invoice.parent.phone,
            invoice.status.value,
        )
    return invoice


async def export_csv(
    db: AsyncSession,
    type_filter: Optional[InvoiceType] = None,
    parent_id: Optional[uuid.UUID] = None,
    coach_id: Optional[uuid.UUID] = None,
    status: Optional[InvoiceStatus] = None,
) -> str:
    result = await db.execute(_filtered_query(type_filter, parent_id, coach_id, status))
    invoices = result.scalars().all()
    return write_csv(CSV_HEADER, invoice_csv_rows(invoices))


def render_invoice_pdf(invoice: Invoice) -> bytes:
    party = invoice_party(invoice)
    if party:
        party_name = f"{party.display_name} <{party.email}>"
    else:
        party_name = "N/A"
    return generate_invoice_pdf(
        invoice_id=str(invoice.id),
        invoice_type=invoice.type.value,
        party_label="Parent" if invoice.type == InvoiceType.PARENT_INVOICE else "Coach",
        party_name=party_name,
        status=invoice.status.value,
        items=invoice.items or [],
        total_amount=invoice.total_amount,
        due_date=invoice.due_date,
        paid_at=invoice.paid_at,
        issued_at=invoice.created_at,
    )


async def get_finance_summary(db: AsyncSession) -> dict:
    """Totals of PAID, PENDING and OVERDUE invoices."""
    result = await db.execute(
        select(Invoice.status, func.coalesce(func.sum(Invoice.total_amount), 0.0))
        .group_by(Invoice.status)
    )
    totals = {status: float(total) for status, total in result.all()}
    return {
        "total_revenue": totals.get(InvoiceStatus.PAID, 0.0),
        "pending_amount": totals.get(InvoiceStatus.PENDING, 0.0),
        "overdue_amount": totals.get(InvoiceStatus.OVERDUE, 0.0),
    }
