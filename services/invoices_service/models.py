import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from libs.db.base import Base, TimestampMixin


class InvoiceType(str, enum.Enum):
    PARENT_INVOICE = "PARENT_INVOICE"
    COACH_PAYOUT = "COACH_PAYOUT"


class InvoiceStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class Invoice(TimestampMixin, Base):
    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[InvoiceType] = mapped_column(
        SAEnum(InvoiceType, name="invoice_type_enum"), nullable=False
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    coach_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    # [{"description": str, "amount": float}]
    items: Mapped[list] = mapped_column(JSON, default=list)
    total_amount: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[InvoiceStatus] = mapped_column(
        SAEnum(InvoiceStatus, name="invoice_status_enum"),
        nullable=False,
        default=InvoiceStatus.PENDING,
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    export_fields: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    parent: Mapped[Optional["User"]] = relationship(  # noqa: F821
        "User", foreign_keys=[parent_id]
    )
    coach: Mapped[Optional["User"]] = relationship(  # noqa: F821
        "User", foreign_keys=[coach_id]
    )

    def __repr__(self):
        return f"<Invoice {self.type.value} {self.total_amount} {self.status.value}>"
