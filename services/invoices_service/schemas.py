import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.invoices_service.models import InvoiceStatus, InvoiceType
from services.users_service.schemas import UserSummary


class InvoiceItem(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)


class InvoiceCreate(BaseModel):
    type: InvoiceType
    parent_id: Optional[uuid.UUID] = None
    coach_id: Optional[uuid.UUID] = None
    items: List[InvoiceItem] = Field(..., min_length=1)
    due_date: datetime
    export_fields: Optional[dict] = None


class PaymentStatusUpdate(BaseModel):
    status: InvoiceStatus
    paid_at: Optional[datetime] = None


class InvoiceResponse(BaseModel):
    id: uuid.UUID
    type: InvoiceType
    parent_id: Optional[uuid.UUID] = None
    coach_id: Optional[uuid.UUID] = None
    items: List[InvoiceItem]
    total_amount: float
    status: InvoiceStatus
    due_date: datetime
    paid_at: Optional[datetime] = None
    export_fields: Optional[dict] = None
    parent: Optional[UserSummary] = None
    coach: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FinanceSummary(BaseModel):
    total_revenue: float
    pending_amount: float
    overdue_amount: float
