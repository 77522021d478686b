import enum
import uuid
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.db.base import Base, TimestampMixin


class CrmContactStatus(str, enum.Enum):
    LEAD = "LEAD"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    CONVERTED = "CONVERTED"
    LOST = "LOST"


class CrmContact(TimestampMixin, Base):
    __tablename__ = "crm_contacts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[CrmContactStatus] = mapped_column(
        SAEnum(CrmContactStatus, name="crm_contact_status_enum"),
        nullable=False,
        default=CrmContactStatus.LEAD,
        index=True,
    )
    source: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # "metadata" is reserved on declarative classes
    meta: Mapped[dict] = mapped_column("metadata", JSON, default=dict)
    # [{"text", "author_id", "created_at"}], oldest first
    notes: Mapped[list] = mapped_column(JSON, default=list)

    def __repr__(self):
        return f"<CrmContact {self.name or self.email} {self.status.value}>"
