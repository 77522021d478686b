import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from libs.db.base import Base, TimestampMixin


class ReportType(str, enum.Enum):
    ATTENDANCE = "ATTENDANCE"
    FINANCIAL = "FINANCIAL"
    SESSION_SUMMARY = "SESSION_SUMMARY"
    PERFORMANCE = "PERFORMANCE"
    CUSTOM = "CUSTOM"


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    GENERATED = "GENERATED"
    FAILED = "FAILED"


class Report(TimestampMixin, Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[ReportType] = mapped_column(
        SAEnum(ReportType, name="report_type_enum"), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        SAEnum(ReportStatus, name="report_status_enum"),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    filters: Mapped[dict] = mapped_column(JSON, default=dict)
    data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    generated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    generated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    generator: Mapped[Optional["User"]] = relationship("User")  # noqa: F821

    def __repr__(self):
        return f"<Report {self.type.value} {self.title}>"
