import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from libs.db.base import Base, TimestampMixin
from services.sessions_service.models import SessionType


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    SELECTED = "SELECTED"
    NOT_SELECTED = "NOT_SELECTED"
    COMPLETED = "COMPLETED"


def _status_column():
    return mapped_column(
        SAEnum(RequestStatus, name="request_status_enum"),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )


class FreeSessionRequest(TimestampMixin, Base):
    __tablename__ = "free_session_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    kid_name: Mapped[str] = mapped_column(String, nullable=False)
    session_type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type_enum"), nullable=False
    )
    location_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    selected_session_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True
    )
    preferred_date_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[RequestStatus] = _status_column()

    location: Mapped[Optional["Location"]] = relationship("Location")  # noqa: F821
    selected_session: Mapped[Optional["Session"]] = relationship(  # noqa: F821
        "Session"
    )


class RescheduleRequest(TimestampMixin, Base):
    __tablename__ = "reschedule_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False
    )
    requested_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    new_date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RequestStatus] = _status_column()
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    session: Mapped["Session"] = relationship("Session")  # noqa: F821
    requester: Mapped["User"] = relationship("User")  # noqa: F821


class ExtraSessionRequest(TimestampMixin, Base):
    __tablename__ = "extra_session_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    kid_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("kids.id", ondelete="CASCADE"), nullable=False
    )
    coach_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    session_type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type_enum"), nullable=False
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False
    )
    preferred_date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    status: Mapped[RequestStatus] = _status_column()
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    parent: Mapped["User"] = relationship("User", foreign_keys=[parent_id])  # noqa: F821
    kid: Mapped["Kid"] = relationship("Kid")  # noqa: F821
    coach: Mapped["User"] = relationship("User", foreign_keys=[coach_id])  # noqa: F821
    location: Mapped["Location"] = relationship("Location")  # noqa: F821
