import enum
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from libs.db.base import Base, TimestampMixin


class SessionType(str, enum.Enum):
    INDIVIDUAL = "INDIVIDUAL"
    GROUP = "GROUP"


class SessionStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


DEFAULT_CAPACITY = {SessionType.GROUP: 10, SessionType.INDIVIDUAL: 1}


session_kids = Table(
    "session_kids",
    Base.metadata,
    Column(
        "session_id",
        Uuid,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("kid_id", Uuid, ForeignKey("kids.id", ondelete="CASCADE"), primary_key=True),
)


class Session(TimestampMixin, Base):
    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type_enum"), nullable=False
    )
    coach_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("locations.id"), nullable=False, index=True
    )
    date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Individual sessions reference a single kid instead of the kids list
    kid_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("kids.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(SessionStatus, name="session_status_enum"),
        nullable=False,
        default=SessionStatus.SCHEDULED,
    )
    is_free_session: Mapped[bool] = mapped_column(Boolean, default=False)

    coach: Mapped["User"] = relationship("User", foreign_keys=[coach_id])  # noqa: F821
    location: Mapped["Location"] = relationship("Location")  # noqa: F821
    kid: Mapped[Optional["Kid"]] = relationship("Kid", foreign_keys=[kid_id])  # noqa: F821
    kids: Mapped[List["Kid"]] = relationship(  # noqa: F821
        "Kid", secondary=session_kids
    )

    @property
    def booked_kids(self) -> list:
        """Kids attending, whichever way the session references them."""
        if self.type == SessionType.INDIVIDUAL:
            return [self.kid] if self.kid else []
        return list(self.kids)

    def __repr__(self):
        return f"<Session {self.type.value} at {self.date_time}>"
