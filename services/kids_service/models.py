import uuid
from datetime import date
from typing import Optional

from sqlalchemy import JSON, Boolean, Date
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from libs.db.base import Base, TimestampMixin
from services.sessions_service.models import SessionType


class Kid(TimestampMixin, Base):
    __tablename__ = "kids"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    gender: Mapped[str] = mapped_column(String, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    goal: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    currently_in_sports: Mapped[bool] = mapped_column(Boolean, default=False)
    medical_conditions: Mapped[list] = mapped_column(JSON, default=list)
    session_type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type_enum"), nullable=False
    )
    achievements: Mapped[list] = mapped_column(JSON, default=list)
    milestones: Mapped[list] = mapped_column(JSON, default=list)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False)

    parent: Mapped[Optional["User"]] = relationship("User")  # noqa: F821

    def __repr__(self):
        return f"<Kid {self.name}>"
