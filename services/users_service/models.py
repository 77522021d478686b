import enum
import uuid
from typing import Optional

from sqlalchemy import JSON, Boolean
from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.auth.models import UserRole
from libs.db.base import Base, TimestampMixin


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role_enum"), nullable=False, index=True
    )
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="user_status_enum"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False)

    # {"name": str, "location": str}
    parent_profile: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    # {"name": str, "date_of_birth": str | None, "cv_url": str | None}
    coach_profile: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    @property
    def display_name(self) -> str:
        profile = self.parent_profile or self.coach_profile or {}
        return profile.get("name") or self.email

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"
