import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.db.base import Base, TimestampMixin


class CodeType(str, enum.Enum):
    DISCOUNT = "DISCOUNT"
    PROMOTION = "PROMOTION"


class CodeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Code(TimestampMixin, Base):
    """Discount or promotion code handed out to parents."""

    __tablename__ = "codes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Stored upper-case
    code: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    type: Mapped[CodeType] = mapped_column(
        SAEnum(CodeType, name="code_type_enum"), nullable=False
    )
    discount_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    discount_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    expiry_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    usage_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[CodeStatus] = mapped_column(
        SAEnum(CodeStatus, name="code_status_enum"),
        nullable=False,
        default=CodeStatus.ACTIVE,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def is_expired(self) -> bool:
        return self.expiry_date is not None and ensure_utc(self.expiry_date) <= utc_now()

    def __repr__(self):
        return f"<Code {self.code} {self.type.value}>"
