import enum
import uuid

from sqlalchemy import Boolean
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.db.base import Base, TimestampMixin


class TargetAudience(str, enum.Enum):
    PARENT = "PARENT"
    COACH = "COACH"
    ALL = "ALL"


class Banner(TimestampMixin, Base):
    __tablename__ = "banners"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    image_url: Mapped[str] = mapped_column(String, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target_audience: Mapped[TargetAudience] = mapped_column(
        SAEnum(TargetAudience, name="target_audience_enum"),
        nullable=False,
        default=TargetAudience.ALL,
    )

    def __repr__(self):
        return f"<Banner {self.order} {self.image_url}>"
