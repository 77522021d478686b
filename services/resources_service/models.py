import enum
import uuid
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.db.base import Base, TimestampMixin


class ResourceType(str, enum.Enum):
    ARTICLE = "ARTICLE"
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    LINK = "LINK"


class ResourceAudience(str, enum.Enum):
    PARENTS = "PARENTS"
    COACHES = "COACHES"
    KIDS = "KIDS"
    ALL = "ALL"


class Resource(TimestampMixin, Base):
    """Learning material shared with parents, coaches or kids."""

    __tablename__ = "resources"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[ResourceType] = mapped_column(
        SAEnum(ResourceType, name="resource_type_enum"), nullable=False
    )
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    external_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    target_audience: Mapped[ResourceAudience] = mapped_column(
        SAEnum(ResourceAudience, name="resource_audience_enum"),
        nullable=False,
        default=ResourceAudience.ALL,
    )
    tags: Mapped[list] = mapped_column(JSON, default=list)

    def __repr__(self):
        return f"<Resource {self.type.value} {self.title}>"
