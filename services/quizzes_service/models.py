import enum
import uuid
from typing import Optional

from sqlalchemy import JSON, Boolean
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from libs.db.base import Base, TimestampMixin
from services.banners_service.models import TargetAudience


class QuestionType(str, enum.Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


DEFAULT_PASSING_SCORE = 70


class Quiz(TimestampMixin, Base):
    __tablename__ = "quizzes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # [{"question", "type", "options", "correct_answer", "points"}]
    questions: Mapped[list] = mapped_column(JSON, default=list)
    target_audience: Mapped[TargetAudience] = mapped_column(
        SAEnum(TargetAudience, name="target_audience_enum"),
        nullable=False,
        default=TargetAudience.ALL,
    )
    passing_score: Mapped[int] = mapped_column(Integer, default=DEFAULT_PASSING_SCORE)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self):
        return f"<Quiz {self.title}>"
