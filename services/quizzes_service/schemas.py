import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.banners_service.models import TargetAudience
from services.quizzes_service.models import DEFAULT_PASSING_SCORE, QuestionType


class QuizQuestion(BaseModel):
    question: str
    type: QuestionType
    options: Optional[List[str]] = None
    correct_answer: str = ""
    points: Optional[int] = Field(1, ge=0)


class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    questions: List[QuizQuestion] = Field(default_factory=list)
    target_audience: TargetAudience = TargetAudience.ALL
    passing_score: int = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)


class QuizUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    questions: Optional[List[QuizQuestion]] = None
    target_audience: Optional[TargetAudience] = None
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None

    @field_validator(
        "title", "questions", "target_audience", "passing_score", "is_active", mode="before"
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class QuestionMove(BaseModel):
    from_index: int
    to_index: int


class QuizSubmission(BaseModel):
    answers: List[Optional[str]] = Field(default_factory=list)


class QuizResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    questions: List[QuizQuestion]
    target_audience: TargetAudience
    passing_score: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionResult(BaseModel):
    index: int
    question: str
    given_answer: Optional[str] = None
    correct_answer: str
    correct: bool
    points: int
    earned_points: int


class QuizScore(BaseModel):
    earned_points: int
    total_points: int
    percentage: float
    passed: bool
    results: List[QuestionResult]
