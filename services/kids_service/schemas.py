import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.sessions_service.models import SessionType
from services.users_service.schemas import UserSummary


class KidBase(BaseModel):
    name: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1)
    birth_date: date
    goal: Optional[str] = None
    currently_in_sports: bool = False
    medical_conditions: List[str] = Field(default_factory=list)
    session_type: SessionType


class KidCreate(KidBase):
    pass


class KidUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    gender: Optional[str] = Field(None, min_length=1)
    birth_date: Optional[date] = None
    goal: Optional[str] = None
    currently_in_sports: Optional[bool] = None
    medical_conditions: Optional[List[str]] = None
    session_type: Optional[SessionType] = None
    achievements: Optional[List[str]] = None
    milestones: Optional[List[str]] = None

    @field_validator(
        "name",
        "gender",
        "birth_date",
        "currently_in_sports",
        "medical_conditions",
        "session_type",
        "achievements",
        "milestones",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class LinkParentRequest(BaseModel):
    parent_id: uuid.UUID


class KidSummary(BaseModel):
    id: uuid.UUID
    name: str
    session_type: SessionType
    parent_id: Optional[uuid.UUID] = None

    model_config = ConfigDict(from_attributes=True)


class KidResponse(KidBase):
    id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    achievements: List[str] = Field(default_factory=list)
    milestones: List[str] = Field(default_factory=list)
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class KidDetailResponse(KidResponse):
    """Kid with its parent populated."""

    parent: Optional[UserSummary] = None
