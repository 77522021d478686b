import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.kids_service.schemas import KidSummary
from services.locations_service.schemas import LocationSummary
from services.sessions_service.models import SessionStatus, SessionType
from services.users_service.schemas import UserSummary


class SessionBase(BaseModel):
    type: SessionType
    coach_id: uuid.UUID
    location_id: uuid.UUID
    date_time: datetime
    duration: int = Field(..., gt=0, description="Minutes")
    is_free_session: bool = False


class SessionCreate(SessionBase):
    capacity: Optional[int] = Field(None, ge=1)
    kids: List[uuid.UUID] = Field(default_factory=list)
    kid_id: Optional[uuid.UUID] = None
    status: SessionStatus = SessionStatus.SCHEDULED


class SessionUpdate(BaseModel):
    type: Optional[SessionType] = None
    coach_id: Optional[uuid.UUID] = None
    location_id: Optional[uuid.UUID] = None
    date_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0)
    capacity: Optional[int] = Field(None, ge=1)
    kids: Optional[List[uuid.UUID]] = None
    kid_id: Optional[uuid.UUID] = None
    status: Optional[SessionStatus] = None
    is_free_session: Optional[bool] = None

    @field_validator(
        "type",
        "coach_id",
        "location_id",
        "date_time",
        "duration",
        "capacity",
        "kids",
        "status",
        "is_free_session",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class SessionSummary(BaseModel):
    id: uuid.UUID
    type: SessionType
    date_time: datetime
    status: SessionStatus

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(SessionBase):
    id: uuid.UUID
    capacity: int
    kid_id: Optional[uuid.UUID] = None
    status: SessionStatus
    coach: Optional[UserSummary] = None
    location: Optional[LocationSummary] = None
    kid: Optional[KidSummary] = None
    kids: List[KidSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionSummaryCounts(BaseModel):
    total: int
    by_type: Dict[str, int]
    by_status: Dict[str, int]
