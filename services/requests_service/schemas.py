import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from services.kids_service.schemas import KidSummary
from services.locations_service.schemas import LocationSummary
from services.requests_service.models import RequestStatus
from services.sessions_service.models import SessionType
from services.sessions_service.schemas import SessionSummary
from services.users_service.schemas import UserSummary, lower_email


class CountResponse(BaseModel):
    count: int


# ---------------------------------------------------------------------------
# Free sessions
# ---------------------------------------------------------------------------


class FreeSessionRequestCreate(BaseModel):
    parent_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: EmailStr
    kid_name: str = Field(..., min_length=1)
    session_type: SessionType
    location_id: Optional[uuid.UUID] = None
    preferred_date_time: Optional[datetime] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)


class FreeSessionSelect(BaseModel):
    session_id: Optional[uuid.UUID] = None


class FreeSessionRequestResponse(BaseModel):
    id: uuid.UUID
    parent_name: str
    phone: str
    email: str
    kid_name: str
    session_type: SessionType
    location_id: Optional[uuid.UUID] = None
    selected_session_id: Optional[uuid.UUID] = None
    preferred_date_time: Optional[datetime] = None
    status: RequestStatus
    location: Optional[LocationSummary] = None
    selected_session: Optional[SessionSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Reschedules
# ---------------------------------------------------------------------------


class RescheduleRequestCreate(BaseModel):
    session_id: uuid.UUID
    new_date_time: datetime
    reason: str = Field(..., min_length=1)


class RescheduleRequestResponse(BaseModel):
    id: uuid.UUID
    session_id: uuid.UUID
    requested_by: uuid.UUID
    new_date_time: datetime
    reason: str
    status: RequestStatus
    processed_at: Optional[datetime] = None
    session: Optional[SessionSummary] = None
    requester: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Extra sessions
# ---------------------------------------------------------------------------


class ExtraSessionRequestCreate(BaseModel):
    kid_id: uuid.UUID
    coach_id: uuid.UUID
    session_type: SessionType
    location_id: uuid.UUID
    preferred_date_time: datetime


class ExtraSessionRequestResponse(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    kid_id: uuid.UUID
    coach_id: uuid.UUID
    session_type: SessionType
    location_id: uuid.UUID
    preferred_date_time: datetime
    status: RequestStatus
    processed_at: Optional[datetime] = None
    parent: Optional[UserSummary] = None
    kid: Optional[KidSummary] = None
    coach: Optional[UserSummary] = None
    location: Optional[LocationSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
