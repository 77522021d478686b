import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from libs.auth.models import UserRole
from libs.common.validators import reject_null
from services.users_service.models import UserStatus


def lower_email(value):
    return value.strip().lower() if isinstance(value, str) else value


class ParentProfile(BaseModel):
    name: str
    location: Optional[str] = None


class CoachProfile(BaseModel):
    name: str
    date_of_birth: Optional[date] = None
    cv_url: Optional[str] = None


class UserSummary(BaseModel):
    """Populated reference to a user embedded in other responses."""

    id: uuid.UUID
    email: str
    role: UserRole
    phone: Optional[str] = None
    parent_profile: Optional[ParentProfile] = None
    coach_profile: Optional[CoachProfile] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    phone: str
    role: UserRole
    status: UserStatus
    is_approved: bool
    parent_profile: Optional[ParentProfile] = None
    coach_profile: Optional[CoachProfile] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------


class CoachCreate(BaseModel):
    email: EmailStr
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    date_of_birth: Optional[date] = None
    cv_url: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)


class CoachUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None, min_length=1)
    date_of_birth: Optional[date] = None
    cv_url: Optional[str] = None
    status: Optional[UserStatus] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)

    @field_validator("email", "phone", "password", "name", "status", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
