import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from libs.common.validators import reject_null
from services.crm_service.models import CrmContactStatus
from services.users_service.schemas import lower_email


class CrmContactCreate(BaseModel):
    parent_id: Optional[uuid.UUID] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    status: CrmContactStatus = CrmContactStatus.LEAD
    source: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)


class CrmContactUpdate(BaseModel):
    parent_id: Optional[uuid.UUID] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    status: Optional[CrmContactStatus] = None
    source: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)

    @field_validator("status", "metadata", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class CrmNoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


class CrmNote(BaseModel):
    text: str
    author_id: Optional[uuid.UUID] = None
    created_at: datetime


class CrmContactResponse(BaseModel):
    id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: CrmContactStatus
    source: Optional[str] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata")
    )
    notes: List[CrmNote] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
