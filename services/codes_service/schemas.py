import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.codes_service.models import CodeStatus, CodeType


def upper_code(value):
    return value.strip().upper() if isinstance(value, str) else value


class CodeCreate(BaseModel):
    code: str = Field(..., min_length=1)
    type: CodeType
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    discount_amount: Optional[float] = Field(None, ge=0)
    expiry_date: Optional[datetime] = None
    usage_limit: int = Field(1, ge=1)
    status: CodeStatus = CodeStatus.ACTIVE
    description: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return upper_code(v)


class CodeUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1)
    type: Optional[CodeType] = None
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    discount_amount: Optional[float] = Field(None, ge=0)
    expiry_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(None, ge=1)
    status: Optional[CodeStatus] = None
    description: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return upper_code(v)

    @field_validator("code", "type", "usage_limit", "status", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class CodeResponse(BaseModel):
    id: uuid.UUID
    code: str
    type: CodeType
    discount_percentage: Optional[float] = None
    discount_amount: Optional[float] = None
    expiry_date: Optional[datetime] = None
    usage_limit: int
    usage_count: int
    status: CodeStatus
    description: Optional[str] = None
    is_expired: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
