from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from libs.common.validators import reject_null
from services.kids_service.schemas import KidCreate, KidResponse
from services.users_service.models import UserStatus
from services.users_service.schemas import UserResponse, lower_email


class ParentCreate(BaseModel):
    email: EmailStr
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    kids: List[KidCreate] = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)


class ParentUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    status: Optional[UserStatus] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)

    @field_validator("email", "phone", "password", "name", "status", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ParentDetailResponse(UserResponse):
    kids: List[KidResponse] = Field(default_factory=list)

    @classmethod
    def build(cls, parent, kids) -> "ParentDetailResponse":
        return cls.model_validate(parent).model_copy(
            update={"kids": [KidResponse.model_validate(kid) for kid in kids]}
        )
