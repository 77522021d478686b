import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null


class LocationBase(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    place_url: Optional[str] = None
    is_active: bool = True


class LocationCreate(LocationBase):
    pass


class LocationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    place_url: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "address", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class LocationSummary(BaseModel):
    id: uuid.UUID
    name: str
    address: str

    model_config = ConfigDict(from_attributes=True)


class LocationResponse(LocationBase):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
