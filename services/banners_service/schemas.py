import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.banners_service.models import TargetAudience


class BannerCreate(BaseModel):
    image_url: str = Field(..., min_length=1)
    active: bool = True
    order: Optional[int] = Field(None, ge=0)
    target_audience: TargetAudience = TargetAudience.ALL


class BannerUpdate(BaseModel):
    image_url: Optional[str] = Field(None, min_length=1)
    active: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)
    target_audience: Optional[TargetAudience] = None

    @field_validator("image_url", "active", "order", "target_audience", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class BannerReorder(BaseModel):
    banner_ids: List[uuid.UUID] = Field(..., min_length=1)

    @field_validator("banner_ids")
    @classmethod
    def ids_must_be_unique(cls, v: List[uuid.UUID]) -> List[uuid.UUID]:
        if len(set(v)) != len(v):
            raise ValueError("banner_ids must not contain duplicates")
        return v


class BannerResponse(BaseModel):
    id: uuid.UUID
    image_url: str
    active: bool
    order: int
    target_audience: TargetAudience
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
