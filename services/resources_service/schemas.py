import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.common.validators import reject_null
from services.resources_service.models import ResourceAudience, ResourceType


def clean_tags(value):
    """Strip tags and drop blanks and repeats, keeping first-seen order."""
    if not isinstance(value, list):
        return value
    stripped = [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]
    return list(dict.fromkeys(stripped))


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ResourceType
    content: Optional[str] = None
    file_url: Optional[str] = None
    external_url: Optional[str] = None
    target_audience: ResourceAudience = ResourceAudience.ALL
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)


class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[ResourceType] = None
    content: Optional[str] = None
    file_url: Optional[str] = None
    external_url: Optional[str] = None
    target_audience: Optional[ResourceAudience] = None
    tags: Optional[List[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)

    @field_validator("title", "type", "target_audience", "tags", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ResourceResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    type: ResourceType
    content: Optional[str] = None
    file_url: Optional[str] = None
    external_url: Optional[str] = None
    target_audience: ResourceAudience
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
