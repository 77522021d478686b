import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from libs.auth.models import UserRole


class AuditActor(BaseModel):
    id: uuid.UUID
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class AuditLogResponse(BaseModel):
    id: uuid.UUID
    actor_id: Optional[uuid.UUID] = None
    actor: Optional[AuditActor] = None
    action: str
    entity_type: str
    entity_id: str
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("meta", "metadata")
    )
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
