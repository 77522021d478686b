import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from services.reports_service.generator import render_report_tree
from services.reports_service.models import ReportStatus, ReportType
from services.users_service.schemas import UserSummary


class ReportCreate(BaseModel):
    type: ReportType
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    filters: Dict[str, Any] = Field(default_factory=dict)


class ReportGenerate(BaseModel):
    type: ReportType
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    filters: Dict[str, Any] = Field(default_factory=dict)


class ReportResponse(BaseModel):
    id: uuid.UUID
    type: ReportType
    title: str
    description: Optional[str] = None
    status: ReportStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    filters: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None
    generated_by: Optional[uuid.UUID] = None
    generated_at: Optional[datetime] = None
    generator: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def summary(self) -> List[str]:
        """Indented text rendering of the generated data."""
        return render_report_tree(self.data) if self.data else []
