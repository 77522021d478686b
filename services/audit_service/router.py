import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.audit_service import service as audit_service
from services.audit_service.schemas import AuditLogResponse

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/", response_model=Page[AuditLogResponse])
async def list_audit_logs(
    actor_id: Optional[uuid.UUID] = Query(None),
    entity_type: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List audit entries, newest first.
    """
    items, meta = await audit_service.list_logs(
        db, params, actor_id, entity_type, start_date, end_date
    )
    return {"data": items, "meta": meta}
