from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.audit_service.schemas import AuditLogResponse
from services.audit_service.service import get_recent_logs
from services.dashboard_service import service as dashboard_service
from services.dashboard_service.schemas import DashboardStats
from services.invoices_service.schemas import FinanceSummary
from services.invoices_service.service import get_finance_summary
from services.sessions_service.schemas import SessionSummaryCounts

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await dashboard_service.get_stats(db)


@router.get("/weekly-sessions", response_model=SessionSummaryCounts)
async def get_weekly_sessions(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Sessions from Monday 00:00 UTC of the current week to the next Monday.
    """
    return await dashboard_service.get_current_week_sessions(db)


@router.get("/finance", response_model=FinanceSummary)
async def get_finance(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_finance_summary(db)


@router.get("/activity-logs", response_model=List[AuditLogResponse])
async def get_activity_logs(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_recent_logs(db, limit=10)
