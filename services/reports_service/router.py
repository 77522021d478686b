import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.csv_export import csv_response
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.reports_service import service as report_service
from services.reports_service.models import ReportStatus, ReportType
from services.reports_service.schemas import (
    ReportCreate,
    ReportGenerate,
    ReportResponse,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/", response_model=Page[ReportResponse])
async def list_reports(
    type_filter: Optional[ReportType] = Query(None, alias="type"),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await report_service.list_reports(
        db, params, type_filter, status_filter
    )
    return {"data": items, "meta": meta}


@router.post(
    "/generate", response_model=ReportResponse, status_code=status.HTTP_201_CREATED
)
async def generate_report(
    report_in: ReportGenerate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Aggregate sessions, invoices or kids for the date range and store the
    result on a new report.
    """
    return await report_service.generate_report(db, report_in, current_user.user_id)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await report_service.get_report_or_404(db, report_id)


@router.get("/{report_id}/export/csv")
async def export_report_csv(
    report_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    report = await report_service.get_report_or_404(db, report_id)
    content = report_service.export_report_csv(report)
    return csv_response(content, f"report-{report.id}.csv")


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_in: ReportCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await report_service.create_report(db, report_in, current_user.user_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await report_service.delete_report(db, report_id, current_user.user_id)
