"""Stored report definitions and generated report snapshots."""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.common.csv_export import write_csv
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.errors import BadRequestError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.reports_service.generator import (
    build_report_data,
    default_title,
    flatten_report,
)
from services.reports_service.models import Report, ReportStatus, ReportType
from services.reports_service.schemas import ReportCreate, ReportGenerate

logger = get_logger(__name__)

ENTITY_TYPE = "Report"

CSV_HEADER = ["Key", "Value"]


def _check_range(start, end) -> None:
    if start and end and ensure_utc(start) > ensure_utc(end):
        raise BadRequestError("start_date must not be after end_date")


async def list_reports(
    db: AsyncSession,
    params: PaginationParams,
    report_type: Optional[ReportType] = None,
    status: Optional[ReportStatus] = None,
) -> Tuple[List[Report], PageMeta]:
    query = select(Report).options(selectinload(Report.generator))
    if report_type:
        query = query.where(Report.type == report_type)
    if status:
        query = query.where(Report.status == status)
    query = query.order_by(Report.created_at.desc())
    return await paginate(db, query, params)


async def get_report_or_404(db: AsyncSession, report_id: uuid.UUID) -> Report:
    result = await db.execute(
        select(Report)
        .options(selectinload(Report.generator))
        .where(Report.id == report_id)
        .execution_options(populate_existing=True)
    )
    report = result.scalar_one_or_none()
    if not report:
        raise NotFoundError("Report not found", ErrorCode.REPORT_NOT_FOUND)
    return report


async def create_report(
    db: AsyncSession, payload: ReportCreate, actor_id: uuid.UUID
) -> Report:
    _check_range(payload.start_date, payload.end_date)
    report = Report(
        id=uuid.uuid4(),
        type=payload.type,
        title=payload.title,
        description=payload.description,
        status=ReportStatus.PENDING,
        start_date=payload.start_date,
        end_date=payload.end_date,
        filters=payload.filters,
    )
    db.add(report)
    record_audit(
        db,
        actor_id,
        "CREATE_REPORT",
        ENTITY_TYPE,
        report.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Created {report.type.value} report {report.id}")
    return await get_report_or_404(db, report.id)


async def generate_report(
    db: AsyncSession, payload: ReportGenerate, actor_id: uuid.UUID
) -> Report:
    """
    Aggregate the data for the requested type and date range and store it as
    a GENERATED report.
    """
    _check_range(payload.start_date, payload.end_date)
    data = await build_report_data(
        db, payload.type, payload.start_date, payload.end_date, payload.filters
    )

    report = Report(
        id=uuid.uuid4(),
        type=payload.type,
        title=payload.title or default_title(payload.type),
        description=payload.description,
        status=ReportStatus.GENERATED,
        start_date=payload.start_date,
        end_date=payload.end_date,
        filters=payload.filters,
        data=data,
        generated_by=actor_id,
        generated_at=utc_now(),
    )
    db.add(report)
    record_audit(
        db,
        actor_id,
        "GENERATE_REPORT",
        ENTITY_TYPE,
        report.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Generated {report.type.value} report {report.id}")
    return await get_report_or_404(db, report.id)


async def delete_report(
    db: AsyncSession, report_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    report = await get_report_or_404(db, report_id)
    await db.delete(report)
    record_audit(db, actor_id, "DELETE_REPORT", ENTITY_TYPE, report_id)
    await db.commit()
    logger.info(f"Deleted report {report_id}")


def export_report_csv(report: Report) -> str:
    if report.status != ReportStatus.GENERATED or report.data is None:
        raise BadRequestError("Report has not been generated yet")
    return write_csv(CSV_HEADER, flatten_report(report.data))
