"""Audit trail: every mutation adds one entry to the caller's transaction."""

import uuid
from datetime import date, datetime
from typing import Any, List, Optional, Union

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.common.datetime_utils import range_end, range_start
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from libs.common.sanitize import scrub_sensitive
from services.audit_service.models import AuditLog

logger = get_logger(__name__)

BULK_ENTITY_ID = "multiple"


def record_audit(
    db: AsyncSession,
    actor_id: Optional[uuid.UUID],
    action: str,
    entity_type: str,
    entity_id: Union[uuid.UUID, str],
    metadata: Optional[Any] = None,
) -> AuditLog:
    """
    Add an audit entry to the session. It is written by the caller's commit,
    together with the mutation it describes.
    """
    entry = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        meta=scrub_sensitive(jsonable_encoder(metadata)) if metadata is not None else None,
    )
    db.add(entry)
    logger.info(
        f"Audit {action} on {entity_type}:{entity_id}",
        extra={"extra_fields": {"actor_id": str(actor_id) if actor_id else None}},
    )
    return entry


async def list_logs(
    db: AsyncSession,
    params: PaginationParams,
    actor_id: Optional[uuid.UUID] = None,
    entity_type: Optional[str] = None,
    start_date: Optional[Union[date, datetime]] = None,
    end_date: Optional[Union[date, datetime]] = None,
) -> tuple[List[AuditLog], PageMeta]:
    query = select(AuditLog).options(selectinload(AuditLog.actor))
    if actor_id:
        query = query.where(AuditLog.actor_id == actor_id)
    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)
    if start_date:
        query = query.where(AuditLog.timestamp >= range_start(start_date))
    if end_date:
        query = query.where(AuditLog.timestamp <= range_end(end_date))

    query = query.order_by(AuditLog.timestamp.desc())
    return await paginate(db, query, params)


async def get_recent_logs(db: AsyncSession, limit: int = 10) -> List[AuditLog]:
    query = (
        select(AuditLog)
        .options(selectinload(AuditLog.actor))
        .order_by(AuditLog.timestamp.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())
