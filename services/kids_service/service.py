import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from libs.auth.models import UserRole
from libs.common.errors import BadRequestError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.kids_service.models import Kid
from services.kids_service.schemas import KidUpdate
from services.sessions_service.models import SessionType
from services.users_service.models import User

logger = get_logger(__name__)

ENTITY_TYPE = "Kid"


async def get_kid_or_404(db: AsyncSession, kid_id: uuid.UUID) -> Kid:
    """Load a kid with its parent populated."""
    result = await db.execute(
        select(Kid)
        .options(selectinload(Kid.parent))
        .where(Kid.id == kid_id)
        .execution_options(populate_existing=True)
    )
    kid = result.scalar_one_or_none()
    if not kid:
        raise NotFoundError("Kid not found", ErrorCode.KID_NOT_FOUND)
    return kid


async def list_kids(
    db: AsyncSession,
    params: PaginationParams,
    parent_id: Optional[uuid.UUID] = None,
    session_type: Optional[SessionType] = None,
) -> Tuple[List[Kid], PageMeta]:
    query = select(Kid).options(selectinload(Kid.parent))
    if parent_id:
        query = query.where(Kid.parent_id == parent_id)
    if session_type:
        query = query.where(Kid.session_type == session_type)
    query = query.order_by(Kid.created_at.desc())
    return await paginate(db, query, params)


async def update_kid(
    db: AsyncSession, kid_id: uuid.UUID, payload: KidUpdate, actor_id: uuid.UUID
) -> Kid:
    kid = await get_kid_or_404(db, kid_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(kid, field, value)

    record_audit(
        db,
        actor_id,
        "UPDATE_KID",
        ENTITY_TYPE,
        kid.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    logger.info(f"Updated kid {kid.id}")
    return await get_kid_or_404(db, kid.id)


async def link_parent(
    db: AsyncSession, kid_id: uuid.UUID, parent_id: uuid.UUID, actor_id: uuid.UUID
) -> Kid:
    kid = await get_kid_or_404(db, kid_id)
    parent = await db.get(User, parent_id)
    if not parent:
        raise NotFoundError("Parent not found", ErrorCode.USER_NOT_FOUND)
    if parent.role != UserRole.PARENT:
        raise BadRequestError("Kids can only be linked to a parent account")

    kid.parent_id = parent.id
    record_audit(
        db,
        actor_id,
        "LINK_KID_TO_PARENT",
        ENTITY_TYPE,
        kid.id,
        {"parent_id": str(parent.id)},
    )
    await db.commit()
    logger.info(f"Linked kid {kid.id} to parent {parent.id}")
    return await get_kid_or_404(db, kid.id)


async def unlink_parent(db: AsyncSession, kid_id: uuid.UUID, actor_id: uuid.UUID) -> Kid:
    kid = await get_kid_or_404(db, kid_id)
    kid.parent_id = None
    record_audit(db, actor_id, "UNLINK_KID_FROM_PARENT", ENTITY_TYPE, kid.id)
    await db.commit()
    logger.info(f"Unlinked kid {kid.id}")
    return await get_kid_or_404(db, kid.id)
