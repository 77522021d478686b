import uuid
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import ErrorCode, NotFoundError
from libs.common.logging import get_logger
from services.audit_service.service import BULK_ENTITY_ID, record_audit
from services.banners_service.models import Banner, TargetAudience
from services.banners_service.schemas import BannerCreate, BannerReorder, BannerUpdate

logger = get_logger(__name__)

ENTITY_TYPE = "Banner"


def apply_reorder(
    current: Sequence[uuid.UUID], requested: Sequence[uuid.UUID]
) -> List[uuid.UUID]:
    """
    Final banner sequence: the requested ids first, in the given order,
    followed by every other banner in its existing relative order.
    """
    requested_set = set(requested)
    return list(requested) + [bid for bid in current if bid not in requested_set]


def _renumber(banners: Sequence[Banner]) -> None:
    for index, banner in enumerate(banners):
        banner.order = index


async def _ordered_banners(db: AsyncSession) -> List[Banner]:
    result = await db.execute(
        select(Banner).order_by(Banner.order.asc(), Banner.created_at.asc())
    )
    return list(result.scalars().all())


async def list_banners(
    db: AsyncSession,
    active: Optional[bool] = None,
    target_audience: Optional[TargetAudience] = None,
) -> List[Banner]:
    query = select(Banner)
    if active is not None:
        query = query.where(Banner.active == active)
    if target_audience:
        query = query.where(Banner.target_audience == target_audience)
    query = query.order_by(Banner.order.asc(), Banner.created_at.asc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_banner_or_404(db: AsyncSession, banner_id: uuid.UUID) -> Banner:
    banner = await db.get(Banner, banner_id)
    if not banner:
        raise NotFoundError("Banner not found", ErrorCode.BANNER_NOT_FOUND)
    return banner


async def create_banner(
    db: AsyncSession, payload: BannerCreate, actor_id: uuid.UUID
) -> Banner:
    data = payload.model_dump()
    if data["order"] is None:
        max_order = (await db.execute(select(func.max(Banner.order)))).scalar()
        data["order"] = 0 if max_order is None else max_order + 1

    banner = Banner(id=uuid.uuid4(), **data)
    db.add(banner)
    record_audit(
        db,
        actor_id,
        "CREATE_BANNER",
        ENTITY_TYPE,
        banner.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(banner)
    logger.info(f"Created banner {banner.id} at position {banner.order}")
    return banner


async def update_banner(
    db: AsyncSession, banner_id: uuid.UUID, payload: BannerUpdate, actor_id: uuid.UUID
) -> Banner:
    banner = await get_banner_or_404(db, banner_id)

    update_data = payload.model_dump(exclude_unset=True)
    new_order = update_data.pop("order", None)
    for field, value in update_data.items():
        if value is not None:
            setattr(banner, field, value)

    if new_order is not None:
        others = [b for b in await _ordered_banners(db) if b.id != banner.id]
        others.insert(min(new_order, len(others)), banner)
        _renumber(others)

    record_audit(
        db,
        actor_id,
        "UPDATE_BANNER",
        ENTITY_TYPE,
        banner.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(banner)
    logger.info(f"Updated banner {banner.id}")
    return banner


async def delete_banner(
    db: AsyncSession, banner_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    """Delete a banner and close the gap it leaves in the ordering."""
    banner = await get_banner_or_404(db, banner_id)
    await db.delete(banner)
    remaining = [b for b in await _ordered_banners(db) if b.id != banner_id]
    _renumber(remaining)
    record_audit(db, actor_id, "DELETE_BANNER", ENTITY_TYPE, banner_id)
    await db.commit()
    logger.info(f"Deleted banner {banner_id}")


async def reorder_banners(
    db: AsyncSession, payload: BannerReorder, actor_id: uuid.UUID
) -> List[Banner]:
    banners = await _ordered_banners(db)
    by_id = {banner.id: banner for banner in banners}

    missing = [bid for bid in payload.banner_ids if bid not in by_id]
    if missing:
        raise NotFoundError(f"Banner not found: {missing[0]}", ErrorCode.BANNER_NOT_FOUND)

    sequence = apply_reorder([b.id for b in banners], payload.banner_ids)
    _renumber([by_id[bid] for bid in sequence])

    record_audit(
        db,
        actor_id,
        "REORDER_BANNERS",
        ENTITY_TYPE,
        BULK_ENTITY_ID,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Reordered {len(payload.banner_ids)} banner(s)")
    return await _ordered_banners(db)
