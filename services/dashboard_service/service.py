"""Headline numbers for the admin dashboard."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import UserRole
from libs.common.datetime_utils import current_week_bounds
from services.kids_service.models import Kid
from services.requests_service.service import (
    count_pending_extra_session_requests,
    count_pending_free_session_requests,
    count_pending_reschedule_requests,
)
from services.sessions_service.service import count_sessions_between, get_weekly_summary
from services.users_service.models import User, UserStatus


async def count_users(db: AsyncSession, role: UserRole) -> int:
    """Users of a role, leaving out soft-deleted accounts."""
    result = await db.execute(
        select(func.count(User.id)).where(
            User.role == role, User.status != UserStatus.DELETED
        )
    )
    return result.scalar_one() or 0


async def count_kids(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Kid.id)))
    return result.scalar_one() or 0


async def get_stats(db: AsyncSession, now: Optional[datetime] = None) -> dict:
    week_start, week_end = current_week_bounds(now)
    return {
        "total_parents": await count_users(db, UserRole.PARENT),
        "total_coaches": await count_users(db, UserRole.COACH),
        "total_kids": await count_kids(db),
        "sessions_this_week": await count_sessions_between(db, week_start, week_end),
        "pending_free_session_requests": await count_pending_free_session_requests(db),
        "pending_reschedule_requests": await count_pending_reschedule_requests(db),
        "pending_extra_session_requests": await count_pending_extra_session_requests(
            db
        ),
    }


async def get_current_week_sessions(
    db: AsyncSession, now: Optional[datetime] = None
) -> dict:
    week_start, week_end = current_week_bounds(now)
    return await get_weekly_summary(db, week_start, week_end)
