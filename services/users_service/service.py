"""Parent and coach account management."""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import UserRole
from libs.auth.passwords import hash_password
from libs.common.errors import ConflictError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.kids_service.models import Kid
from services.users_service.models import User, UserStatus
from services.users_service.parent_schemas import ParentCreate, ParentUpdate
from services.users_service.schemas import CoachCreate, CoachUpdate

logger = get_logger(__name__)

ENTITY_TYPE = "User"


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def ensure_email_available(
    db: AsyncSession, email: str, exclude_id: Optional[uuid.UUID] = None
) -> None:
    existing = await get_user_by_email(db, email)
    if existing and existing.id != exclude_id:
        raise ConflictError(
            "A user with this email already exists", ErrorCode.EMAIL_ALREADY_EXISTS
        )


async def get_user_or_404(
    db: AsyncSession, user_id: uuid.UUID, role: Optional[UserRole] = None
) -> User:
    user = await db.get(User, user_id)
    if not user or (role is not None and user.role != role):
        label = role.value.capitalize() if role else "User"
        raise NotFoundError(f"{label} not found", ErrorCode.USER_NOT_FOUND)
    return user


async def list_users(
    db: AsyncSession,
    role: UserRole,
    params: PaginationParams,
    search: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[UserStatus] = None,
) -> Tuple[List[User], PageMeta]:
    profile = User.parent_profile if role == UserRole.PARENT else User.coach_profile
    query = select(User).where(User.role == role)

    if status:
        query = query.where(User.status == status)
    else:
        query = query.where(User.status != UserStatus.DELETED)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                User.email.ilike(pattern),
                User.phone.ilike(pattern),
                profile["name"].as_string().ilike(pattern),
            )
        )

    if location and role == UserRole.PARENT:
        query = query.where(
            User.parent_profile["location"].as_string().ilike(f"%{location.strip()}%")
        )

    query = query.order_by(User.created_at.desc())
    return await paginate(db, query, params)


async def list_kids_for_parent(db: AsyncSession, parent_id: uuid.UUID) -> List[Kid]:
    result = await db.execute(
        select(Kid).where(Kid.parent_id == parent_id).order_by(Kid.created_at.asc())
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Parents
# ---------------------------------------------------------------------------


async def create_parent(
    db: AsyncSession,
    payload: ParentCreate,
    actor_id: Optional[uuid.UUID],
    approved: bool = True,
    action: str = "CREATE_PARENT",
) -> Tuple[User, List[Kid]]:
    """
    Create a parent account and its kids in one transaction.

    Admin-created parents are approved straight away; self-registered ones
    wait for approval. Without an actor the new parent is recorded as the actor.
    """
    await ensure_email_available(db, payload.email)

    parent = User(
        id=uuid.uuid4(),
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=UserRole.PARENT,
        status=UserStatus.ACTIVE,
        is_approved=approved,
        parent_profile={"name": payload.name, "location": payload.location},
    )
    db.add(parent)

    kids = [
        Kid(parent_id=parent.id, is_approved=approved, **kid.model_dump())
        for kid in payload.kids
    ]
    db.add_all(kids)

    record_audit(
        db,
        actor_id or parent.id,
        action,
        ENTITY_TYPE,
        parent.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    logger.info(f"Created parent {parent.email} with {len(kids)} kid(s)")
    return parent, kids


def _apply_account_fields(user: User, update_data: dict) -> None:
    # Account columns are non-nullable; a None here means "leave unchanged".
    password = update_data.pop("password", None)
    if password is not None:
        user.password_hash = hash_password(password)
    for field in ("email", "phone", "status"):
        value = update_data.pop(field, None)
        if value is not None:
            setattr(user, field, value)


async def update_parent(
    db: AsyncSession, parent_id: uuid.UUID, payload: ParentUpdate, actor_id: uuid.UUID
) -> User:
    parent = await get_user_or_404(db, parent_id, UserRole.PARENT)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("email") and update_data["email"] != parent.email:
        await ensure_email_available(db, update_data["email"], exclude_id=parent.id)

    _apply_account_fields(parent, update_data)

    profile_changes = {k: update_data[k] for k in ("name", "location") if k in update_data}
    if profile_changes:
        parent.parent_profile = {**(parent.parent_profile or {}), **profile_changes}

    record_audit(
        db,
        actor_id,
        "UPDATE_PARENT",
        ENTITY_TYPE,
        parent.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(parent)
    logger.info(f"Updated parent {parent.id}")
    return parent


async def delete_parent(
    db: AsyncSession, parent_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    parent = await get_user_or_404(db, parent_id, UserRole.PARENT)
    parent.status = UserStatus.DELETED
    record_audit(db, actor_id, "DELETE_PARENT", ENTITY_TYPE, parent.id)
    await db.commit()
    logger.info(f"Soft-deleted parent {parent.id}")


async def approve_parent(
    db: AsyncSession, parent_id: uuid.UUID, actor_id: uuid.UUID
) -> User:
    """Approve the parent together with every kid linked to them."""
    parent = await get_user_or_404(db, parent_id, UserRole.PARENT)
    parent.is_approved = True
    await db.execute(
        update(Kid).where(Kid.parent_id == parent.id).values(is_approved=True)
    )
    record_audit(db, actor_id, "APPROVE_PARENT", ENTITY_TYPE, parent.id)
    await db.commit()
    await db.refresh(parent)
    logger.info(f"Approved parent {parent.id}")
    return parent


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------


async def create_coach(
    db: AsyncSession, payload: CoachCreate, actor_id: uuid.UUID
) -> User:
    await ensure_email_available(db, payload.email)

    coach = User(
        id=uuid.uuid4(),
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=UserRole.COACH,
        status=UserStatus.ACTIVE,
        is_approved=True,
        coach_profile={
            "name": payload.name,
            "date_of_birth": (
                payload.date_of_birth.isoformat() if payload.date_of_birth else None
            ),
            "cv_url": payload.cv_url,
        },
    )
    db.add(coach)
    record_audit(
        db,
        actor_id,
        "CREATE_COACH",
        ENTITY_TYPE,
        coach.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(coach)
    logger.info(f"Created coach {coach.email}")
    return coach


async def update_coach(
    db: AsyncSession, coach_id: uuid.UUID, payload: CoachUpdate, actor_id: uuid.UUID
) -> User:
    coach = await get_user_or_404(db, coach_id, UserRole.COACH)
    update_data = payload.model_dump(mode="json", exclude_unset=True)

    if update_data.get("email") and update_data["email"] != coach.email:
        await ensure_email_available(db, update_data["email"], exclude_id=coach.id)
    if update_data.get("status"):
        update_data["status"] = UserStatus(update_data["status"])

    _apply_account_fields(coach, update_data)

    profile_changes = {
        k: update_data[k] for k in ("name", "date_of_birth", "cv_url") if k in update_data
    }
    if profile_changes:
        coach.coach_profile = {**(coach.coach_profile or {}), **profile_changes}

    record_audit(
        db,
        actor_id,
        "UPDATE_COACH",
        ENTITY_TYPE,
        coach.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(coach)
    logger.info(f"Updated coach {coach.id}")
    return coach


async def deactivate_coach(
    db: AsyncSession, coach_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    coach = await get_user_or_404(db, coach_id, UserRole.COACH)
    coach.status = UserStatus.INACTIVE
    record_audit(db, actor_id, "DEACTIVATE_COACH", ENTITY_TYPE, coach.id)
    await db.commit()
    logger.info(f"Deactivated coach {coach.id}")
