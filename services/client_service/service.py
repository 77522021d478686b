"""Self-service views for signed-in parents and coaches."""

import uuid
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import AuthUser, UserRole
from libs.auth.passwords import hash_password
from libs.common.errors import ErrorCode, ForbiddenError, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams
from services.audit_service.service import record_audit
from services.client_service.schemas import ProfileUpdate
from services.invoices_service.models import Invoice
from services.invoices_service.service import get_invoice_or_404, list_invoices
from services.sessions_service.models import Session
from services.sessions_service.service import list_sessions
from services.users_service.models import User
from services.users_service.service import get_user_or_404, list_kids_for_parent

logger = get_logger(__name__)


async def update_profile(
    db: AsyncSession, current_user: AuthUser, payload: ProfileUpdate
) -> User:
    """
    Update the caller's own account. The name lands in the profile that
    matches the caller's role; location only applies to parents.
    """
    user = await get_user_or_404(db, current_user.user_id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("password"):
        user.password_hash = hash_password(update_data["password"])
    if update_data.get("phone"):
        user.phone = update_data["phone"]

    if user.role == UserRole.PARENT:
        changes = {k: update_data[k] for k in ("name", "location") if k in update_data}
        if changes:
            user.parent_profile = {**(user.parent_profile or {}), **changes}
    elif user.role == UserRole.COACH and update_data.get("name"):
        user.coach_profile = {**(user.coach_profile or {}), "name": update_data["name"]}

    record_audit(
        db,
        user.id,
        "UPDATE_PROFILE",
        "User",
        user.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(user)
    logger.info(f"User {user.id} updated their profile")
    return user


async def my_sessions(
    db: AsyncSession, current_user: AuthUser, params: PaginationParams
) -> Tuple[List[Session], PageMeta]:
    if current_user.role == UserRole.COACH:
        return await list_sessions(db, params, coach_id=current_user.user_id)
    if current_user.role == UserRole.PARENT:
        kids = await list_kids_for_parent(db, current_user.user_id)
        return await list_sessions(db, params, kid_ids=[kid.id for kid in kids])
    raise ForbiddenError("Only parents and coaches have sessions")


async def my_invoices(
    db: AsyncSession, current_user: AuthUser, params: PaginationParams
) -> Tuple[List[Invoice], PageMeta]:
    if current_user.role == UserRole.PARENT:
        return await list_invoices(db, params, parent_id=current_user.user_id)
    if current_user.role == UserRole.COACH:
        return await list_invoices(db, params, coach_id=current_user.user_id)
    raise ForbiddenError("Only parents and coaches have invoices")


async def get_my_invoice(
    db: AsyncSession, current_user: AuthUser, invoice_id: uuid.UUID
) -> Invoice:
    """Someone else's invoice is reported as missing."""
    invoice = await get_invoice_or_404(db, invoice_id)
    if current_user.user_id not in (invoice.parent_id, invoice.coach_id):
        raise NotFoundError("Invoice not found", ErrorCode.INVOICE_NOT_FOUND)
    return invoice
