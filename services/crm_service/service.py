"""CRM contacts: leads and parents tracked through the sales funnel."""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import UserRole
from libs.common.datetime_utils import utc_now
from libs.common.errors import ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.crm_service.models import CrmContact, CrmContactStatus
from services.crm_service.schemas import (
    CrmContactCreate,
    CrmContactUpdate,
    CrmNoteCreate,
)
from services.users_service.service import get_user_or_404

logger = get_logger(__name__)

ENTITY_TYPE = "CrmContact"


async def list_contacts(
    db: AsyncSession,
    params: PaginationParams,
    status: Optional[CrmContactStatus] = None,
    parent_id: Optional[uuid.UUID] = None,
) -> Tuple[List[CrmContact], PageMeta]:
    query = select(CrmContact)
    if status:
        query = query.where(CrmContact.status == status)
    if parent_id:
        query = query.where(CrmContact.parent_id == parent_id)
    query = query.order_by(CrmContact.created_at.desc())
    return await paginate(db, query, params)


async def get_contact_or_404(db: AsyncSession, contact_id: uuid.UUID) -> CrmContact:
    contact = await db.get(CrmContact, contact_id)
    if not contact:
        raise NotFoundError("CRM contact not found", ErrorCode.CRM_CONTACT_NOT_FOUND)
    return contact


async def create_contact(
    db: AsyncSession, payload: CrmContactCreate, actor_id: uuid.UUID
) -> CrmContact:
    if payload.parent_id:
        await get_user_or_404(db, payload.parent_id, UserRole.PARENT)

    data = payload.model_dump()
    data["meta"] = data.pop("metadata")
    contact = CrmContact(id=uuid.uuid4(), notes=[], **data)
    db.add(contact)
    record_audit(
        db,
        actor_id,
        "CREATE_CRM_CONTACT",
        ENTITY_TYPE,
        contact.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(contact)
    logger.info(f"Created CRM contact {contact.id} ({contact.status.value})")
    return contact


async def update_contact(
    db: AsyncSession,
    contact_id: uuid.UUID,
    payload: CrmContactUpdate,
    actor_id: uuid.UUID,
) -> CrmContact:
    contact = await get_contact_or_404(db, contact_id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("parent_id"):
        await get_user_or_404(db, update_data["parent_id"], UserRole.PARENT)
    if "metadata" in update_data:
        update_data["meta"] = update_data.pop("metadata")

    for field, value in update_data.items():
        setattr(contact, field, value)

    record_audit(
        db,
        actor_id,
        "UPDATE_CRM_CONTACT",
        ENTITY_TYPE,
        contact.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(contact)
    logger.info(f"Updated CRM contact {contact.id}")
    return contact


async def add_note(
    db: AsyncSession, contact_id: uuid.UUID, payload: CrmNoteCreate, actor_id: uuid.UUID
) -> CrmContact:
    """Append a note; earlier notes are never edited."""
    contact = await get_contact_or_404(db, contact_id)
    note = {
        "text": payload.note,
        "author_id": str(actor_id) if actor_id else None,
        "created_at": utc_now().isoformat(),
    }
    # Reassign so the JSON column is flagged dirty
    contact.notes = [*(contact.notes or []), note]

    record_audit(
        db,
        actor_id,
        "ADD_CRM_NOTE",
        ENTITY_TYPE,
        contact.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(contact)
    logger.info(f"Added note to CRM contact {contact.id}")
    return contact


async def delete_contact(
    db: AsyncSession, contact_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    contact = await get_contact_or_404(db, contact_id)
    await db.delete(contact)
    record_audit(db, actor_id, "DELETE_CRM_CONTACT", ENTITY_TYPE, contact_id)
    await db.commit()
    logger.info(f"Deleted CRM contact {contact_id}")
