import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.codes_service.models import Code, CodeStatus, CodeType
from services.codes_service.schemas import CodeCreate, CodeUpdate

logger = get_logger(__name__)

ENTITY_TYPE = "Code"


def validate_discount(
    code_type: CodeType,
    discount_percentage: Optional[float],
    discount_amount: Optional[float],
) -> None:
    """A DISCOUNT code must carry a percentage or a fixed amount."""
    if (
        code_type == CodeType.DISCOUNT
        and discount_percentage is None
        and discount_amount is None
    ):
        raise BadRequestError(
            "Discount codes require a discount percentage or amount"
        )


async def ensure_code_available(
    db: AsyncSession, code: str, exclude_id: Optional[uuid.UUID] = None
) -> None:
    result = await db.execute(select(Code).where(Code.code == code))
    existing = result.scalar_one_or_none()
    if existing and existing.id != exclude_id:
        raise ConflictError(
            f"Code {code} already exists", ErrorCode.CODE_ALREADY_EXISTS
        )


async def list_codes(
    db: AsyncSession,
    params: PaginationParams,
    code_type: Optional[CodeType] = None,
    status: Optional[CodeStatus] = None,
) -> Tuple[List[Code], PageMeta]:
    query = select(Code)
    if code_type:
        query = query.where(Code.type == code_type)
    if status:
        query = query.where(Code.status == status)
    query = query.order_by(Code.created_at.desc())
    return await paginate(db, query, params)


async def get_code_or_404(db: AsyncSession, code_id: uuid.UUID) -> Code:
    code = await db.get(Code, code_id)
    if not code:
        raise NotFoundError("Code not found", ErrorCode.CODE_NOT_FOUND)
    return code


async def create_code(
    db: AsyncSession, payload: CodeCreate, actor_id: uuid.UUID
) -> Code:
    validate_discount(payload.type, payload.discount_percentage, payload.discount_amount)
    await ensure_code_available(db, payload.code)

    code = Code(id=uuid.uuid4(), usage_count=0, **payload.model_dump())
    db.add(code)
    record_audit(
        db,
        actor_id,
        "CREATE_CODE",
        ENTITY_TYPE,
        code.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(code)
    logger.info(f"Created {code.type.value} code {code.code}")
    return code


async def update_code(
    db: AsyncSession, code_id: uuid.UUID, payload: CodeUpdate, actor_id: uuid.UUID
) -> Code:
    code = await get_code_or_404(db, code_id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("code") and update_data["code"] != code.code:
        await ensure_code_available(db, update_data["code"], exclude_id=code.id)

    # Checked against the values the row will hold after the update
    validate_discount(
        update_data.get("type") or code.type,
        update_data.get("discount_percentage", code.discount_percentage),
        update_data.get("discount_amount", code.discount_amount),
    )

    for field, value in update_data.items():
        setattr(code, field, value)

    record_audit(
        db,
        actor_id,
        "UPDATE_CODE",
        ENTITY_TYPE,
        code.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(code)
    logger.info(f"Updated code {code.id}")
    return code


async def delete_code(db: AsyncSession, code_id: uuid.UUID, actor_id: uuid.UUID) -> None:
    code = await get_code_or_404(db, code_id)
    await db.delete(code)
    record_audit(db, actor_id, "DELETE_CODE", ENTITY_TYPE, code_id)
    await db.commit()
    logger.info(f"Deleted code {code_id}")
