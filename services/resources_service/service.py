import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import BadRequestError, ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.resources_service.models import Resource, ResourceAudience, ResourceType
from services.resources_service.schemas import ResourceCreate, ResourceUpdate

logger = get_logger(__name__)

ENTITY_TYPE = "Resource"


def validate_source(
    resource_type: ResourceType,
    content: Optional[str],
    file_url: Optional[str],
    external_url: Optional[str],
) -> None:
    """
    Every resource must point at something to show:
    an ARTICLE needs content, a LINK an external_url, and a VIDEO or
    DOCUMENT either a file_url or an external_url.
    """
    if resource_type == ResourceType.ARTICLE and not content:
        raise BadRequestError("Articles require content")
    if resource_type == ResourceType.LINK and not external_url:
        raise BadRequestError("Links require an external URL")
    if resource_type in (ResourceType.VIDEO, ResourceType.DOCUMENT) and not (
        file_url or external_url
    ):
        raise BadRequestError(
            f"{resource_type.value.capitalize()} resources require a file or external URL"
        )


async def list_resources(
    db: AsyncSession,
    params: PaginationParams,
    target_audience: Optional[ResourceAudience] = None,
    resource_type: Optional[ResourceType] = None,
) -> Tuple[List[Resource], PageMeta]:
    query = select(Resource)
    if target_audience:
        query = query.where(Resource.target_audience == target_audience)
    if resource_type:
        query = query.where(Resource.type == resource_type)
    query = query.order_by(Resource.created_at.desc())
    return await paginate(db, query, params)


async def get_resource_or_404(db: AsyncSession, resource_id: uuid.UUID) -> Resource:
    resource = await db.get(Resource, resource_id)
    if not resource:
        raise NotFoundError("Resource not found", ErrorCode.RESOURCE_NOT_FOUND)
    return resource


async def create_resource(
    db: AsyncSession, payload: ResourceCreate, actor_id: uuid.UUID
) -> Resource:
    validate_source(payload.type, payload.content, payload.file_url, payload.external_url)

    resource = Resource(id=uuid.uuid4(), **payload.model_dump())
    db.add(resource)
    record_audit(
        db,
        actor_id,
        "CREATE_RESOURCE",
        ENTITY_TYPE,
        resource.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(resource)
    logger.info(f"Created {resource.type.value} resource {resource.title}")
    return resource


async def update_resource(
    db: AsyncSession,
    resource_id: uuid.UUID,
    payload: ResourceUpdate,
    actor_id: uuid.UUID,
) -> Resource:
    resource = await get_resource_or_404(db, resource_id)
    update_data = payload.model_dump(exclude_unset=True)

    validate_source(
        update_data.get("type") or resource.type,
        update_data.get("content", resource.content),
        update_data.get("file_url", resource.file_url),
        update_data.get("external_url", resource.external_url),
    )

    for field, value in update_data.items():
        setattr(resource, field, value)

    record_audit(
        db,
        actor_id,
        "UPDATE_RESOURCE",
        ENTITY_TYPE,
        resource.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(resource)
    logger.info(f"Updated resource {resource.id}")
    return resource


async def delete_resource(
    db: AsyncSession, resource_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    resource = await get_resource_or_404(db, resource_id)
    await db.delete(resource)
    record_audit(db, actor_id, "DELETE_RESOURCE", ENTITY_TYPE, resource_id)
    await db.commit()
    logger.info(f"Deleted resource {resource_id}")
