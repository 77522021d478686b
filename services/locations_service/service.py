import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import ErrorCode, NotFoundError
from libs.common.logging import get_logger
from services.audit_service.service import record_audit
from services.locations_service.models import Location
from services.locations_service.schemas import LocationCreate, LocationUpdate

logger = get_logger(__name__)

ENTITY_TYPE = "Location"

MAPS_URL = "https://www.google.com/maps?q={lat},{lng}"


def derive_place_url(
    latitude: Optional[float], longitude: Optional[float]
) -> Optional[str]:
    """Google Maps link for a coordinate pair, or None when either is missing."""
    if latitude is None or longitude is None:
        return None
    return MAPS_URL.format(lat=latitude, lng=longitude)


async def list_locations(db: AsyncSession) -> List[Location]:
    result = await db.execute(select(Location).order_by(Location.name.asc()))
    return list(result.scalars().all())


async def get_location_or_404(db: AsyncSession, location_id: uuid.UUID) -> Location:
    location = await db.get(Location, location_id)
    if not location:
        raise NotFoundError("Location not found", ErrorCode.LOCATION_NOT_FOUND)
    return location


async def create_location(
    db: AsyncSession, payload: LocationCreate, actor_id: uuid.UUID
) -> Location:
    data = payload.model_dump()
    if not data.get("place_url"):
        data["place_url"] = derive_place_url(data["latitude"], data["longitude"])

    location = Location(id=uuid.uuid4(), **data)
    db.add(location)
    record_audit(
        db,
        actor_id,
        "CREATE_LOCATION",
        ENTITY_TYPE,
        location.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(location)
    logger.info(f"Created location {location.name}")
    return location


async def update_location(
    db: AsyncSession, location_id: uuid.UUID, payload: LocationUpdate, actor_id: uuid.UUID
) -> Location:
    location = await get_location_or_404(db, location_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(location, field, value)

    coords_changed = "latitude" in update_data or "longitude" in update_data
    if not update_data.get("place_url") and (coords_changed or not location.place_url):
        derived = derive_place_url(location.latitude, location.longitude)
        if derived:
            location.place_url = derived

    record_audit(
        db,
        actor_id,
        "UPDATE_LOCATION",
        ENTITY_TYPE,
        location.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(location)
    logger.info(f"Updated location {location.id}")
    return location


async def delete_location(
    db: AsyncSession, location_id: uuid.UUID, actor_id: uuid.UUID
) -> None:
    location = await get_location_or_404(db, location_id)
    await db.delete(location)
    record_audit(db, actor_id, "DELETE_LOCATION", ENTITY_TYPE, location_id)
    await db.commit()
    logger.info(f"Deleted location {location_id}")
