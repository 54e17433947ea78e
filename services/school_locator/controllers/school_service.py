# services/school_locator/controllers/school_service.py

import logging
from typing import List

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.school_locator.models.schools import School
from services.school_locator.schemas.schools import ReferencePoint, SchoolCreate
from shared.errors import StorageError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def distance_km(point: ReferencePoint):
    """
    SQL expression for the great-circle distance between ``point`` and each row,
    using the spherical law of cosines on a sphere of radius 6371 km.
    """
    lat = func.radians(point.latitude)
    lng = func.radians(point.longitude)
    cos_angle = (
        func.cos(lat) * func.cos(func.radians(School.latitude))
        * func.cos(func.radians(School.longitude) - lng)
        + func.sin(lat) * func.sin(func.radians(School.latitude))
    )
    # Rounding can push coincident points just past 1.0
    clamped = case((cos_angle > 1.0, 1.0), (cos_angle < -1.0, -1.0), else_=cos_angle)
    return EARTH_RADIUS_KM * func.acos(clamped)


async def create_school(payload: SchoolCreate, db: AsyncSession) -> int:
    new_school = School(
        name=payload.name,
        address=payload.address,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    db.add(new_school)
    try:
        await db.commit()
        await db.refresh(new_school)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error adding school")
        raise StorageError("Failed to insert school") from exc

    logger.info("School %s added", new_school.id)
    return new_school.id


async def list_schools_by_distance(point: ReferencePoint, db: AsyncSession) -> List[School]:
    # id breaks distance ties so repeated calls return the same order
    stmt = select(School).order_by(distance_km(point), School.id)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching schools")
        raise StorageError("Failed to list schools") from exc
    return list(result.scalars().all())
