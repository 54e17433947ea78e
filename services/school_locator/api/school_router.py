# services/school_locator/api/school_router.py
import json
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from services.school_locator.controllers.school_service import create_school, list_schools_by_distance
from services.school_locator.schemas.schools import SchoolCreated, SchoolOut
from services.school_locator.validation import parse_reference_point, validate_new_school
from shared.db import get_db
from shared.errors import ParseError

router = APIRouter(tags=["Schools"])


async def _read_json(request: Request):
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise ParseError("Request body must be valid JSON")


# --- ADD SCHOOL ---
@router.post("/addSchool", response_model=SchoolCreated)
async def add_school(request: Request, db: AsyncSession = Depends(get_db)):
    payload = validate_new_school(await _read_json(request))
    school_id = await create_school(payload, db)
    return SchoolCreated(message="School added successfully", schoolId=school_id)


# --- LIST SCHOOLS BY DISTANCE ---
#  /listSchools?latitude=12.97&longitude=77.59
@router.get("/listSchools", response_model=List[SchoolOut])
async def list_schools(
    latitude: Optional[str] = Query(None, description="Reference latitude"),
    longitude: Optional[str] = Query(None, description="Reference longitude"),
    db: AsyncSession = Depends(get_db),
):
    point = parse_reference_point(latitude, longitude)
    return await list_schools_by_distance(point, db)
