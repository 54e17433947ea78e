# services/school_locator/validation.py
"""
Input checks for the school endpoints.

Everything here is pure: raw request data in, a typed schema or an
InvalidRequest subclass out. Nothing touches the database.
"""

import math
import re
from typing import Any, Optional

from services.school_locator.schemas.schools import NAME_MAX_LENGTH, ReferencePoint, SchoolCreate
from shared.errors import MissingField, OutOfRange, ParseError, TypeMismatch

TEXT_FIELDS = ("name", "address")
COORDINATE_FIELDS = ("latitude", "longitude")

# Plain decimal literal: sign, digits, optional fraction, optional exponent.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _is_blank_text(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def validate_new_school(body: Any) -> SchoolCreate:
    if not isinstance(body, dict):
        body = {}

    # Blank text counts as missing; a present non-numeric coordinate is a type error.
    text_missing = any(_is_blank_text(body.get(name)) for name in TEXT_FIELDS)
    coords_missing = any(body.get(name) is None for name in COORDINATE_FIELDS)
    if text_missing or coords_missing:
        raise MissingField("All fields (name, address, latitude, longitude) are required")

    name, address = body["name"], body["address"]
    latitude, longitude = body["latitude"], body["longitude"]

    if not isinstance(name, str) or not isinstance(address, str):
        raise TypeMismatch("Name and address must be strings")
    if not _is_number(latitude) or not _is_number(longitude):
        raise TypeMismatch("Latitude and longitude must be numbers")

    if not -90 <= latitude <= 90:
        raise OutOfRange("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise OutOfRange("Longitude must be between -180 and 180")
    if len(name) > NAME_MAX_LENGTH or len(address) > NAME_MAX_LENGTH:
        raise OutOfRange(f"Name and address must be at most {NAME_MAX_LENGTH} characters")

    return SchoolCreate(
        name=name,
        address=address,
        latitude=float(latitude),
        longitude=float(longitude),
    )


def parse_coordinate(raw: str) -> Optional[float]:
    """Strictly parse a query-string coordinate; None if it isn't a finite decimal."""
    if not _DECIMAL_RE.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


def parse_reference_point(latitude: Optional[str], longitude: Optional[str]) -> ReferencePoint:
    # No range check: the reference point is never stored.
    if not latitude or not longitude:
        raise MissingField("Latitude and longitude are required")

    lat = parse_coordinate(latitude)
    lng = parse_coordinate(longitude)
    if lat is None or lng is None:
        raise ParseError("Latitude and longitude must be numbers")

    return ReferencePoint(latitude=lat, longitude=lng)
