# services/school_locator/schemas/schools.py

from pydantic import BaseModel, ConfigDict

NAME_MAX_LENGTH = 255


class SchoolCreate(BaseModel):
    name: str
    address: str
    latitude: float
    longitude: float


class SchoolCreated(BaseModel):
    message: str
    schoolId: int


class SchoolOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    latitude: float
    longitude: float


class ReferencePoint(BaseModel):
    latitude: float
    longitude: float
