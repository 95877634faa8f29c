"""Speciality directory schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Speciality
from ...schemas import GeoPoint


class SpecialityCreate(BaseModel):
    name: str
    description: str
    department: str
    services: list[str]
    referralContact: str
    notes: str
    location: Optional[GeoPoint] = None


class SpecialityUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    department: Optional[str] = None
    services: Optional[list[str]] = None
    referralContact: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[GeoPoint] = None


class SpecialityResponse(BaseModel):
    id: int
    name: str
    description: str
    department: str
    services: list[str]
    referralContact: str
    notes: str
    location: Optional[GeoPoint] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, speciality: Speciality) -> "SpecialityResponse":
        return cls(
            id=speciality.id,
            name=speciality.name,
            description=speciality.description,
            department=speciality.department,
            services=speciality.services or [],
            referralContact=speciality.referral_contact,
            notes=speciality.notes,
            location=GeoPoint.from_columns(speciality.longitude, speciality.latitude),
            createdAt=speciality.created_at,
            updatedAt=speciality.updated_at,
        )
