"""Facility admin schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import FacilityAdmin
from ...shared.validators import validate_email
from ..facilities.schemas import FacilityResponse

MIN_PASSWORD_LENGTH = 8


class FacilityAdminCreate(BaseModel):
    name: str
    email: str
    password: str
    facilityId: int

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class FacilityAdminResponse(BaseModel):
    id: int
    name: str
    email: str
    facilityId: int
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, facility_admin: FacilityAdmin) -> "FacilityAdminResponse":
        return cls(
            id=facility_admin.id,
            name=facility_admin.name,
            email=facility_admin.email,
            facilityId=facility_admin.facility_id,
            createdAt=facility_admin.created_at,
        )


class FacilityAdminLoginResponse(BaseModel):
    token: str
    facilityAdmin: FacilityAdminResponse


class FacilityAdminProfileResponse(FacilityAdminResponse):
    facility: Optional[FacilityResponse] = None


class FacilityAnalyticsResponse(BaseModel):
    totalPatients: int
    activeSlots: int
    upcomingEvents: int
    providers: int
    departments: int
