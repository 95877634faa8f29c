"""Facility domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models import Department, Facility
from ...schemas import GeoPoint
from ..slots.schemas import SlotResponse

FacilityType = Literal["hospital", "clinic", "mobile"]


class DepartmentCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Department name is required")
        return v


class DepartmentUpdate(DepartmentCreate):
    pass


class FacilityCreate(BaseModel):
    """Schema for registering a facility"""

    name: str
    type: FacilityType
    location: GeoPoint
    departments: list[DepartmentCreate] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Facility name is required")
        return v

    @field_validator("departments")
    @classmethod
    def validate_unique_departments(cls, v):
        names = [d.name.lower() for d in v]
        if len(names) != len(set(names)):
            raise ValueError("Department names must be unique within a facility")
        return v


class DepartmentResponse(BaseModel):
    id: int
    facilityId: int
    name: str
    slots: Optional[list[SlotResponse]] = None

    @classmethod
    def from_model(cls, department: Department, include_slots: bool = False) -> "DepartmentResponse":
        return cls(
            id=department.id,
            facilityId=department.facility_id,
            name=department.name,
            slots=[SlotResponse.from_model(s) for s in department.slots] if include_slots else None,
        )


class FacilityResponse(BaseModel):
    """Schema for facility response"""

    id: int
    name: str
    type: str
    location: Optional[GeoPoint] = None
    departments: list[DepartmentResponse] = []

    @classmethod
    def from_model(cls, facility: Facility, include_slots: bool = False) -> "FacilityResponse":
        return cls(
            id=facility.id,
            name=facility.name,
            type=facility.type,
            location=GeoPoint.from_columns(facility.longitude, facility.latitude),
            departments=[
                DepartmentResponse.from_model(d, include_slots=include_slots)
                for d in facility.departments
            ],
        )


class FacilitySummary(BaseModel):
    id: int
    name: str
