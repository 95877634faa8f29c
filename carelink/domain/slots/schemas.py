"""Slot domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models import Slot
from ...shared.validators import to_naive_utc

SlotStatus = Literal["open", "held", "booked", "closed"]


class SlotCreate(BaseModel):
    """Schema for publishing a new slot"""

    startAt: datetime
    endAt: datetime
    status: SlotStatus = "open"
    # Facility admins pick the department; providers always use their own
    departmentId: Optional[int] = None

    @field_validator("startAt", "endAt")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.endAt <= self.startAt:
            raise ValueError("endAt must be after startAt")
        return self


class SlotUpdate(BaseModel):
    """Schema for editing a slot's time window or status"""

    startAt: Optional[datetime] = None
    endAt: Optional[datetime] = None
    status: Optional[SlotStatus] = None

    @field_validator("startAt", "endAt")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)


class SlotStatusUpdate(BaseModel):
    status: SlotStatus


class SlotBookRequest(BaseModel):
    slot_id: int


class SlotResponse(BaseModel):
    """Schema for slot response"""

    id: int
    departmentId: int
    startAt: datetime
    endAt: datetime
    status: str

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, slot: Slot) -> "SlotResponse":
        return cls(
            id=slot.id,
            departmentId=slot.department_id,
            startAt=slot.start_at,
            endAt=slot.end_at,
            status=slot.status,
        )


class ProviderSlotsResponse(BaseModel):
    """Slots of the department a provider works in"""

    facilityId: int
    departmentId: int
    department: str
    slots: list[SlotResponse]
