"""Referral domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Referral
from ..slots.schemas import SlotResponse


class ReferralCreate(BaseModel):
    """Schema for booking a referral into an open slot"""

    fromFacilityId: int
    toDepartmentId: int
    patientId: int
    slotId: int
    reason: Optional[str] = None


class ReferralUpdate(BaseModel):
    """Provider edit: new reason and/or a different slot in the same department"""

    reason: Optional[str] = None
    slotId: Optional[int] = None


class ReferralResponse(BaseModel):
    """Schema for referral response"""

    id: int
    fromFacilityId: int
    toDepartmentId: int
    patientId: int
    slotId: Optional[int] = None
    status: str
    reason: Optional[str] = None
    version: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, referral: Referral) -> "ReferralResponse":
        return cls(
            id=referral.id,
            fromFacilityId=referral.from_facility_id,
            toDepartmentId=referral.to_department_id,
            patientId=referral.patient_id,
            slotId=referral.slot_id,
            status=referral.status,
            reason=referral.reason,
            version=referral.version,
            createdAt=referral.created_at,
            updatedAt=referral.updated_at,
        )


class MonthlyReferralCount(BaseModel):
    month: str  # YYYY-MM
    total: int = 0
    booked: int = 0
    confirmed: int = 0
    cancelled: int = 0


class ReferralAnalyticsResponse(BaseModel):
    statusCounts: dict[str, int]
    monthly: list[MonthlyReferralCount]


class ReferralPatientSummary(BaseModel):
    id: int
    name: Optional[str] = None
    surname: Optional[str] = None
    phone: str
    preferredLanguage: str
    consented: bool


class ReferralDetailResponse(ReferralResponse):
    """Referral with the names a list view displays"""

    fromFacilityName: Optional[str] = None
    toDepartmentName: Optional[str] = None
    slot: Optional[SlotResponse] = None
    patient: Optional[ReferralPatientSummary] = None

    @classmethod
    def from_model(cls, referral: Referral, include_patient: bool = True) -> "ReferralDetailResponse":
        patient = referral.patient if include_patient else None
        return cls(
            **ReferralResponse.from_model(referral).model_dump(),
            fromFacilityName=referral.from_facility.name if referral.from_facility else None,
            toDepartmentName=referral.to_department.name if referral.to_department else None,
            slot=SlotResponse.from_model(referral.slot) if referral.slot else None,
            patient=ReferralPatientSummary(
                id=patient.id,
                name=patient.name,
                surname=patient.surname,
                phone=patient.phone,
                preferredLanguage=patient.preferred_language,
                consented=patient.consented,
            )
            if patient
            else None,
        )
