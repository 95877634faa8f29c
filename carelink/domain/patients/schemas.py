"""Patient domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Patient, PatientNotification
from ...shared.validators import validate_email, validate_phone
from ..facilities.schemas import FacilitySummary
from ..referrals.schemas import ReferralResponse
from ..slots.schemas import SlotResponse

MIN_PASSWORD_LENGTH = 8


def _check_password(v):
    if v is not None and len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


class PatientCreate(BaseModel):
    """Schema for registering a patient"""

    phone: str
    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    preferredLanguage: str = "en"
    consented: bool = False
    password: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class PatientUpdate(BaseModel):
    phone: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    preferredLanguage: Optional[str] = None
    consented: Optional[bool] = None
    password: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class PatientResponse(BaseModel):
    """Schema for patient response"""

    id: int
    phone: str
    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    preferredLanguage: str
    consented: bool
    facilityId: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            phone=patient.phone,
            name=patient.name,
            surname=patient.surname,
            email=patient.email,
            preferredLanguage=patient.preferred_language,
            consented=patient.consented,
            facilityId=patient.facility_id,
            createdAt=patient.created_at,
        )


class PatientLoginResponse(BaseModel):
    token: str
    patient: PatientResponse


class RescheduleAppointmentRequest(BaseModel):
    newSlotId: int


class ProviderSummary(BaseModel):
    id: int
    name: str
    role: str


class AppointmentResponse(BaseModel):
    """Flat dashboard view of one referral"""

    id: int
    date: Optional[datetime] = None
    end: Optional[datetime] = None
    status: str
    slot: Optional[SlotResponse] = None
    referral: ReferralResponse
    provider: Optional[ProviderSummary] = None
    department: Optional[str] = None
    facility: Optional[FacilitySummary] = None


class NotificationResponse(BaseModel):
    id: int
    message: str
    sentAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, notification: PatientNotification) -> "NotificationResponse":
        return cls(id=notification.id, message=notification.message, sentAt=notification.sent_at)
