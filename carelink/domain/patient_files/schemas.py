"""Patient file schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models_patient_file import PatientFile, PatientFileAppointment
from ...shared.validators import to_naive_utc, validate_email, validate_phone

Gender = Literal["male", "female", "other", "prefer-not-to-say"]

REQUIRED_TEXT_FIELDS = (
    "identityNumber",
    "firstName",
    "lastName",
    "address",
    "city",
    "province",
    "zipCode",
    "emergencyName",
    "emergencyRelationship",
    "allergies",
    "medications",
    "medicalConditions",
    "previousSurgeries",
    "familyHistory",
)


class PatientFileCreate(BaseModel):
    """Schema for opening a patient file"""

    # Personal information
    firstName: str
    middleName: Optional[str] = None
    lastName: str
    dateOfBirth: date
    gender: Gender
    identityNumber: str
    preferredLanguage: Optional[str] = None

    # Contact information
    phone: str
    email: Optional[str] = None
    address: str
    city: str
    province: str
    zipCode: str

    # Emergency contact
    emergencyName: str
    emergencyRelationship: str
    emergencyPhone: str
    emergencyAddress: Optional[str] = None

    # Insurance
    insuranceProvider: Optional[str] = None
    policyNumber: Optional[str] = None
    groupNumber: Optional[str] = None
    subscriberName: Optional[str] = None

    # Medical history
    allergies: str
    medications: str
    medicalConditions: str
    previousSurgeries: str
    familyHistory: str

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def require_text(cls, v, info):
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("phone", "emergencyPhone")
    @classmethod
    def validate_phone_fields(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("dateOfBirth")
    @classmethod
    def validate_date_of_birth(cls, v):
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class PatientFileAppointmentCreate(BaseModel):
    hospital: str
    doctor: str
    date: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("hospital", "doctor")
    @classmethod
    def require_text(cls, v, info):
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("date")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)


class PatientFileAppointmentResponse(BaseModel):
    id: int
    hospital: str
    doctor: str
    date: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_model(cls, appointment: PatientFileAppointment) -> "PatientFileAppointmentResponse":
        return cls(
            id=appointment.id,
            hospital=appointment.hospital,
            doctor=appointment.doctor,
            date=appointment.date,
            reason=appointment.reason,
            notes=appointment.notes,
        )


class PatientFileResponse(BaseModel):
    """Schema for patient file response"""

    id: int
    identityNumber: str
    firstName: str
    middleName: Optional[str] = None
    lastName: str
    dateOfBirth: date
    gender: str
    preferredLanguage: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: str
    city: str
    province: str
    zipCode: str
    emergencyName: str
    emergencyRelationship: str
    emergencyPhone: str
    emergencyAddress: Optional[str] = None
    insuranceProvider: Optional[str] = None
    policyNumber: Optional[str] = None
    groupNumber: Optional[str] = None
    subscriberName: Optional[str] = None
    allergies: str
    medications: str
    medicalConditions: str
    previousSurgeries: str
    familyHistory: str
    createdAt: Optional[datetime] = None
    appointments: list[PatientFileAppointmentResponse] = []

    @classmethod
    def from_model(cls, patient_file: PatientFile) -> "PatientFileResponse":
        return cls(
            id=patient_file.id,
            identityNumber=patient_file.identity_number,
            firstName=patient_file.first_name,
            middleName=patient_file.middle_name,
            lastName=patient_file.last_name,
            dateOfBirth=patient_file.date_of_birth,
            gender=patient_file.gender,
            preferredLanguage=patient_file.preferred_language,
            phone=patient_file.phone,
            email=patient_file.email,
            address=patient_file.address,
            city=patient_file.city,
            province=patient_file.province,
            zipCode=patient_file.zip_code,
            emergencyName=patient_file.emergency_name,
            emergencyRelationship=patient_file.emergency_relationship,
            emergencyPhone=patient_file.emergency_phone,
            emergencyAddress=patient_file.emergency_address,
            insuranceProvider=patient_file.insurance_provider,
            policyNumber=patient_file.policy_number,
            groupNumber=patient_file.group_number,
            subscriberName=patient_file.subscriber_name,
            allergies=patient_file.allergies,
            medications=patient_file.medications,
            medicalConditions=patient_file.medical_conditions,
            previousSurgeries=patient_file.previous_surgeries,
            familyHistory=patient_file.family_history,
            createdAt=patient_file.created_at,
            appointments=[PatientFileAppointmentResponse.from_model(a) for a in patient_file.appointments],
        )
