"""Event domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models_event import EventRsvp, MobileClinicEvent
from ...schemas import GeoPoint
from ...shared.validators import to_naive_utc

EventType = Literal["mobile_clinic", "meds_pickup"]
RSVP_ANSWERS = ("yes", "no", "cancel")


class EventCreate(BaseModel):
    """Schema for scheduling an outreach event"""

    title: str
    description: str = ""
    type: EventType
    location: GeoPoint
    services: list[str] = []
    startsAt: datetime
    capacity: int = Field(ge=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Event title is required")
        return v

    @field_validator("startsAt")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[EventType] = None
    location: Optional[GeoPoint] = None
    services: Optional[list[str]] = None
    startsAt: Optional[datetime] = None
    capacity: Optional[int] = Field(default=None, ge=1)

    @field_validator("startsAt")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)


class RsvpRequest(BaseModel):
    """RSVP answer; older clients send `status`, newer ones `action`"""

    action: Optional[str] = None
    status: Optional[str] = None

    @model_validator(mode="after")
    def check_answer(self):
        answer = (self.action or self.status or "").strip().lower()
        if answer not in RSVP_ANSWERS:
            raise ValueError("RSVP must be one of: yes, no, cancel")
        self.action = answer
        return self

    @property
    def answer(self) -> str:
        return self.action


class RsvpResponse(BaseModel):
    patientId: int
    status: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, rsvp: EventRsvp) -> "RsvpResponse":
        return cls(patientId=rsvp.patient_id, status=rsvp.status, createdAt=rsvp.created_at)


class RsvpDetail(RsvpResponse):
    """RSVP entry with the contact details staff need to reach the patient"""

    name: Optional[str] = None
    phone: Optional[str] = None
    preferredLanguage: Optional[str] = None

    @classmethod
    def from_model(cls, rsvp: EventRsvp) -> "RsvpDetail":
        patient = rsvp.patient
        return cls(
            patientId=rsvp.patient_id,
            status=rsvp.status,
            createdAt=rsvp.created_at,
            name=patient.name if patient else None,
            phone=patient.phone if patient else None,
            preferredLanguage=patient.preferred_language if patient else None,
        )


class EventResponse(BaseModel):
    """Schema for event response"""

    id: int
    facilityId: int
    title: str
    description: str
    type: str
    location: Optional[GeoPoint] = None
    services: list[str]
    startsAt: datetime
    capacity: int
    rsvpCount: int
    rsvps: list[RsvpResponse]

    @classmethod
    def from_model(cls, event: MobileClinicEvent) -> "EventResponse":
        return cls(
            id=event.id,
            facilityId=event.facility_id,
            title=event.title,
            description=event.description or "",
            type=event.type,
            location=GeoPoint.from_columns(event.longitude, event.latitude),
            services=event.services or [],
            startsAt=event.starts_at,
            capacity=event.capacity,
            rsvpCount=len(event.rsvps),
            rsvps=[RsvpResponse.from_model(r) for r in event.rsvps],
        )


class EventDetailsResponse(EventResponse):
    rsvps: list[RsvpDetail]

    @classmethod
    def from_model(cls, event: MobileClinicEvent) -> "EventDetailsResponse":
        base = EventResponse.from_model(event).model_dump(exclude={"rsvps"})
        return cls(**base, rsvps=[RsvpDetail.from_model(r) for r in event.rsvps])


class PatientEventResponse(EventResponse):
    """Event as one patient sees it"""

    myRsvp: Optional[str] = None


class RsvpResultResponse(BaseModel):
    message: str
    event: EventResponse
