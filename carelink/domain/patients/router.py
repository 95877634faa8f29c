"""Patient router - the patient's own dashboard, appointments and notifications"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_patient
from ...database import get_db
from ...models import Patient
from ...rate_limiter import rate_limit_login
from ...schemas import MessageResponse
from ..auth.schemas import PatientLoginRequest
from ..auth.service import AuthService
from ..events.schemas import PatientEventResponse
from ..events.service import EventService
from ..referrals.schemas import ReferralDetailResponse, ReferralResponse
from ..referrals.service import ReferralService
from .schemas import (
    AppointmentResponse,
    NotificationResponse,
    PatientLoginResponse,
    PatientResponse,
    RescheduleAppointmentRequest,
)
from .service import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patient", tags=["Patient"])


def get_patient_service(db: Session = Depends(get_db)) -> PatientService:
    """Dependency injection for PatientService"""
    return PatientService(db)


def get_referral_service(db: Session = Depends(get_db)) -> ReferralService:
    return ReferralService(db)


@router.post("/login", response_model=PatientLoginResponse)
async def login(
    data: PatientLoginRequest,
    _: None = Depends(rate_limit_login),
    db: Session = Depends(get_db),
):
    """Log in with phone number and password"""
    token, patient = AuthService(db).login_patient(data.phone, data.password)
    return PatientLoginResponse(token=token, patient=PatientResponse.from_model(patient))


@router.get("/profile", response_model=PatientResponse)
async def get_profile(patient: Patient = Depends(get_current_patient)):
    return PatientResponse.from_model(patient)


@router.get("/appointments", response_model=list[AppointmentResponse])
async def get_appointments(
    patient: Patient = Depends(get_current_patient),
    service: PatientService = Depends(get_patient_service),
):
    """Every referral of the patient as a flat appointment view"""
    return service.get_appointments(patient)


@router.get("/referrals", response_model=list[ReferralDetailResponse])
async def get_referrals(
    patient: Patient = Depends(get_current_patient),
    service: PatientService = Depends(get_patient_service),
):
    return service.get_referrals(patient)


@router.get("/events", response_model=list[PatientEventResponse])
async def get_events(
    patient: Patient = Depends(get_current_patient),
    db: Session = Depends(get_db),
):
    """Upcoming events plus any event the patient has RSVP'd to"""
    events = EventService(db).get_patient_events(patient.id)
    responses = []
    for event in events:
        response = PatientEventResponse.from_model(event)
        response.myRsvp = next((r.status for r in event.rsvps if r.patient_id == patient.id), None)
        responses.append(response)
    return responses


@router.post("/appointments/{referral_id}/cancel", response_model=ReferralResponse)
async def cancel_appointment(
    referral_id: int,
    patient: Patient = Depends(get_current_patient),
    service: ReferralService = Depends(get_referral_service),
):
    """Cancel one of the patient's own appointments"""
    return ReferralResponse.from_model(service.cancel_referral(referral_id, patient_id=patient.id))


@router.post("/appointments/{referral_id}/reschedule", response_model=ReferralResponse)
async def reschedule_appointment(
    referral_id: int,
    data: RescheduleAppointmentRequest,
    patient: Patient = Depends(get_current_patient),
    service: ReferralService = Depends(get_referral_service),
):
    """Move one of the patient's appointments to another open slot"""
    referral = service.reschedule_referral(referral_id, data.newSlotId, patient_id=patient.id)
    return ReferralResponse.from_model(referral)


@router.get("/notifications", response_model=list[NotificationResponse])
async def get_notifications(
    patient: Patient = Depends(get_current_patient),
    service: PatientService = Depends(get_patient_service),
):
    return [NotificationResponse.from_model(n) for n in service.get_notifications(patient)]


@router.post("/notifications/clear", response_model=MessageResponse)
async def clear_notifications(
    patient: Patient = Depends(get_current_patient),
    service: PatientService = Depends(get_patient_service),
):
    return service.clear_notifications(patient)


@router.get("/reminders", response_model=list[AppointmentResponse])
async def get_reminders(
    patient: Patient = Depends(get_current_patient),
    service: PatientService = Depends(get_patient_service),
):
    """Active appointments starting within the reminder window"""
    return service.get_reminders(patient)
