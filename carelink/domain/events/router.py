"""Event router - RSVP endpoints and event details"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import (
    ROLE_ADMIN,
    ROLE_FACILITY_ADMIN,
    ROLE_PROVIDER,
    AuthenticatedAccount,
    get_current_patient,
    require_roles,
)
from ...database import get_db
from ...models import Patient
from .schemas import EventDetailsResponse, EventResponse, RsvpRequest, RsvpResultResponse
from .service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Dependency injection for EventService"""
    return EventService(db)


# ============================================================================
# PUBLIC ENDPOINTS (No authentication required)
# ============================================================================


@router.post("/public/{event_id}/{patient_id}/rsvp", response_model=RsvpResultResponse)
async def public_rsvp(
    event_id: int,
    patient_id: int,
    data: RsvpRequest,
    service: EventService = Depends(get_event_service),
):
    """RSVP from a link sent to the patient"""
    event = service.rsvp(event_id, patient_id, data.answer)
    return RsvpResultResponse(message="RSVP updated", event=EventResponse.from_model(event))


# ============================================================================
# AUTHENTICATED ENDPOINTS
# ============================================================================


@router.post("/{event_id}/rsvp", response_model=RsvpResultResponse)
async def rsvp(
    event_id: int,
    data: RsvpRequest,
    patient: Patient = Depends(get_current_patient),
    service: EventService = Depends(get_event_service),
):
    event = service.rsvp(event_id, patient.id, data.answer)
    return RsvpResultResponse(message="RSVP updated", event=EventResponse.from_model(event))


@router.get("/{event_id}/details", response_model=EventDetailsResponse)
async def get_event_details(
    event_id: int,
    current: AuthenticatedAccount = Depends(require_roles(ROLE_PROVIDER, ROLE_FACILITY_ADMIN, ROLE_ADMIN)),
    service: EventService = Depends(get_event_service),
):
    """Event with each RSVP enriched with the patient's contact details"""
    return EventDetailsResponse.from_model(service.get_event_details(event_id))
