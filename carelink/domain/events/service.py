"""Event service - Outreach events and the RSVP state machine"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models_event import MobileClinicEvent
from ..patients.repository import PatientRepository
from .repository import EventRepository
from .schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository()
        self.patient_repo = PatientRepository()

    def get_events(self, facility_id: int) -> list[MobileClinicEvent]:
        return self.repo.get_events(self.db, facility_id)

    def get_event(self, event_id: int, facility_id: Optional[int] = None) -> MobileClinicEvent:
        event = self.repo.get_event(self.db, event_id, facility_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def get_event_details(self, event_id: int) -> MobileClinicEvent:
        event = self.repo.get_event_with_patients(self.db, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def get_patient_events(self, patient_id: int, now: Optional[datetime] = None) -> list[MobileClinicEvent]:
        return self.repo.get_patient_events(self.db, patient_id, now or datetime.utcnow())

    def create_event(self, facility_id: int, data: EventCreate) -> MobileClinicEvent:
        event = self.repo.create_event(
            self.db,
            facility_id=facility_id,
            title=data.title,
            description=data.description,
            type=data.type,
            longitude=data.location.longitude,
            latitude=data.location.latitude,
            services=data.services,
            starts_at=data.startsAt,
            capacity=data.capacity,
        )
        logger.info(f"📣 Event {event.id} ({event.type}) created for facility {facility_id}")
        return event

    def update_event(self, event_id: int, facility_id: int, data: EventUpdate) -> MobileClinicEvent:
        event = self.get_event(event_id, facility_id)

        if data.capacity is not None and data.capacity < len(event.rsvps):
            raise HTTPException(
                status_code=409,
                detail=f"Capacity cannot be lower than the {len(event.rsvps)} confirmed RSVPs",
            )

        updates = {
            "title": data.title,
            "description": data.description,
            "type": data.type,
            "services": data.services,
            "starts_at": data.startsAt,
            "capacity": data.capacity,
        }
        if data.location is not None:
            updates["longitude"] = data.location.longitude
            updates["latitude"] = data.location.latitude

        return self.repo.update_event(self.db, event, **updates)

    def delete_event(self, event_id: int, facility_id: int) -> dict:
        event = self.get_event(event_id, facility_id)
        self.repo.delete_event(self.db, event)
        logger.info(f"🗑️ Event {event_id} deleted")
        return {"message": "Event deleted"}

    def rsvp(self, event_id: int, patient_id: int, answer: str) -> MobileClinicEvent:
        """
        Record a patient's RSVP.

        Any previous entry of the patient is removed first; a fresh entry is
        added only for "yes". Repeating a request therefore leaves the same
        state, and an event never holds two entries for one patient.

        Raises:
            HTTPException 404: unknown event or patient
            HTTPException 409: "yes" for an event already at capacity
        """
        event = self.get_event(event_id)
        if not self.patient_repo.get_patient(self.db, patient_id):
            raise HTTPException(status_code=404, detail="Patient not found")

        self.repo.remove_rsvp(self.db, event.id, patient_id)

        if answer == "yes":
            if self.repo.count_rsvps(self.db, event.id) >= event.capacity:
                self.db.rollback()
                logger.warning(f"⚠️ Event {event.id} full, RSVP from patient {patient_id} rejected")
                raise HTTPException(status_code=409, detail="Event is full")
            try:
                self.repo.add_rsvp(self.db, event.id, patient_id)
            except IntegrityError:
                # A concurrent "yes" from the same patient got in first; same end state
                self.db.rollback()
                logger.info(f"Duplicate RSVP for event {event.id} by patient {patient_id} ignored")
                self.db.refresh(event)
                return event

        self.db.commit()
        self.db.refresh(event)
        logger.info(f"🙋 Patient {patient_id} RSVP '{answer}' for event {event.id}")
        return event
