"""Event repository - Database operations for events and RSVPs"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ...models_event import EventRsvp, MobileClinicEvent


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def get_events(db: Session, facility_id: Optional[int] = None) -> list[MobileClinicEvent]:
        query = db.query(MobileClinicEvent).options(selectinload(MobileClinicEvent.rsvps))
        if facility_id is not None:
            query = query.filter(MobileClinicEvent.facility_id == facility_id)
        return query.order_by(MobileClinicEvent.starts_at.asc(), MobileClinicEvent.id.asc()).all()

    @staticmethod
    def get_event(db: Session, event_id: int, facility_id: Optional[int] = None) -> Optional[MobileClinicEvent]:
        query = db.query(MobileClinicEvent).filter(MobileClinicEvent.id == event_id)
        if facility_id is not None:
            query = query.filter(MobileClinicEvent.facility_id == facility_id)
        return query.first()

    @staticmethod
    def get_event_with_patients(db: Session, event_id: int) -> Optional[MobileClinicEvent]:
        return (
            db.query(MobileClinicEvent)
            .options(selectinload(MobileClinicEvent.rsvps).selectinload(EventRsvp.patient))
            .filter(MobileClinicEvent.id == event_id)
            .first()
        )

    @staticmethod
    def get_patient_events(db: Session, patient_id: int, upcoming_from: datetime) -> list[MobileClinicEvent]:
        """Events the patient RSVP'd to, plus every event still ahead"""
        rsvp_event_ids = db.query(EventRsvp.event_id).filter(EventRsvp.patient_id == patient_id)
        return (
            db.query(MobileClinicEvent)
            .options(selectinload(MobileClinicEvent.rsvps))
            .filter(
                or_(
                    MobileClinicEvent.id.in_(rsvp_event_ids),
                    MobileClinicEvent.starts_at >= upcoming_from,
                )
            )
            .order_by(MobileClinicEvent.starts_at.asc(), MobileClinicEvent.id.asc())
            .all()
        )

    @staticmethod
    def count_upcoming(db: Session, facility_id: int, now: datetime) -> int:
        return (
            db.query(func.count(MobileClinicEvent.id))
            .filter(MobileClinicEvent.facility_id == facility_id, MobileClinicEvent.starts_at >= now)
            .scalar()
            or 0
        )

    @staticmethod
    def create_event(db: Session, **event_data) -> MobileClinicEvent:
        event = MobileClinicEvent(**event_data)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_event(db: Session, event: MobileClinicEvent, **updates) -> MobileClinicEvent:
        for key, value in updates.items():
            if value is not None and hasattr(event, key):
                setattr(event, key, value)

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, event: MobileClinicEvent) -> None:
        db.delete(event)
        db.commit()

    # RSVP Methods
    @staticmethod
    def remove_rsvp(db: Session, event_id: int, patient_id: int) -> int:
        """Delete the patient's entry, if any. Does not commit."""
        return (
            db.query(EventRsvp)
            .filter(EventRsvp.event_id == event_id, EventRsvp.patient_id == patient_id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def add_rsvp(db: Session, event_id: int, patient_id: int) -> EventRsvp:
        """Stage a positive RSVP. Does not commit."""
        rsvp = EventRsvp(event_id=event_id, patient_id=patient_id, status="yes")
        db.add(rsvp)
        db.flush()
        return rsvp

    @staticmethod
    def count_rsvps(db: Session, event_id: int) -> int:
        return db.query(func.count(EventRsvp.id)).filter(EventRsvp.event_id == event_id).scalar() or 0

    @staticmethod
    def get_rsvp_totals(db: Session, facility_id: int) -> tuple[int, int, int]:
        """(event count, RSVP count, total capacity) for a facility"""
        events, capacity = (
            db.query(func.count(MobileClinicEvent.id), func.coalesce(func.sum(MobileClinicEvent.capacity), 0))
            .filter(MobileClinicEvent.facility_id == facility_id)
            .one()
        )
        rsvps = (
            db.query(func.count(EventRsvp.id))
            .join(MobileClinicEvent, EventRsvp.event_id == MobileClinicEvent.id)
            .filter(MobileClinicEvent.facility_id == facility_id)
            .scalar()
        )
        return events or 0, rsvps or 0, int(capacity or 0)
