"""
Outreach event models (mobile clinics, medication pickups) and their RSVPs
"""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

EVENT_TYPES = ("mobile_clinic", "meds_pickup")


class MobileClinicEvent(Base):
    """Facility-hosted outreach event patients can RSVP to"""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="", nullable=False)
    type = Column(String(20), nullable=False)  # mobile_clinic, meds_pickup
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    services = Column(JSON, default=list, nullable=False)
    starts_at = Column(DateTime, nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    facility = relationship("Facility")
    rsvps = relationship(
        "EventRsvp",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventRsvp.id",
    )


class EventRsvp(Base):
    """One patient's attendance confirmation; only positive answers are stored"""

    __tablename__ = "event_rsvps"
    __table_args__ = (UniqueConstraint("event_id", "patient_id", name="uq_event_rsvp_patient"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    status = Column(String(10), default="yes", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    event = relationship("MobileClinicEvent", back_populates="rsvps")
    patient = relationship("Patient")
