from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

FACILITY_TYPES = ("hospital", "clinic", "mobile")
SLOT_STATUSES = ("open", "held", "booked", "closed")
REFERRAL_STATUSES = ("booked", "confirmed", "cancelled")
# Referral states that hold on to their slot
ACTIVE_REFERRAL_STATUSES = ("booked", "confirmed")
PROVIDER_ROLES = ("doctor", "nurse", "admin", "coordinator")
PROVIDER_PERMISSIONS = ("create_referrals", "manage_slots", "view_analytics", "manage_events")


class Facility(Base):
    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # hospital, clinic, mobile
    # GeoJSON point, stored flat
    longitude = Column(Float, nullable=True)
    latitude = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    departments = relationship(
        "Department",
        back_populates="facility",
        cascade="all, delete-orphan",
        order_by="Department.id",
    )


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = (UniqueConstraint("facility_id", "name", name="uq_department_facility_name"),)

    id = Column(Integer, primary_key=True, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    facility = relationship("Facility", back_populates="departments")
    slots = relationship(
        "Slot",
        back_populates="department",
        cascade="all, delete-orphan",
        order_by="Slot.start_at",
    )
    providers = relationship("Provider", back_populates="department")


class Slot(Base):
    """A bookable time window owned by a department"""

    __tablename__ = "slots"

    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    start_at = Column(DateTime, nullable=False, index=True)
    end_at = Column(DateTime, nullable=False)
    # Status workflow: open → held/booked/closed; cancelling a referral frees it back to open
    status = Column(String(20), default="open", nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    department = relationship("Department", back_populates="slots")

    __mapper_args__ = {"version_id_col": version}


class Referral(Base):
    """A patient's booking record: origin facility, destination department and claimed slot"""

    __tablename__ = "referrals"

    id = Column(Integer, primary_key=True, index=True)
    from_facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    to_department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    slot_id = Column(Integer, ForeignKey("slots.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(String(20), default="booked", nullable=False, index=True)
    reason = Column(Text, nullable=True)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    from_facility = relationship("Facility")
    to_department = relationship("Department")
    patient = relationship("Patient", back_populates="referrals")
    slot = relationship("Slot")

    __mapper_args__ = {"version_id_col": version}


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(20), unique=True, index=True, nullable=False)  # E.164
    name = Column(String(255), nullable=True)
    surname = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    preferred_language = Column(String(10), default="en", nullable=False)
    consented = Column(Boolean, default=False, nullable=False)
    # Facility that registered the patient (facility admin scope)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)  # No password = cannot log in
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    notifications = relationship(
        "PatientNotification",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="PatientNotification.sent_at",
    )
    referrals = relationship("Referral", back_populates="patient")


class PatientNotification(Base):
    __tablename__ = "patient_notifications"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    sent_at = Column(DateTime, server_default=func.now(), nullable=False)

    patient = relationship("Patient", back_populates="notifications")


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)  # Stored lower-case
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    role = Column(String(20), nullable=False)  # doctor, nurse, admin, coordinator
    permissions = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    facility = relationship("Facility")
    department = relationship("Department", back_populates="providers")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(50), default="super_admin", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class FacilityAdmin(Base):
    __tablename__ = "facility_admins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    facility = relationship("Facility")


class Speciality(Base):
    __tablename__ = "specialities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    department = Column(String(255), nullable=False)
    services = Column(JSON, default=list, nullable=False)
    referral_contact = Column(String(255), nullable=False)
    notes = Column(Text, nullable=False)
    longitude = Column(Float, nullable=True)
    latitude = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
