"""
Hospital intake records (patient files) and the appointments noted on them
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

GENDERS = ("male", "female", "other", "prefer-not-to-say")


class PatientFile(Base):
    """Demographics, contacts, insurance and medical history for one person"""

    __tablename__ = "patient_files"

    id = Column(Integer, primary_key=True, index=True)
    identity_number = Column(String(50), unique=True, nullable=False, index=True)

    # Personal information
    first_name = Column(String(255), nullable=False)
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=False)  # male, female, other, prefer-not-to-say
    preferred_language = Column(String(20), nullable=True)

    # Contact information
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    province = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)

    # Emergency contact
    emergency_name = Column(String(255), nullable=False)
    emergency_relationship = Column(String(100), nullable=False)
    emergency_phone = Column(String(20), nullable=False)
    emergency_address = Column(String(500), nullable=True)

    # Insurance
    insurance_provider = Column(String(255), nullable=True)
    policy_number = Column(String(100), nullable=True)
    group_number = Column(String(100), nullable=True)
    subscriber_name = Column(String(255), nullable=True)

    # Medical history
    allergies = Column(Text, nullable=False)
    medications = Column(Text, nullable=False)
    medical_conditions = Column(Text, nullable=False)
    previous_surgeries = Column(Text, nullable=False)
    family_history = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship(
        "PatientFileAppointment",
        back_populates="patient_file",
        cascade="all, delete-orphan",
        order_by="PatientFileAppointment.date",
    )


class PatientFileAppointment(Base):
    __tablename__ = "patient_file_appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_file_id = Column(Integer, ForeignKey("patient_files.id"), nullable=False, index=True)
    hospital = Column(String(255), nullable=False)
    doctor = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    patient_file = relationship("PatientFile", back_populates="appointments")
