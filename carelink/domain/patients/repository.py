"""Patient repository - Database operations for patients and their notifications"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Patient, PatientNotification, Referral
from ...models_event import EventRsvp


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def get_patient(db: Session, patient_id: int, facility_id: Optional[int] = None) -> Optional[Patient]:
        query = db.query(Patient).filter(Patient.id == patient_id)
        if facility_id is not None:
            query = query.filter(Patient.facility_id == facility_id)
        return query.first()

    @staticmethod
    def get_patient_by_phone(db: Session, phone: str) -> Optional[Patient]:
        return db.query(Patient).filter(Patient.phone == phone).first()

    @staticmethod
    def get_patients(db: Session, facility_id: Optional[int] = None) -> list[Patient]:
        query = db.query(Patient)
        if facility_id is not None:
            query = query.filter(Patient.facility_id == facility_id)
        return query.order_by(Patient.created_at.desc(), Patient.id.desc()).all()

    @staticmethod
    def count_patients(db: Session, facility_id: Optional[int] = None) -> int:
        query = db.query(func.count(Patient.id))
        if facility_id is not None:
            query = query.filter(Patient.facility_id == facility_id)
        return query.scalar() or 0

    @staticmethod
    def create_patient(db: Session, **patient_data) -> Patient:
        patient = Patient(**patient_data)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def update_patient(db: Session, patient: Patient, **updates) -> Patient:
        """Update a patient with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(patient, key):
                setattr(patient, key, value)

        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def has_referrals(db: Session, patient_id: int) -> bool:
        count = db.query(func.count(Referral.id)).filter(Referral.patient_id == patient_id).scalar()
        return bool(count)

    @staticmethod
    def delete_patient(db: Session, patient: Patient) -> None:
        """Delete a patient with their RSVPs and notifications"""
        db.query(EventRsvp).filter(EventRsvp.patient_id == patient.id).delete(synchronize_session=False)
        db.delete(patient)
        db.commit()

    # Notification Methods
    @staticmethod
    def add_notification(db: Session, patient_id: int, message: str) -> PatientNotification:
        """Queue a notification in the current transaction. Does not commit."""
        notification = PatientNotification(patient_id=patient_id, message=message)
        db.add(notification)
        return notification

    @staticmethod
    def get_notifications(db: Session, patient_id: int) -> list[PatientNotification]:
        return (
            db.query(PatientNotification)
            .filter(PatientNotification.patient_id == patient_id)
            .order_by(PatientNotification.sent_at.desc(), PatientNotification.id.desc())
            .all()
        )

    @staticmethod
    def clear_notifications(db: Session, patient_id: int) -> int:
        deleted = (
            db.query(PatientNotification)
            .filter(PatientNotification.patient_id == patient_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
