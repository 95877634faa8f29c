"""Patient service - Registration, dashboard views and notifications"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import REMINDER_WINDOW_HOURS
from ...models import ACTIVE_REFERRAL_STATUSES, Patient, PatientNotification, Provider
from ...security_utils import hash_password
from ..facilities.schemas import FacilitySummary
from ..providers.repository import ProviderRepository
from ..referrals.repository import ReferralRepository
from ..referrals.schemas import ReferralDetailResponse, ReferralResponse
from ..slots.schemas import SlotResponse
from .repository import PatientRepository
from .schemas import (
    AppointmentResponse,
    PatientCreate,
    PatientUpdate,
    ProviderSummary,
)

logger = logging.getLogger(__name__)


class PatientService:
    """Service layer for patient business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientRepository()
        self.referral_repo = ReferralRepository()

    # ------------------------------------------------------------------
    # Registration (providers and facility admins)
    # ------------------------------------------------------------------

    def get_patients(self, facility_id: Optional[int] = None) -> list[Patient]:
        return self.repo.get_patients(self.db, facility_id)

    def get_patient(self, patient_id: int, facility_id: Optional[int] = None) -> Patient:
        patient = self.repo.get_patient(self.db, patient_id, facility_id)
        if not patient:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    def create_patient(self, data: PatientCreate, facility_id: Optional[int] = None) -> Patient:
        if self.repo.get_patient_by_phone(self.db, data.phone):
            raise HTTPException(status_code=400, detail="Phone number already registered")

        try:
            patient = self.repo.create_patient(
                self.db,
                phone=data.phone,
                name=data.name,
                surname=data.surname,
                email=data.email,
                preferred_language=data.preferredLanguage,
                consented=data.consented,
                facility_id=facility_id,
                password_hash=hash_password(data.password) if data.password else None,
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Phone number already registered") from e

        logger.info(f"🧑 Patient {patient.id} registered (facility={facility_id})")
        return patient

    def update_patient(self, patient_id: int, data: PatientUpdate, facility_id: Optional[int] = None) -> Patient:
        patient = self.get_patient(patient_id, facility_id)

        if data.phone and data.phone != patient.phone:
            existing = self.repo.get_patient_by_phone(self.db, data.phone)
            if existing and existing.id != patient.id:
                raise HTTPException(status_code=400, detail="Phone number already registered")

        updates = {
            "phone": data.phone,
            "name": data.name,
            "surname": data.surname,
            "email": data.email,
            "preferred_language": data.preferredLanguage,
            "consented": data.consented,
        }
        if data.password:
            updates["password_hash"] = hash_password(data.password)

        try:
            return self.repo.update_patient(self.db, patient, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Phone number already registered") from e

    def delete_patient(self, patient_id: int, facility_id: Optional[int] = None) -> dict:
        patient = self.get_patient(patient_id, facility_id)
        if self.repo.has_referrals(self.db, patient.id):
            raise HTTPException(status_code=409, detail="Patient has referrals and cannot be deleted")

        self.repo.delete_patient(self.db, patient)
        logger.info(f"🗑️ Patient {patient_id} deleted")
        return {"message": "Patient deleted"}

    # ------------------------------------------------------------------
    # Dashboard views
    # ------------------------------------------------------------------

    def get_appointments(self, patient: Patient) -> list[AppointmentResponse]:
        """Join each referral to its slot, department, staff and facility"""
        referrals = self.referral_repo.get_patient_referrals(self.db, patient.id)
        staff: dict[int, Optional[Provider]] = {}
        appointments = []

        for referral in referrals:
            slot = referral.slot
            department = referral.to_department

            if department.id not in staff:
                providers = ProviderRepository.get_department_providers(self.db, department.id)
                staff[department.id] = providers[0] if providers else None
            provider = staff[department.id]

            facility = department.facility
            appointments.append(
                AppointmentResponse(
                    id=referral.id,
                    date=slot.start_at if slot else None,
                    end=slot.end_at if slot else None,
                    status=referral.status,
                    slot=SlotResponse.from_model(slot) if slot else None,
                    referral=ReferralResponse.from_model(referral),
                    provider=ProviderSummary(id=provider.id, name=provider.name, role=provider.role)
                    if provider
                    else None,
                    department=department.name,
                    facility=FacilitySummary(id=facility.id, name=facility.name) if facility else None,
                )
            )
        return appointments

    def get_referrals(self, patient: Patient) -> list[ReferralDetailResponse]:
        referrals = self.referral_repo.get_patient_referrals(self.db, patient.id)
        return [ReferralDetailResponse.from_model(r, include_patient=False) for r in referrals]

    def get_reminders(self, patient: Patient, now: Optional[datetime] = None) -> list[AppointmentResponse]:
        """Active appointments starting within the reminder window"""
        now = now or datetime.utcnow()
        window_end = now + timedelta(hours=REMINDER_WINDOW_HOURS)
        return [
            a
            for a in self.get_appointments(patient)
            if a.status in ACTIVE_REFERRAL_STATUSES and a.date is not None and now <= a.date <= window_end
        ]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def get_notifications(self, patient: Patient) -> list[PatientNotification]:
        return self.repo.get_notifications(self.db, patient.id)

    def clear_notifications(self, patient: Patient) -> dict:
        deleted = self.repo.clear_notifications(self.db, patient.id)
        logger.info(f"🧹 Cleared {deleted} notifications for patient {patient.id}")
        return {"message": "Notifications cleared"}

