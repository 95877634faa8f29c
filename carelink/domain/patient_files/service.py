"""Patient file service"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models_patient_file import PatientFile
from .repository import PatientFileRepository
from .schemas import PatientFileAppointmentCreate, PatientFileCreate

logger = logging.getLogger(__name__)


class PatientFileService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientFileRepository()

    def get_patient_files(self) -> list[PatientFile]:
        return self.repo.get_patient_files(self.db)

    def get_by_identity_number(self, identity_number: str) -> PatientFile:
        patient_file = self.repo.get_by_identity_number(self.db, identity_number.strip())
        if not patient_file:
            raise HTTPException(status_code=404, detail="Patient file not found")
        return patient_file

    def create_patient_file(self, data: PatientFileCreate) -> PatientFile:
        if self.repo.get_by_identity_number(self.db, data.identityNumber):
            raise HTTPException(status_code=400, detail="Identity number already registered")

        try:
            patient_file = self.repo.create_patient_file(
                self.db,
                identity_number=data.identityNumber,
                first_name=data.firstName,
                middle_name=data.middleName,
                last_name=data.lastName,
                date_of_birth=data.dateOfBirth,
                gender=data.gender,
                preferred_language=data.preferredLanguage,
                phone=data.phone,
                email=data.email,
                address=data.address,
                city=data.city,
                province=data.province,
                zip_code=data.zipCode,
                emergency_name=data.emergencyName,
                emergency_relationship=data.emergencyRelationship,
                emergency_phone=data.emergencyPhone,
                emergency_address=data.emergencyAddress,
                insurance_provider=data.insuranceProvider,
                policy_number=data.policyNumber,
                group_number=data.groupNumber,
                subscriber_name=data.subscriberName,
                allergies=data.allergies,
                medications=data.medications,
                medical_conditions=data.medicalConditions,
                previous_surgeries=data.previousSurgeries,
                family_history=data.familyHistory,
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Identity number already registered") from e

        logger.info(f"🗂️ Patient file {patient_file.id} opened")
        return patient_file

    def add_appointment(self, patient_file_id: int, data: PatientFileAppointmentCreate) -> PatientFile:
        patient_file = self.repo.get_patient_file(self.db, patient_file_id)
        if not patient_file:
            raise HTTPException(status_code=404, detail="Patient file not found")

        patient_file = self.repo.add_appointment(
            self.db,
            patient_file,
            hospital=data.hospital,
            doctor=data.doctor,
            date=data.date,
            reason=data.reason,
            notes=data.notes,
        )
        logger.info(f"Appointment added to patient file {patient_file_id}")
        return patient_file
