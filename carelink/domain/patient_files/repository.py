"""Patient file repository - Database operations for intake records"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models_patient_file import PatientFile, PatientFileAppointment


class PatientFileRepository:
    """Repository for patient file database operations"""

    @staticmethod
    def get_patient_files(db: Session) -> list[PatientFile]:
        return (
            db.query(PatientFile)
            .options(selectinload(PatientFile.appointments))
            .order_by(PatientFile.created_at.desc(), PatientFile.id.desc())
            .all()
        )

    @staticmethod
    def get_patient_file(db: Session, patient_file_id: int) -> Optional[PatientFile]:
        return db.query(PatientFile).filter(PatientFile.id == patient_file_id).first()

    @staticmethod
    def get_by_identity_number(db: Session, identity_number: str) -> Optional[PatientFile]:
        return db.query(PatientFile).filter(PatientFile.identity_number == identity_number).first()

    @staticmethod
    def create_patient_file(db: Session, **file_data) -> PatientFile:
        patient_file = PatientFile(**file_data)
        db.add(patient_file)
        db.commit()
        db.refresh(patient_file)
        return patient_file

    @staticmethod
    def add_appointment(db: Session, patient_file: PatientFile, **appointment_data) -> PatientFile:
        db.add(PatientFileAppointment(patient_file_id=patient_file.id, **appointment_data))
        db.commit()
        db.refresh(patient_file)
        return patient_file
