"""Patient file router - hospital intake records, staff only"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import ROLE_ADMIN, ROLE_FACILITY_ADMIN, ROLE_PROVIDER, AuthenticatedAccount, require_roles
from ...database import get_db
from .schemas import PatientFileAppointmentCreate, PatientFileCreate, PatientFileResponse
from .service import PatientFileService

router = APIRouter(prefix="/patients", tags=["Patient Files"])

require_staff = require_roles(ROLE_PROVIDER, ROLE_FACILITY_ADMIN, ROLE_ADMIN)


def get_patient_file_service(db: Session = Depends(get_db)) -> PatientFileService:
    """Dependency injection for PatientFileService"""
    return PatientFileService(db)


@router.post("", response_model=PatientFileResponse, status_code=201)
async def create_patient_file(
    data: PatientFileCreate,
    current: AuthenticatedAccount = Depends(require_staff),
    service: PatientFileService = Depends(get_patient_file_service),
):
    return PatientFileResponse.from_model(service.create_patient_file(data))


@router.get("", response_model=list[PatientFileResponse])
async def get_patient_files(
    current: AuthenticatedAccount = Depends(require_staff),
    service: PatientFileService = Depends(get_patient_file_service),
):
    return [PatientFileResponse.from_model(f) for f in service.get_patient_files()]


@router.get("/{identity_number}", response_model=PatientFileResponse)
async def get_patient_file(
    identity_number: str,
    current: AuthenticatedAccount = Depends(require_staff),
    service: PatientFileService = Depends(get_patient_file_service),
):
    return PatientFileResponse.from_model(service.get_by_identity_number(identity_number))


@router.post("/{patient_file_id}/appointments", response_model=PatientFileResponse, status_code=201)
async def add_appointment(
    patient_file_id: int,
    data: PatientFileAppointmentCreate,
    current: AuthenticatedAccount = Depends(require_staff),
    service: PatientFileService = Depends(get_patient_file_service),
):
    return PatientFileResponse.from_model(service.add_appointment(patient_file_id, data))
