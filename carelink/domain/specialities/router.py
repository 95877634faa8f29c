"""Speciality router - public directory, admin-maintained"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import Admin
from ...schemas import MessageResponse
from .schemas import SpecialityCreate, SpecialityResponse, SpecialityUpdate
from .service import SpecialityService

router = APIRouter(prefix="/specialities", tags=["Specialities"])


def get_speciality_service(db: Session = Depends(get_db)) -> SpecialityService:
    """Dependency injection for SpecialityService"""
    return SpecialityService(db)


@router.get("", response_model=list[SpecialityResponse])
async def get_specialities(service: SpecialityService = Depends(get_speciality_service)):
    return [SpecialityResponse.from_model(s) for s in service.get_specialities()]


@router.get("/{speciality_id}", response_model=SpecialityResponse)
async def get_speciality(speciality_id: int, service: SpecialityService = Depends(get_speciality_service)):
    return SpecialityResponse.from_model(service.get_speciality(speciality_id))


@router.post("", response_model=SpecialityResponse, status_code=201)
async def create_speciality(
    data: SpecialityCreate,
    admin: Admin = Depends(get_current_admin),
    service: SpecialityService = Depends(get_speciality_service),
):
    return SpecialityResponse.from_model(service.create_speciality(data))


@router.put("/{speciality_id}", response_model=SpecialityResponse)
async def update_speciality(
    speciality_id: int,
    data: SpecialityUpdate,
    admin: Admin = Depends(get_current_admin),
    service: SpecialityService = Depends(get_speciality_service),
):
    return SpecialityResponse.from_model(service.update_speciality(speciality_id, data))


@router.delete("/{speciality_id}", response_model=MessageResponse)
async def delete_speciality(
    speciality_id: int,
    admin: Admin = Depends(get_current_admin),
    service: SpecialityService = Depends(get_speciality_service),
):
    return service.delete_speciality(speciality_id)
