"""Facility router - public facility and department listings"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import DepartmentResponse, FacilityResponse
from .service import FacilityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities", tags=["Facilities"])
departments_router = APIRouter(prefix="/departments", tags=["Facilities"])


def get_facility_service(db: Session = Depends(get_db)) -> FacilityService:
    """Dependency injection for FacilityService"""
    return FacilityService(db)


@router.get("", response_model=list[FacilityResponse])
async def get_facilities(
    include_slots: bool = Query(False, alias="includeSlots"),
    service: FacilityService = Depends(get_facility_service),
):
    """List all facilities with their departments"""
    facilities = service.get_facilities(with_slots=include_slots)
    return [FacilityResponse.from_model(f, include_slots=include_slots) for f in facilities]


@departments_router.get("/{facility_id}/departments", response_model=list[DepartmentResponse])
async def get_departments(
    facility_id: int,
    service: FacilityService = Depends(get_facility_service),
):
    """List the departments of one facility"""
    return [DepartmentResponse.from_model(d) for d in service.get_departments(facility_id)]
