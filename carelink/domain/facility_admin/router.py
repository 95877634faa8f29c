"""Facility admin router - facility-scoped management endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_facility_admin
from ...database import get_db
from ...models import FacilityAdmin
from ...rate_limiter import rate_limit_login
from ...schemas import MessageResponse
from ..auth.schemas import LoginRequest
from ..auth.service import AuthService
from ..events.schemas import EventCreate, EventResponse, EventUpdate
from ..events.service import EventService
from ..facilities.schemas import DepartmentCreate, DepartmentResponse, DepartmentUpdate, FacilityResponse
from ..facilities.service import FacilityService
from ..patients.schemas import PatientCreate, PatientResponse, PatientUpdate
from ..patients.service import PatientService
from ..providers.schemas import ProviderCreate, ProviderResponse, ProviderUpdate
from ..providers.service import ProviderService
from ..slots.schemas import SlotBookRequest, SlotCreate, SlotResponse, SlotUpdate
from ..slots.service import SlotService
from .schemas import (
    FacilityAdminLoginResponse,
    FacilityAdminProfileResponse,
    FacilityAdminResponse,
    FacilityAnalyticsResponse,
)
from .service import FacilityAdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facility-admin", tags=["Facility Admin"])
facility_router = APIRouter(prefix="/facility", tags=["Facility Admin"])


# ============================================================================
# ACCOUNT
# ============================================================================


@router.post("/login", response_model=FacilityAdminLoginResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    db: Session = Depends(get_db),
):
    token, facility_admin = AuthService(db).login_facility_admin(data.email, data.password)
    return FacilityAdminLoginResponse(
        token=token, facilityAdmin=FacilityAdminResponse.from_model(facility_admin)
    )


@router.get("/profile", response_model=FacilityAdminProfileResponse)
async def get_profile(facility_admin: FacilityAdmin = Depends(get_current_facility_admin)):
    """Account details with the facility it manages"""
    base = FacilityAdminResponse.from_model(facility_admin).model_dump()
    facility = FacilityResponse.from_model(facility_admin.facility) if facility_admin.facility else None
    return FacilityAdminProfileResponse(**base, facility=facility)


@router.get("/my-facility", response_model=FacilityResponse)
async def get_my_facility(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    facility = FacilityService(db).get_facility(facility_admin.facility_id)
    return FacilityResponse.from_model(facility, include_slots=True)


# ============================================================================
# DEPARTMENTS
# ============================================================================


@facility_router.get("/departments", response_model=list[DepartmentResponse])
async def get_departments(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    departments = FacilityService(db).get_departments(facility_admin.facility_id)
    return [DepartmentResponse.from_model(d) for d in departments]


@facility_router.post("/departments", response_model=DepartmentResponse, status_code=201)
async def create_department(
    data: DepartmentCreate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    department = FacilityService(db).create_department(facility_admin.facility_id, data)
    return DepartmentResponse.from_model(department)


@facility_router.put("/departments/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: int,
    data: DepartmentUpdate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    department = FacilityService(db).update_department(facility_admin.facility_id, department_id, data)
    return DepartmentResponse.from_model(department)


@facility_router.delete("/departments/{department_id}", response_model=MessageResponse)
async def delete_department(
    department_id: int,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return FacilityService(db).delete_department(facility_admin.facility_id, department_id)


# ============================================================================
# SLOTS
# ============================================================================


@facility_router.get("/slots", response_model=list[SlotResponse])
async def get_slots(
    department: Optional[int] = Query(None),
    provider: Optional[int] = Query(None),
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    """All slots of the facility, optionally for one department or provider"""
    slots = SlotService(db).get_facility_slots(
        facility_admin.facility_id, department_id=department, provider_id=provider
    )
    return [SlotResponse.from_model(s) for s in slots]


@facility_router.post("/slots", response_model=SlotResponse, status_code=201)
async def create_slot(
    data: SlotCreate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return SlotResponse.from_model(SlotService(db).create_slot(facility_admin.facility_id, data))


@facility_router.post("/slots/book", response_model=SlotResponse)
async def book_slot(
    data: SlotBookRequest,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return SlotResponse.from_model(SlotService(db).book_slot(facility_admin.facility_id, data.slot_id))


@facility_router.put("/slots/{slot_id}", response_model=SlotResponse)
async def update_slot(
    slot_id: int,
    data: SlotUpdate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    slot = SlotService(db).update_slot(facility_admin.facility_id, slot_id, data)
    return SlotResponse.from_model(slot)


@facility_router.delete("/slots/{slot_id}", response_model=MessageResponse)
async def delete_slot(
    slot_id: int,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return SlotService(db).delete_slot(facility_admin.facility_id, slot_id)


# ============================================================================
# EVENTS
# ============================================================================


@facility_router.get("/events", response_model=list[EventResponse])
async def get_events(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return [EventResponse.from_model(e) for e in EventService(db).get_events(facility_admin.facility_id)]


@facility_router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return EventResponse.from_model(EventService(db).create_event(facility_admin.facility_id, data))


@facility_router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    event = EventService(db).update_event(event_id, facility_admin.facility_id, data)
    return EventResponse.from_model(event)


@facility_router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return EventService(db).delete_event(event_id, facility_admin.facility_id)


# ============================================================================
# PATIENTS
# ============================================================================


@facility_router.get("/patients", response_model=list[PatientResponse])
async def get_patients(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    patients = PatientService(db).get_patients(facility_admin.facility_id)
    return [PatientResponse.from_model(p) for p in patients]


@facility_router.post("/patients", response_model=PatientResponse, status_code=201)
async def create_patient(
    data: PatientCreate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    patient = PatientService(db).create_patient(data, facility_id=facility_admin.facility_id)
    return PatientResponse.from_model(patient)


@facility_router.put("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    patient = PatientService(db).update_patient(patient_id, data, facility_id=facility_admin.facility_id)
    return PatientResponse.from_model(patient)


@facility_router.delete("/patients/{patient_id}", response_model=MessageResponse)
async def delete_patient(
    patient_id: int,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return PatientService(db).delete_patient(patient_id, facility_id=facility_admin.facility_id)


# ============================================================================
# PROVIDERS
# ============================================================================


@facility_router.get("/providers", response_model=list[ProviderResponse])
async def get_providers(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    providers = ProviderService(db).get_providers(facility_admin.facility_id)
    return [ProviderResponse.from_model(p) for p in providers]


@facility_router.post("/providers", response_model=ProviderResponse, status_code=201)
async def create_provider(
    data: ProviderCreate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    provider = ProviderService(db).create_provider(data, facility_id=facility_admin.facility_id)
    return ProviderResponse.from_model(provider)


@facility_router.put("/providers/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: int,
    data: ProviderUpdate,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    provider = ProviderService(db).update_provider(provider_id, data, facility_id=facility_admin.facility_id)
    return ProviderResponse.from_model(provider)


@facility_router.delete("/providers/{provider_id}", response_model=MessageResponse)
async def delete_provider(
    provider_id: int,
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    """Deactivate a provider of this facility"""
    return ProviderService(db).deactivate_provider(provider_id, facility_id=facility_admin.facility_id)


# ============================================================================
# ANALYTICS
# ============================================================================


@facility_router.get("/analytics", response_model=FacilityAnalyticsResponse)
async def get_analytics(
    facility_admin: FacilityAdmin = Depends(get_current_facility_admin),
    db: Session = Depends(get_db),
):
    return FacilityAdminService(db).get_analytics(facility_admin.facility_id)
