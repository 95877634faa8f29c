"""Provider router - provider self-service endpoints, gated by permission"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_provider, require_permission
from ...database import get_db
from ...models import Provider
from ...rate_limiter import rate_limit_login
from ...schemas import MessageResponse
from ..auth.schemas import LoginRequest
from ..auth.service import AuthService
from ..events.schemas import EventCreate, EventResponse, EventUpdate
from ..events.service import EventService
from ..patients.schemas import PatientCreate, PatientResponse
from ..patients.service import PatientService
from ..referrals.schemas import ReferralDetailResponse
from ..referrals.service import ReferralService
from ..slots.schemas import (
    ProviderSlotsResponse,
    SlotCreate,
    SlotResponse,
    SlotStatusUpdate,
    SlotUpdate,
)
from ..slots.service import SlotService
from .schemas import ProviderAnalyticsResponse, ProviderDashboardResponse, ProviderLoginResponse, ProviderResponse
from .service import ProviderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/provider", tags=["Provider"])


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(db)


def get_slot_service(db: Session = Depends(get_db)) -> SlotService:
    return SlotService(db)


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(db)


# ============================================================================
# AUTH & DASHBOARD
# ============================================================================


@router.post("/login", response_model=ProviderLoginResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    db: Session = Depends(get_db),
):
    token, provider = AuthService(db).login_provider(data.email, data.password)
    return ProviderLoginResponse(token=token, provider=ProviderResponse.from_model(provider))


@router.get("/dashboard", response_model=ProviderDashboardResponse)
async def get_dashboard(
    provider: Provider = Depends(get_current_provider),
    service: ProviderService = Depends(get_provider_service),
):
    """Provider profile with facility headline figures"""
    return service.get_dashboard(provider)


@router.get("/analytics", response_model=ProviderAnalyticsResponse)
async def get_analytics(
    provider: Provider = Depends(require_permission("view_analytics")),
    service: ProviderService = Depends(get_provider_service),
):
    return service.get_analytics(provider)


# ============================================================================
# PATIENTS & REFERRALS
# ============================================================================


@router.get("/patients", response_model=list[PatientResponse])
async def get_patients(
    provider: Provider = Depends(require_permission("create_referrals")),
    db: Session = Depends(get_db),
):
    """Patients a provider can refer"""
    return [PatientResponse.from_model(p) for p in PatientService(db).get_patients()]


@router.post("/patients", response_model=PatientResponse, status_code=201)
async def create_patient(
    data: PatientCreate,
    provider: Provider = Depends(require_permission("create_referrals")),
    db: Session = Depends(get_db),
):
    patient = PatientService(db).create_patient(data, facility_id=provider.facility_id)
    return PatientResponse.from_model(patient)


@router.get("/referrals", response_model=list[ReferralDetailResponse])
async def get_referrals(
    provider: Provider = Depends(require_permission("create_referrals")),
    db: Session = Depends(get_db),
):
    """Referrals sent from or received by the provider's facility"""
    referrals = ReferralService(db).get_referrals(facility_id=provider.facility_id)
    return [ReferralDetailResponse.from_model(r) for r in referrals]


# ============================================================================
# SLOTS (department of the provider)
# ============================================================================


@router.get("/slots", response_model=ProviderSlotsResponse)
async def get_slots(
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    slots = service.get_facility_slots(provider.facility_id, department_id=department.id)
    return ProviderSlotsResponse(
        facilityId=provider.facility_id,
        departmentId=department.id,
        department=department.name,
        slots=[SlotResponse.from_model(s) for s in slots],
    )


@router.post("/slots", response_model=SlotResponse, status_code=201)
async def create_slot(
    data: SlotCreate,
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    slot = service.create_slot(provider.facility_id, data, department_id=department.id)
    return SlotResponse.from_model(slot)


@router.patch("/slots/{slot_id}", response_model=SlotResponse)
async def update_slot(
    slot_id: int,
    data: SlotUpdate,
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    slot = service.update_slot(provider.facility_id, slot_id, data, department_id=department.id)
    return SlotResponse.from_model(slot)


@router.patch("/slots/{slot_id}/status", response_model=SlotResponse)
async def set_slot_status(
    slot_id: int,
    data: SlotStatusUpdate,
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    slot = service.update_slot(
        provider.facility_id, slot_id, SlotUpdate(status=data.status), department_id=department.id
    )
    return SlotResponse.from_model(slot)


@router.delete("/slots/{slot_id}", response_model=MessageResponse)
async def delete_slot(
    slot_id: int,
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    return service.delete_slot(provider.facility_id, slot_id, department_id=department.id)


@router.post("/slots/{slot_id}/book", response_model=SlotResponse)
async def book_slot(
    slot_id: int,
    provider: Provider = Depends(require_permission("manage_slots")),
    service: SlotService = Depends(get_slot_service),
):
    department = service.get_provider_department(provider)
    slot = service.book_slot(provider.facility_id, slot_id, department_id=department.id)
    return SlotResponse.from_model(slot)


# ============================================================================
# EVENTS (facility of the provider)
# ============================================================================


@router.get("/events", response_model=list[EventResponse])
async def get_events(
    provider: Provider = Depends(require_permission("manage_events")),
    service: EventService = Depends(get_event_service),
):
    return [EventResponse.from_model(e) for e in service.get_events(provider.facility_id)]


@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    provider: Provider = Depends(require_permission("manage_events")),
    service: EventService = Depends(get_event_service),
):
    return EventResponse.from_model(service.create_event(provider.facility_id, data))


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    provider: Provider = Depends(require_permission("manage_events")),
    service: EventService = Depends(get_event_service),
):
    return EventResponse.from_model(service.update_event(event_id, provider.facility_id, data))


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    provider: Provider = Depends(require_permission("manage_events")),
    service: EventService = Depends(get_event_service),
):
    return service.delete_event(event_id, provider.facility_id)
