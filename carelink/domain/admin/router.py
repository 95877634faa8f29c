"""Admin router - platform administration endpoints"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import Admin
from ...rate_limiter import rate_limit_login
from ...schemas import MessageResponse
from ..auth.schemas import LoginRequest
from ..auth.service import AuthService
from ..facilities.schemas import FacilityCreate, FacilityResponse
from ..facilities.service import FacilityService
from ..facility_admin.schemas import FacilityAdminCreate, FacilityAdminResponse
from ..facility_admin.service import FacilityAdminService
from ..providers.schemas import ProviderCreate, ProviderResponse, ProviderUpdate
from ..providers.service import ProviderService
from .schemas import AdminLoginResponse, AdminResponse, DashboardStatsResponse
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(db)


@router.post("/login", response_model=AdminLoginResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    db: Session = Depends(get_db),
):
    token, admin = AuthService(db).login_admin(data.email, data.password)
    return AdminLoginResponse(token=token, admin=AdminResponse.from_model(admin))


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Platform-wide headline figures"""
    return AdminService(db).get_dashboard_stats()


# ============================================================================
# FACILITIES
# ============================================================================


@router.post("/facilities", response_model=FacilityResponse, status_code=201)
async def create_facility(
    data: FacilityCreate,
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Register a facility with its initial departments"""
    return FacilityResponse.from_model(FacilityService(db).create_facility(data))


@router.get("/facilities", response_model=list[FacilityResponse])
async def get_facilities(
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return [FacilityResponse.from_model(f) for f in FacilityService(db).get_facilities()]


@router.post("/facility-admins", response_model=FacilityAdminResponse, status_code=201)
async def create_facility_admin(
    data: FacilityAdminCreate,
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    facility_admin = FacilityAdminService(db).create_facility_admin(data)
    return FacilityAdminResponse.from_model(facility_admin)


# ============================================================================
# PROVIDERS
# ============================================================================


@router.post("/providers", response_model=ProviderResponse, status_code=201)
async def create_provider(
    data: ProviderCreate,
    admin: Admin = Depends(get_current_admin),
    service: ProviderService = Depends(get_provider_service),
):
    return ProviderResponse.from_model(service.create_provider(data))


@router.get("/providers", response_model=list[ProviderResponse])
async def get_providers(
    admin: Admin = Depends(get_current_admin),
    service: ProviderService = Depends(get_provider_service),
):
    return [ProviderResponse.from_model(p) for p in service.get_providers()]


@router.put("/providers/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: int,
    data: ProviderUpdate,
    admin: Admin = Depends(get_current_admin),
    service: ProviderService = Depends(get_provider_service),
):
    return ProviderResponse.from_model(service.update_provider(provider_id, data))


@router.delete("/providers/{provider_id}", response_model=MessageResponse)
async def deactivate_provider(
    provider_id: int,
    admin: Admin = Depends(get_current_admin),
    service: ProviderService = Depends(get_provider_service),
):
    """Deactivate a provider (accounts are kept for referral history)"""
    return service.deactivate_provider(provider_id)
