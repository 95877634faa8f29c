"""Referral router - FastAPI endpoints for referral operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import (
    ROLE_ADMIN,
    ROLE_FACILITY_ADMIN,
    ROLE_PROVIDER,
    AuthenticatedAccount,
    require_permission,
    require_roles,
)
from ...database import get_db
from ...models import Provider
from .schemas import ReferralAnalyticsResponse, ReferralCreate, ReferralResponse, ReferralUpdate
from .service import ReferralService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/referrals", tags=["Referrals"])
analytics_router = APIRouter(prefix="/referral", tags=["Referrals"])


def get_referral_service(db: Session = Depends(get_db)) -> ReferralService:
    """Dependency injection for ReferralService"""
    return ReferralService(db)


@router.post("", response_model=ReferralResponse, status_code=201)
async def create_referral(
    data: ReferralCreate,
    provider: Provider = Depends(require_permission("create_referrals")),
    service: ReferralService = Depends(get_referral_service),
):
    """Book a referral into an open slot"""
    logger.info(f"📥 Provider {provider.id} booking slot {data.slotId} for patient {data.patientId}")
    return ReferralResponse.from_model(service.create_referral(data))


@router.get("", response_model=list[ReferralResponse])
async def get_referrals(
    patient_id: Optional[int] = Query(None, alias="patientId"),
    from_facility_id: Optional[int] = Query(None, alias="fromFacilityId"),
    current: AuthenticatedAccount = Depends(require_roles(ROLE_PROVIDER, ROLE_FACILITY_ADMIN, ROLE_ADMIN)),
    service: ReferralService = Depends(get_referral_service),
):
    """List referrals, newest first"""
    referrals = service.get_referrals(patient_id=patient_id, from_facility_id=from_facility_id)
    return [ReferralResponse.from_model(r) for r in referrals]


@router.patch("/{referral_id}", response_model=ReferralResponse)
async def update_referral(
    referral_id: int,
    data: ReferralUpdate,
    provider: Provider = Depends(require_permission("create_referrals")),
    service: ReferralService = Depends(get_referral_service),
):
    """Edit the reason or move the referral to another slot"""
    return ReferralResponse.from_model(service.update_referral(referral_id, data))


@router.patch("/{referral_id}/cancel", response_model=ReferralResponse)
async def cancel_referral(
    referral_id: int,
    provider: Provider = Depends(require_permission("create_referrals")),
    service: ReferralService = Depends(get_referral_service),
):
    """Cancel a referral and reopen its slot"""
    return ReferralResponse.from_model(service.cancel_referral(referral_id))


@router.patch("/{referral_id}/confirm", response_model=ReferralResponse)
async def confirm_referral(
    referral_id: int,
    provider: Provider = Depends(require_permission("create_referrals")),
    service: ReferralService = Depends(get_referral_service),
):
    return ReferralResponse.from_model(service.confirm_referral(referral_id))


@analytics_router.get("/analytics", response_model=ReferralAnalyticsResponse)
async def get_referral_analytics(
    current: AuthenticatedAccount = Depends(require_roles(ROLE_PROVIDER, ROLE_FACILITY_ADMIN)),
    service: ReferralService = Depends(get_referral_service),
):
    """Referral status counts and monthly trend for the caller's facility"""
    return service.get_analytics(facility_id=current.account.facility_id)
