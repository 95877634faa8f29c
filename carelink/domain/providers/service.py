"""Provider service - Provider accounts, dashboard and analytics"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import ACTIVE_REFERRAL_STATUSES, REFERRAL_STATUSES, SLOT_STATUSES, Provider
from ...security_utils import hash_password
from ..events.repository import EventRepository
from ..facilities.repository import FacilityRepository
from ..facilities.schemas import FacilitySummary
from ..referrals.repository import ReferralRepository
from ..slots.repository import SlotRepository
from .repository import ProviderRepository
from .schemas import (
    ProviderCreate,
    ProviderDashboardResponse,
    ProviderDashboardStats,
    ProviderResponse,
    ProviderUpdate,
)

logger = logging.getLogger(__name__)


class ProviderService:
    """Service layer for provider business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProviderRepository()
        self.facility_repo = FacilityRepository()

    def get_providers(self, facility_id: Optional[int] = None) -> list[Provider]:
        return self.repo.get_providers(self.db, facility_id)

    def get_provider(self, provider_id: int, facility_id: Optional[int] = None) -> Provider:
        provider = self.repo.get_provider(self.db, provider_id, facility_id)
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")
        return provider

    def _check_department(self, facility_id: int, department_id: Optional[int]) -> None:
        if department_id is None:
            return
        if not self.facility_repo.get_department(self.db, department_id, facility_id):
            raise HTTPException(status_code=404, detail="Department not found")

    def create_provider(self, data: ProviderCreate, facility_id: Optional[int] = None) -> Provider:
        """Create a provider; `facility_id` pins the facility for facility-admin callers"""
        facility_id = facility_id if facility_id is not None else data.facilityId
        if facility_id is None:
            raise HTTPException(status_code=400, detail="facilityId is required")
        if not self.facility_repo.get_facility(self.db, facility_id):
            raise HTTPException(status_code=404, detail="Facility not found")
        self._check_department(facility_id, data.departmentId)

        if self.repo.get_provider_by_email(self.db, data.email):
            raise HTTPException(status_code=400, detail="Email already registered")

        try:
            provider = self.repo.create_provider(
                self.db,
                email=data.email,
                password_hash=hash_password(data.password),
                name=data.name,
                phone=data.phone,
                facility_id=facility_id,
                department_id=data.departmentId,
                role=data.role,
                permissions=data.permissions,
                is_active=True,
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Email already registered") from e

        logger.info(f"👩‍⚕️ Provider {provider.id} created in facility {facility_id}")
        return provider

    def update_provider(
        self, provider_id: int, data: ProviderUpdate, facility_id: Optional[int] = None
    ) -> Provider:
        provider = self.get_provider(provider_id, facility_id)
        self._check_department(provider.facility_id, data.departmentId)

        return self.repo.update_provider(
            self.db,
            provider,
            name=data.name,
            phone=data.phone,
            department_id=data.departmentId,
            role=data.role,
            permissions=data.permissions,
            is_active=data.isActive,
        )

    def deactivate_provider(self, provider_id: int, facility_id: Optional[int] = None) -> dict:
        """Soft delete: the account stays for history but can no longer log in"""
        provider = self.get_provider(provider_id, facility_id)
        provider.is_active = False
        self.db.commit()
        logger.info(f"🚫 Provider {provider_id} deactivated")
        return {"message": "Provider deactivated"}

    def get_dashboard(self, provider: Provider, now: Optional[datetime] = None) -> ProviderDashboardResponse:
        now = now or datetime.utcnow()
        facility = self.facility_repo.get_facility(self.db, provider.facility_id)
        slot_counts = SlotRepository.get_status_counts(self.db, provider.facility_id)
        referral_counts = ReferralRepository.get_status_counts(self.db, provider.facility_id)

        return ProviderDashboardResponse(
            provider=ProviderResponse.from_model(provider),
            facility=FacilitySummary(id=facility.id, name=facility.name) if facility else None,
            stats=ProviderDashboardStats(
                openSlots=slot_counts.get("open", 0),
                bookedSlots=slot_counts.get("booked", 0),
                activeReferrals=sum(referral_counts.get(s, 0) for s in ACTIVE_REFERRAL_STATUSES),
                upcomingEvents=EventRepository.count_upcoming(self.db, provider.facility_id, now),
            ),
        )

    def get_analytics(self, provider: Provider) -> dict:
        """Referral, slot and event figures for the provider's facility"""
        referral_counts = ReferralRepository.get_status_counts(self.db, provider.facility_id)
        slot_counts = SlotRepository.get_status_counts(self.db, provider.facility_id)
        total_events, total_rsvps, total_capacity = EventRepository.get_rsvp_totals(
            self.db, provider.facility_id
        )

        referrals = {status: referral_counts.get(status, 0) for status in REFERRAL_STATUSES}
        referrals["total"] = sum(referral_counts.values())
        slots = {status: slot_counts.get(status, 0) for status in SLOT_STATUSES}
        slots["total"] = sum(slot_counts.values())
        utilization = round(total_rsvps / total_capacity * 100, 1) if total_capacity else 0.0

        return {
            "referrals": referrals,
            "slots": slots,
            "events": {
                "total": total_events,
                "totalRsvps": total_rsvps,
                "totalCapacity": total_capacity,
                "capacityUtilization": utilization,
            },
        }
