"""Facility admin service - accounts and facility-wide analytics"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import FacilityAdmin
from ...security_utils import hash_password
from ..events.repository import EventRepository
from ..facilities.repository import FacilityRepository
from ..patients.repository import PatientRepository
from ..providers.repository import ProviderRepository
from ..slots.repository import SlotRepository
from .schemas import FacilityAdminCreate

logger = logging.getLogger(__name__)


class FacilityAdminService:
    """Service layer for facility admin accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.facility_repo = FacilityRepository()

    def create_facility_admin(self, data: FacilityAdminCreate) -> FacilityAdmin:
        if not self.facility_repo.get_facility(self.db, data.facilityId):
            raise HTTPException(status_code=404, detail="Facility not found")
        if self.db.query(FacilityAdmin).filter(FacilityAdmin.email == data.email).first():
            raise HTTPException(status_code=400, detail="Email already registered")

        facility_admin = FacilityAdmin(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            facility_id=data.facilityId,
        )
        self.db.add(facility_admin)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Email already registered") from e

        self.db.refresh(facility_admin)
        logger.info(f"🏥 Facility admin {facility_admin.id} created for facility {data.facilityId}")
        return facility_admin

    def get_analytics(self, facility_id: int, now: Optional[datetime] = None) -> dict:
        now = now or datetime.utcnow()
        slot_counts = SlotRepository.get_status_counts(self.db, facility_id)
        return {
            "totalPatients": PatientRepository.count_patients(self.db, facility_id),
            "activeSlots": slot_counts.get("open", 0),
            "upcomingEvents": EventRepository.count_upcoming(self.db, facility_id, now),
            "providers": ProviderRepository.count_providers(self.db, facility_id),
            "departments": len(self.facility_repo.get_departments(self.db, facility_id)),
        }
