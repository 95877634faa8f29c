"""Slot service - Business logic for slot publishing and direct booking"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ...models import Department, Provider, Slot
from ..facilities.repository import FacilityRepository
from ..providers.repository import ProviderRepository
from .repository import SlotRepository
from .schemas import SlotCreate, SlotUpdate

logger = logging.getLogger(__name__)


class SlotService:
    """Service layer for slot business logic

    Scoped operations take a facility id and, for providers, the department
    they staff; a slot outside that scope is reported as not found.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = SlotRepository()
        self.facility_repo = FacilityRepository()

    def get_open_slots(
        self,
        department_id: Optional[int] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
    ) -> list[Slot]:
        if start_at and end_at and end_at < start_at:
            raise HTTPException(status_code=400, detail="end_at must not be before start_at")
        return self.repo.get_open_slots(self.db, department_id, start_at, end_at)

    def get_provider_department(self, provider: Provider) -> Department:
        """The department a provider publishes slots for"""
        if not provider.department_id:
            raise HTTPException(status_code=400, detail="Provider is not assigned to a department")
        department = self.facility_repo.get_department(
            self.db, provider.department_id, provider.facility_id
        )
        if not department:
            raise HTTPException(status_code=404, detail="Department not found")
        return department

    def get_facility_slots(
        self,
        facility_id: int,
        department_id: Optional[int] = None,
        provider_id: Optional[int] = None,
    ) -> list[Slot]:
        department_ids = [department_id] if department_id is not None else None

        if provider_id is not None:
            provider = ProviderRepository.get_provider(self.db, provider_id, facility_id)
            if not provider:
                raise HTTPException(status_code=404, detail="Provider not found")
            if not provider.department_id:
                return []
            if department_ids is None:
                department_ids = [provider.department_id]
            else:
                department_ids = [d for d in department_ids if d == provider.department_id]

        return self.repo.get_facility_slots(self.db, facility_id, department_ids)

    def get_slot(self, facility_id: int, slot_id: int, department_id: Optional[int] = None) -> Slot:
        slot = self.repo.get_facility_slot(self.db, slot_id, facility_id, department_id)
        if not slot:
            raise HTTPException(status_code=404, detail="Slot not found")
        return slot

    def create_slot(self, facility_id: int, data: SlotCreate, department_id: Optional[int] = None) -> Slot:
        """Publish a slot in one of the facility's departments"""
        target_id = department_id if department_id is not None else data.departmentId
        if target_id is None:
            raise HTTPException(status_code=400, detail="departmentId is required")

        department = self.facility_repo.get_department(self.db, target_id, facility_id)
        if not department:
            raise HTTPException(status_code=404, detail="Department not found")

        slot = self.repo.create_slot(
            self.db,
            department.id,
            start_at=data.startAt,
            end_at=data.endAt,
            status=data.status,
        )
        logger.info(f"📅 Slot {slot.id} published in department {department.id}")
        return slot

    def update_slot(
        self, facility_id: int, slot_id: int, data: SlotUpdate, department_id: Optional[int] = None
    ) -> Slot:
        slot = self.get_slot(facility_id, slot_id, department_id)

        start_at = data.startAt or slot.start_at
        end_at = data.endAt or slot.end_at
        if end_at <= start_at:
            raise HTTPException(status_code=400, detail="endAt must be after startAt")

        if self.repo.has_active_referral(self.db, slot.id):
            raise HTTPException(status_code=409, detail="Slot is held by an active referral")

        try:
            slot = self.repo.update_slot(
                self.db, slot, start_at=data.startAt, end_at=data.endAt, status=data.status
            )
        except StaleDataError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent modification of slot {slot_id}")
            raise HTTPException(
                status_code=409, detail="Slot was modified by another request, reload and retry"
            ) from e

        logger.info(f"✏️ Slot {slot.id} updated (status={slot.status})")
        return slot

    def delete_slot(self, facility_id: int, slot_id: int, department_id: Optional[int] = None) -> dict:
        slot = self.get_slot(facility_id, slot_id, department_id)
        if self.repo.has_active_referral(self.db, slot.id):
            raise HTTPException(status_code=409, detail="Slot is held by an active referral")

        self.repo.delete_slot(self.db, slot)
        logger.info(f"🗑️ Slot {slot_id} deleted")
        return {"message": "Slot deleted"}

    def book_slot(self, facility_id: int, slot_id: int, department_id: Optional[int] = None) -> Slot:
        """Mark an open slot booked without a referral (same atomic claim)"""
        slot = self.get_slot(facility_id, slot_id, department_id)

        if not self.repo.claim_slot(self.db, slot.id):
            self.db.rollback()
            logger.warning(f"⚠️ Slot {slot_id} not available for direct booking")
            raise HTTPException(status_code=400, detail="Slot not available")

        self.db.commit()
        self.db.refresh(slot)
        logger.info(f"✅ Slot {slot.id} booked directly")
        return slot
