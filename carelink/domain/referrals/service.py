"""Referral service - Booking, cancellation and rescheduling of referrals"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ...models import REFERRAL_STATUSES, Referral, Slot
from ..facilities.repository import FacilityRepository
from ..patients.repository import PatientRepository
from ..slots.repository import SlotRepository
from .repository import ReferralRepository
from .schemas import ReferralCreate, ReferralUpdate

logger = logging.getLogger(__name__)

ANALYTICS_MONTHS = 6


def _format_slot_time(slot: Optional[Slot]) -> str:
    if slot is None:
        return "your appointment"
    return f"your appointment on {slot.start_at:%Y-%m-%d %H:%M} UTC"


def _month_keys(now: datetime, months: int) -> list[str]:
    """YYYY-MM keys for the last `months` months, oldest first, current month included"""
    year, month = now.year, now.month
    keys = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(keys))


class ReferralService:
    """Service layer for referral business logic

    Every transition that touches a slot runs in the request session's
    transaction and commits once; a failed claim rolls everything back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReferralRepository()
        self.slot_repo = SlotRepository()
        self.facility_repo = FacilityRepository()
        self.patient_repo = PatientRepository()

    def get_referrals(
        self,
        patient_id: Optional[int] = None,
        from_facility_id: Optional[int] = None,
        facility_id: Optional[int] = None,
    ) -> list[Referral]:
        return self.repo.get_referrals(self.db, patient_id, from_facility_id, facility_id)

    def get_referral(self, referral_id: int, patient_id: Optional[int] = None) -> Referral:
        referral = self.repo.get_referral(self.db, referral_id, patient_id)
        if not referral:
            raise HTTPException(status_code=404, detail="Referral not found")
        return referral

    def create_referral(self, data: ReferralCreate) -> Referral:
        """Claim the slot and record the referral in one transaction"""
        if not self.facility_repo.get_facility(self.db, data.fromFacilityId):
            raise HTTPException(status_code=404, detail="Facility not found")
        if not self.facility_repo.get_department(self.db, data.toDepartmentId):
            raise HTTPException(status_code=404, detail="Department not found")
        if not self.patient_repo.get_patient(self.db, data.patientId):
            raise HTTPException(status_code=404, detail="Patient not found")

        try:
            if not self.slot_repo.claim_slot(self.db, data.slotId, department_id=data.toDepartmentId):
                self.db.rollback()
                logger.warning(f"⚠️ Slot {data.slotId} not available for patient {data.patientId}")
                raise HTTPException(status_code=400, detail="Slot not available")

            referral = self.repo.create_referral(
                self.db,
                from_facility_id=data.fromFacilityId,
                to_department_id=data.toDepartmentId,
                patient_id=data.patientId,
                slot_id=data.slotId,
                status="booked",
                reason=data.reason,
            )
            slot = self.slot_repo.get_slot(self.db, data.slotId)
            self.patient_repo.add_notification(
                self.db, data.patientId, f"Referral booked: {_format_slot_time(slot)}."
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to book slot {data.slotId}")
            raise

        self.db.refresh(referral)
        logger.info(f"✅ Referral {referral.id} booked slot {data.slotId} for patient {data.patientId}")
        return referral

    def cancel_referral(self, referral_id: int, patient_id: Optional[int] = None) -> Referral:
        """Cancel a referral and free its slot"""
        referral = self.get_referral(referral_id, patient_id)
        slot_id = referral.slot_id

        try:
            if not self.repo.mark_cancelled(self.db, referral.id, patient_id):
                self.db.rollback()
                raise HTTPException(status_code=400, detail="Referral already cancelled")

            slot = None
            if slot_id is not None:
                self.slot_repo.release_slot(self.db, slot_id)
                slot = self.slot_repo.get_slot(self.db, slot_id)
            self.patient_repo.add_notification(
                self.db, referral.patient_id, f"Referral cancelled: {_format_slot_time(slot)}."
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to cancel referral {referral_id}")
            raise

        self.db.refresh(referral)
        logger.info(f"🚫 Referral {referral.id} cancelled, slot {slot_id} freed")
        return referral

    def confirm_referral(self, referral_id: int) -> Referral:
        referral = self.get_referral(referral_id)

        if not self.repo.mark_confirmed(self.db, referral.id):
            self.db.rollback()
            raise HTTPException(
                status_code=400, detail=f"Cannot confirm a referral that is {referral.status}"
            )
        self.db.commit()
        self.db.refresh(referral)
        logger.info(f"✅ Referral {referral.id} confirmed")
        return referral

    def reschedule_referral(
        self, referral_id: int, new_slot_id: int, patient_id: Optional[int] = None
    ) -> Referral:
        """Move a referral to another open slot of its destination department"""
        referral = self.get_referral(referral_id, patient_id)
        if referral.status == "cancelled":
            raise HTTPException(status_code=400, detail="Cannot reschedule a cancelled referral")

        old_slot_id = referral.slot_id

        try:
            # New slot first: if it is gone, nothing changes
            if not self.slot_repo.claim_slot(
                self.db, new_slot_id, department_id=referral.to_department_id
            ):
                self.db.rollback()
                logger.warning(f"⚠️ Slot {new_slot_id} not available for referral {referral_id}")
                raise HTTPException(status_code=400, detail="Slot not available")

            if not self.repo.move_to_slot(self.db, referral.id, new_slot_id):
                self.db.rollback()
                raise HTTPException(status_code=400, detail="Cannot reschedule a cancelled referral")

            if old_slot_id is not None and old_slot_id != new_slot_id:
                self.slot_repo.release_slot(self.db, old_slot_id)

            slot = self.slot_repo.get_slot(self.db, new_slot_id)
            self.patient_repo.add_notification(
                self.db, referral.patient_id, f"Referral rescheduled: {_format_slot_time(slot)}."
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to reschedule referral {referral_id}")
            raise

        self.db.refresh(referral)
        logger.info(f"🔁 Referral {referral.id} moved from slot {old_slot_id} to {new_slot_id}")
        return referral

    def update_referral(self, referral_id: int, data: ReferralUpdate) -> Referral:
        referral = self.get_referral(referral_id)

        if data.slotId is not None and data.slotId != referral.slot_id:
            referral = self.reschedule_referral(referral.id, data.slotId)

        if data.reason is not None:
            try:
                referral = self.repo.update_referral(self.db, referral, reason=data.reason)
            except StaleDataError as e:
                self.db.rollback()
                raise HTTPException(
                    status_code=409, detail="Referral was modified by another request, reload and retry"
                ) from e

        return referral

    def get_analytics(self, facility_id: Optional[int] = None, now: Optional[datetime] = None) -> dict:
        """Status counts plus a monthly trend over the last six months"""
        now = now or datetime.utcnow()
        counts = self.repo.get_status_counts(self.db, facility_id)
        status_counts = {status: counts.get(status, 0) for status in REFERRAL_STATUSES}
        status_counts["total"] = sum(counts.values())

        keys = _month_keys(now, ANALYTICS_MONTHS)
        first_year, first_month = (int(part) for part in keys[0].split("-"))
        since = datetime(first_year, first_month, 1)

        monthly = {key: {"month": key, "total": 0, **{s: 0 for s in REFERRAL_STATUSES}} for key in keys}
        for created_at, status in self.repo.get_created_since(self.db, since, facility_id):
            key = f"{created_at:%Y-%m}"
            if key not in monthly:
                continue
            monthly[key]["total"] += 1
            if status in monthly[key]:
                monthly[key][status] += 1

        return {"statusCounts": status_counts, "monthly": [monthly[key] for key in keys]}
