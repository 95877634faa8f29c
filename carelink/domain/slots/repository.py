"""Slot repository - Database operations for slots"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from ...models import ACTIVE_REFERRAL_STATUSES, Department, Referral, Slot


class SlotRepository:
    """Repository for slot database operations"""

    @staticmethod
    def get_slot(db: Session, slot_id: int) -> Optional[Slot]:
        return db.query(Slot).filter(Slot.id == slot_id).first()

    @staticmethod
    def get_facility_slot(
        db: Session, slot_id: int, facility_id: int, department_id: Optional[int] = None
    ) -> Optional[Slot]:
        """Get a slot only if it belongs to the facility (and department, when given)"""
        query = (
            db.query(Slot)
            .join(Department, Slot.department_id == Department.id)
            .filter(Slot.id == slot_id, Department.facility_id == facility_id)
        )
        if department_id is not None:
            query = query.filter(Slot.department_id == department_id)
        return query.first()

    @staticmethod
    def get_open_slots(
        db: Session,
        department_id: Optional[int] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
    ) -> list[Slot]:
        """Open slots, earliest first, optionally within [start_at, end_at]"""
        query = db.query(Slot).filter(Slot.status == "open")
        if department_id is not None:
            query = query.filter(Slot.department_id == department_id)
        if start_at is not None:
            query = query.filter(Slot.start_at >= start_at)
        if end_at is not None:
            query = query.filter(Slot.start_at <= end_at)
        return query.order_by(Slot.start_at.asc(), Slot.id.asc()).all()

    @staticmethod
    def get_facility_slots(
        db: Session,
        facility_id: int,
        department_ids: Optional[list[int]] = None,
        status: Optional[str] = None,
    ) -> list[Slot]:
        query = (
            db.query(Slot)
            .join(Department, Slot.department_id == Department.id)
            .filter(Department.facility_id == facility_id)
        )
        if department_ids is not None:
            query = query.filter(Slot.department_id.in_(department_ids))
        if status:
            query = query.filter(Slot.status == status)
        return query.order_by(Slot.start_at.asc(), Slot.id.asc()).all()

    @staticmethod
    def create_slot(db: Session, department_id: int, **slot_data) -> Slot:
        slot = Slot(department_id=department_id, **slot_data)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def update_slot(db: Session, slot: Slot, **updates) -> Slot:
        """Update a slot with provided fields (version checked on flush)"""
        for key, value in updates.items():
            if value is not None and hasattr(slot, key):
                setattr(slot, key, value)

        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def delete_slot(db: Session, slot: Slot) -> None:
        """Delete a slot; inactive referrals that pointed at it keep their history without it"""
        db.query(Referral).filter(Referral.slot_id == slot.id).update(
            {Referral.slot_id: None}, synchronize_session=False
        )
        db.delete(slot)
        db.commit()

    @staticmethod
    def claim_slot(db: Session, slot_id: int, department_id: Optional[int] = None) -> bool:
        """
        Atomically move a slot from open to booked.

        The status check and the write are one conditional UPDATE, so of any
        number of concurrent claims at most one matches a row. Does not commit:
        the caller commits together with whatever depends on the claim.

        Returns:
            True if this call claimed the slot
        """
        stmt = update(Slot).where(Slot.id == slot_id, Slot.status == "open")
        if department_id is not None:
            stmt = stmt.where(Slot.department_id == department_id)
        stmt = stmt.values(
            status="booked", version=Slot.version + 1, updated_at=func.now()
        ).execution_options(synchronize_session=False)
        result = db.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    def release_slot(db: Session, slot_id: int) -> bool:
        """Return a booked slot to open. Does not commit."""
        stmt = (
            update(Slot)
            .where(Slot.id == slot_id, Slot.status == "booked")
            .values(status="open", version=Slot.version + 1, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    def has_active_referral(db: Session, slot_id: int) -> bool:
        count = (
            db.query(func.count(Referral.id))
            .filter(Referral.slot_id == slot_id, Referral.status.in_(ACTIVE_REFERRAL_STATUSES))
            .scalar()
        )
        return bool(count)

    @staticmethod
    def get_status_counts(db: Session, facility_id: Optional[int] = None) -> dict[str, int]:
        """Slot counts grouped by status"""
        query = db.query(Slot.status, func.count(Slot.id))
        if facility_id is not None:
            query = query.join(Department, Slot.department_id == Department.id).filter(
                Department.facility_id == facility_id
            )
        return {status: count for status, count in query.group_by(Slot.status).all()}
