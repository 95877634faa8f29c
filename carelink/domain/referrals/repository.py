"""Referral repository - Database operations for referrals"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, joinedload

from ...models import ACTIVE_REFERRAL_STATUSES, Department, Referral


def _facility_filter(query, facility_id: int):
    """Referrals sent from, or received by, a facility"""
    department_ids = select(Department.id).where(Department.facility_id == facility_id)
    return query.filter(
        or_(Referral.from_facility_id == facility_id, Referral.to_department_id.in_(department_ids))
    )


class ReferralRepository:
    """Repository for referral database operations"""

    @staticmethod
    def get_referral(db: Session, referral_id: int, patient_id: Optional[int] = None) -> Optional[Referral]:
        query = db.query(Referral).filter(Referral.id == referral_id)
        if patient_id is not None:
            query = query.filter(Referral.patient_id == patient_id)
        return query.first()

    @staticmethod
    def get_referrals(
        db: Session,
        patient_id: Optional[int] = None,
        from_facility_id: Optional[int] = None,
        facility_id: Optional[int] = None,
    ) -> list[Referral]:
        """Referrals newest first, optionally filtered"""
        query = db.query(Referral)
        if patient_id is not None:
            query = query.filter(Referral.patient_id == patient_id)
        if from_facility_id is not None:
            query = query.filter(Referral.from_facility_id == from_facility_id)
        if facility_id is not None:
            query = _facility_filter(query, facility_id)
        return query.order_by(Referral.created_at.desc(), Referral.id.desc()).all()

    @staticmethod
    def get_patient_referrals(db: Session, patient_id: int) -> list[Referral]:
        """A patient's referrals with everything the dashboard shows eagerly loaded"""
        return (
            db.query(Referral)
            .options(
                joinedload(Referral.slot),
                joinedload(Referral.from_facility),
                joinedload(Referral.to_department).joinedload(Department.facility),
            )
            .filter(Referral.patient_id == patient_id)
            .order_by(Referral.created_at.desc(), Referral.id.desc())
            .all()
        )

    @staticmethod
    def create_referral(db: Session, **referral_data) -> Referral:
        """Stage a referral in the current transaction. Does not commit."""
        referral = Referral(**referral_data)
        db.add(referral)
        db.flush()
        return referral

    @staticmethod
    def mark_cancelled(db: Session, referral_id: int, patient_id: Optional[int] = None) -> bool:
        """Conditional transition to cancelled. Does not commit."""
        stmt = update(Referral).where(Referral.id == referral_id, Referral.status != "cancelled")
        if patient_id is not None:
            stmt = stmt.where(Referral.patient_id == patient_id)
        stmt = stmt.values(
            status="cancelled", version=Referral.version + 1, updated_at=func.now()
        ).execution_options(synchronize_session=False)
        return db.execute(stmt).rowcount == 1

    @staticmethod
    def mark_confirmed(db: Session, referral_id: int) -> bool:
        """Conditional transition booked → confirmed. Does not commit."""
        stmt = (
            update(Referral)
            .where(Referral.id == referral_id, Referral.status == "booked")
            .values(status="confirmed", version=Referral.version + 1, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount == 1

    @staticmethod
    def move_to_slot(db: Session, referral_id: int, slot_id: int) -> bool:
        """Point a live referral at a new slot and reset it to booked. Does not commit."""
        stmt = (
            update(Referral)
            .where(Referral.id == referral_id, Referral.status != "cancelled")
            .values(
                slot_id=slot_id,
                status="booked",
                version=Referral.version + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount == 1

    @staticmethod
    def update_referral(db: Session, referral: Referral, **updates) -> Referral:
        """Update a referral with provided fields (version checked on flush)"""
        for key, value in updates.items():
            if value is not None and hasattr(referral, key):
                setattr(referral, key, value)

        db.commit()
        db.refresh(referral)
        return referral

    @staticmethod
    def get_status_counts(db: Session, facility_id: Optional[int] = None) -> dict[str, int]:
        query = db.query(Referral.status, func.count(Referral.id))
        if facility_id is not None:
            query = _facility_filter(query, facility_id)
        return {status: count for status, count in query.group_by(Referral.status).all()}

    @staticmethod
    def get_created_since(
        db: Session, since: datetime, facility_id: Optional[int] = None
    ) -> list[tuple[datetime, str]]:
        """(created_at, status) of referrals created at or after `since`"""
        query = db.query(Referral.created_at, Referral.status).filter(Referral.created_at >= since)
        if facility_id is not None:
            query = _facility_filter(query, facility_id)
        return [(created_at, status) for created_at, status in query.all()]

    @staticmethod
    def count_active(db: Session) -> int:
        return (
            db.query(func.count(Referral.id))
            .filter(Referral.status.in_(ACTIVE_REFERRAL_STATUSES))
            .scalar()
            or 0
        )
