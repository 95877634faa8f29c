"""Facility repository - Database operations for facilities and departments"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import Department, Facility, Provider, Referral


class FacilityRepository:
    """Repository for facility and department database operations"""

    @staticmethod
    def get_facilities(db: Session, with_slots: bool = False) -> list[Facility]:
        options = selectinload(Facility.departments)
        if with_slots:
            options = options.selectinload(Department.slots)
        return db.query(Facility).options(options).order_by(Facility.id.asc()).all()

    @staticmethod
    def get_facility(db: Session, facility_id: int) -> Optional[Facility]:
        return db.query(Facility).filter(Facility.id == facility_id).first()

    @staticmethod
    def count_facilities(db: Session) -> int:
        return db.query(func.count(Facility.id)).scalar() or 0

    @staticmethod
    def create_facility(db: Session, department_names: list[str], **facility_data) -> Facility:
        """Create a facility together with its initial departments"""
        facility = Facility(**facility_data)
        facility.departments = [Department(name=name) for name in department_names]
        db.add(facility)
        db.commit()
        db.refresh(facility)
        return facility

    @staticmethod
    def get_departments(db: Session, facility_id: int) -> list[Department]:
        return (
            db.query(Department)
            .filter(Department.facility_id == facility_id)
            .order_by(Department.id.asc())
            .all()
        )

    @staticmethod
    def get_department(
        db: Session, department_id: int, facility_id: Optional[int] = None
    ) -> Optional[Department]:
        query = db.query(Department).filter(Department.id == department_id)
        if facility_id is not None:
            query = query.filter(Department.facility_id == facility_id)
        return query.first()

    @staticmethod
    def get_department_by_name(db: Session, facility_id: int, name: str) -> Optional[Department]:
        return (
            db.query(Department)
            .filter(Department.facility_id == facility_id, func.lower(Department.name) == name.lower())
            .first()
        )

    @staticmethod
    def create_department(db: Session, facility_id: int, name: str) -> Department:
        department = Department(facility_id=facility_id, name=name)
        db.add(department)
        db.commit()
        db.refresh(department)
        return department

    @staticmethod
    def update_department(db: Session, department: Department, **updates) -> Department:
        for key, value in updates.items():
            if value is not None and hasattr(department, key):
                setattr(department, key, value)

        db.commit()
        db.refresh(department)
        return department

    @staticmethod
    def has_referrals(db: Session, department_id: int) -> bool:
        count = (
            db.query(func.count(Referral.id))
            .filter(Referral.to_department_id == department_id)
            .scalar()
        )
        return bool(count)

    @staticmethod
    def delete_department(db: Session, department: Department) -> None:
        """Delete a department and its slots; its providers become unassigned"""
        db.query(Provider).filter(Provider.department_id == department.id).update(
            {Provider.department_id: None}, synchronize_session=False
        )
        db.delete(department)
        db.commit()
