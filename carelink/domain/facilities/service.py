"""Facility service - Business logic for facilities and departments"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Department, Facility
from .repository import FacilityRepository
from .schemas import DepartmentCreate, DepartmentUpdate, FacilityCreate

logger = logging.getLogger(__name__)


class FacilityService:
    """Service layer for facility business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FacilityRepository()

    def get_facilities(self, with_slots: bool = False) -> list[Facility]:
        return self.repo.get_facilities(self.db, with_slots=with_slots)

    def get_facility(self, facility_id: int) -> Facility:
        facility = self.repo.get_facility(self.db, facility_id)
        if not facility:
            raise HTTPException(status_code=404, detail="Facility not found")
        return facility

    def create_facility(self, data: FacilityCreate) -> Facility:
        facility = self.repo.create_facility(
            self.db,
            [d.name for d in data.departments],
            name=data.name,
            type=data.type,
            longitude=data.location.longitude,
            latitude=data.location.latitude,
        )
        logger.info(f"🏥 Facility {facility.id} created with {len(facility.departments)} departments")
        return facility

    def get_departments(self, facility_id: int) -> list[Department]:
        self.get_facility(facility_id)
        return self.repo.get_departments(self.db, facility_id)

    def get_department(self, facility_id: int, department_id: int) -> Department:
        department = self.repo.get_department(self.db, department_id, facility_id)
        if not department:
            raise HTTPException(status_code=404, detail="Department not found")
        return department

    def create_department(self, facility_id: int, data: DepartmentCreate) -> Department:
        self.get_facility(facility_id)
        if self.repo.get_department_by_name(self.db, facility_id, data.name):
            raise HTTPException(status_code=400, detail="Department already exists")
        try:
            return self.repo.create_department(self.db, facility_id, data.name)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Department already exists") from e

    def update_department(self, facility_id: int, department_id: int, data: DepartmentUpdate) -> Department:
        department = self.get_department(facility_id, department_id)
        existing = self.repo.get_department_by_name(self.db, facility_id, data.name)
        if existing and existing.id != department.id:
            raise HTTPException(status_code=400, detail="Department already exists")
        return self.repo.update_department(self.db, department, name=data.name)

    def delete_department(self, facility_id: int, department_id: int) -> dict:
        department = self.get_department(facility_id, department_id)
        if self.repo.has_referrals(self.db, department.id):
            raise HTTPException(
                status_code=409, detail="Department has referrals and cannot be deleted"
            )
        self.repo.delete_department(self.db, department)
        logger.info(f"🗑️ Department {department_id} deleted from facility {facility_id}")
        return {"message": "Department deleted"}
