"""Speciality service"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Speciality
from .repository import SpecialityRepository
from .schemas import SpecialityCreate, SpecialityUpdate

logger = logging.getLogger(__name__)


class SpecialityService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SpecialityRepository()

    def get_specialities(self) -> list[Speciality]:
        return self.repo.get_specialities(self.db)

    def get_speciality(self, speciality_id: int) -> Speciality:
        speciality = self.repo.get_speciality(self.db, speciality_id)
        if not speciality:
            raise HTTPException(status_code=404, detail="Speciality not found")
        return speciality

    def create_speciality(self, data: SpecialityCreate) -> Speciality:
        speciality = self.repo.create_speciality(
            self.db,
            name=data.name,
            description=data.description,
            department=data.department,
            services=data.services,
            referral_contact=data.referralContact,
            notes=data.notes,
            longitude=data.location.longitude if data.location else None,
            latitude=data.location.latitude if data.location else None,
        )
        logger.info(f"Speciality {speciality.id} created")
        return speciality

    def update_speciality(self, speciality_id: int, data: SpecialityUpdate) -> Speciality:
        speciality = self.get_speciality(speciality_id)
        updates = {
            "name": data.name,
            "description": data.description,
            "department": data.department,
            "services": data.services,
            "referral_contact": data.referralContact,
            "notes": data.notes,
        }
        if data.location is not None:
            updates["longitude"] = data.location.longitude
            updates["latitude"] = data.location.latitude
        return self.repo.update_speciality(self.db, speciality, **updates)

    def delete_speciality(self, speciality_id: int) -> dict:
        speciality = self.get_speciality(speciality_id)
        self.repo.delete_speciality(self.db, speciality)
        logger.info(f"Speciality {speciality_id} deleted")
        return {"message": "Speciality deleted"}
