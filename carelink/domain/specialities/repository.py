"""Speciality repository - Database operations for the speciality directory"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Speciality


class SpecialityRepository:
    """Repository for speciality database operations"""

    @staticmethod
    def get_specialities(db: Session) -> list[Speciality]:
        return db.query(Speciality).order_by(Speciality.name.asc(), Speciality.id.asc()).all()

    @staticmethod
    def get_speciality(db: Session, speciality_id: int) -> Optional[Speciality]:
        return db.query(Speciality).filter(Speciality.id == speciality_id).first()

    @staticmethod
    def create_speciality(db: Session, **speciality_data) -> Speciality:
        speciality = Speciality(**speciality_data)
        db.add(speciality)
        db.commit()
        db.refresh(speciality)
        return speciality

    @staticmethod
    def update_speciality(db: Session, speciality: Speciality, **updates) -> Speciality:
        for key, value in updates.items():
            if value is not None and hasattr(speciality, key):
                setattr(speciality, key, value)

        db.commit()
        db.refresh(speciality)
        return speciality

    @staticmethod
    def delete_speciality(db: Session, speciality: Speciality) -> None:
        db.delete(speciality)
        db.commit()
