"""Provider repository - Database operations for providers"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Provider


class ProviderRepository:
    """Repository for provider database operations"""

    @staticmethod
    def get_provider(db: Session, provider_id: int, facility_id: Optional[int] = None) -> Optional[Provider]:
        query = db.query(Provider).filter(Provider.id == provider_id)
        if facility_id is not None:
            query = query.filter(Provider.facility_id == facility_id)
        return query.first()

    @staticmethod
    def get_provider_by_email(db: Session, email: str) -> Optional[Provider]:
        return db.query(Provider).filter(Provider.email == email.lower()).first()

    @staticmethod
    def get_providers(
        db: Session, facility_id: Optional[int] = None, active_only: bool = False
    ) -> list[Provider]:
        query = db.query(Provider)
        if facility_id is not None:
            query = query.filter(Provider.facility_id == facility_id)
        if active_only:
            query = query.filter(Provider.is_active.is_(True))
        return query.order_by(Provider.created_at.desc(), Provider.id.desc()).all()

    @staticmethod
    def get_department_providers(db: Session, department_id: int) -> list[Provider]:
        return (
            db.query(Provider)
            .filter(Provider.department_id == department_id, Provider.is_active.is_(True))
            .order_by(Provider.id.asc())
            .all()
        )

    @staticmethod
    def count_providers(db: Session, facility_id: Optional[int] = None, active_only: bool = True) -> int:
        query = db.query(func.count(Provider.id))
        if facility_id is not None:
            query = query.filter(Provider.facility_id == facility_id)
        if active_only:
            query = query.filter(Provider.is_active.is_(True))
        return query.scalar() or 0

    @staticmethod
    def create_provider(db: Session, **provider_data) -> Provider:
        provider = Provider(**provider_data)
        db.add(provider)
        db.commit()
        db.refresh(provider)
        return provider

    @staticmethod
    def update_provider(db: Session, provider: Provider, **updates) -> Provider:
        """Update a provider with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(provider, key):
                setattr(provider, key, value)

        db.commit()
        db.refresh(provider)
        return provider
