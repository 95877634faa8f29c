"""Admin service - platform statistics and admin accounts"""

import logging

from sqlalchemy.orm import Session

from ...models import Admin
from ...security_utils import hash_password
from ..facilities.repository import FacilityRepository
from ..patients.repository import PatientRepository
from ..providers.repository import ProviderRepository
from ..referrals.repository import ReferralRepository

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for platform administration"""

    def __init__(self, db: Session):
        self.db = db

    def get_dashboard_stats(self) -> dict:
        return {
            "totalFacilities": FacilityRepository.count_facilities(self.db),
            "totalProviders": ProviderRepository.count_providers(self.db),
            "totalPatients": PatientRepository.count_patients(self.db),
            "activeReferrals": ReferralRepository.count_active(self.db),
        }

    def upsert_admin(self, email: str, password: str, name: str = "Administrator") -> tuple[Admin, bool]:
        """
        Create an admin, or reset the password of an existing one.

        Returns:
            Tuple of (admin, created)
        """
        email = email.strip().lower()
        admin = self.db.query(Admin).filter(Admin.email == email).first()
        created = admin is None

        if created:
            admin = Admin(email=email, name=name, password_hash=hash_password(password), is_active=True)
            self.db.add(admin)
        else:
            admin.password_hash = hash_password(password)
            admin.is_active = True

        self.db.commit()
        self.db.refresh(admin)
        logger.info(f"🔑 Admin {admin.id} {'created' if created else 'password reset'}")
        return admin, created

    def ensure_bootstrap_admin(self, email: str, password: str) -> None:
        """Create the first admin from configuration; never touches an existing account"""
        if self.db.query(Admin).filter(Admin.email == email.strip().lower()).first():
            return
        self.upsert_admin(email, password)
