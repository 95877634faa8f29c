"""Auth service - credential checks and token issuance for every account type"""

import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import ROLE_ADMIN, ROLE_FACILITY_ADMIN, ROLE_PATIENT, ROLE_PROVIDER
from ...models import Admin, FacilityAdmin, Patient, Provider
from ...security_utils import create_access_token, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Verifies credentials and issues role-scoped access tokens

    Unknown accounts and wrong passwords get the same 401 so logins
    cannot be used to probe which emails or phones are registered.
    """

    def __init__(self, db: Session):
        self.db = db

    def _reject(self, role: str, identifier: str):
        logger.warning(f"🔒 Failed {role} login for {identifier}")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    def login_admin(self, email: str, password: str) -> tuple[str, Admin]:
        admin = self.db.query(Admin).filter(Admin.email == email).first()
        if not admin or not admin.is_active or not verify_password(password, admin.password_hash):
            self._reject(ROLE_ADMIN, email)

        admin.last_login = datetime.utcnow()
        self.db.commit()
        logger.info(f"✅ Admin {admin.id} logged in")
        return create_access_token(admin.id, ROLE_ADMIN), admin

    def login_provider(self, email: str, password: str) -> tuple[str, Provider]:
        provider = self.db.query(Provider).filter(Provider.email == email).first()
        if not provider or not verify_password(password, provider.password_hash):
            self._reject(ROLE_PROVIDER, email)
        if not provider.is_active:
            raise HTTPException(status_code=403, detail="Account is deactivated")

        provider.last_login = datetime.utcnow()
        self.db.commit()
        logger.info(f"✅ Provider {provider.id} logged in")
        token = create_access_token(provider.id, ROLE_PROVIDER, extra={"facilityId": provider.facility_id})
        return token, provider

    def login_patient(self, phone: str, password: str) -> tuple[str, Patient]:
        patient = self.db.query(Patient).filter(Patient.phone == phone).first()
        if not patient or not verify_password(password, patient.password_hash):
            self._reject(ROLE_PATIENT, phone)

        logger.info(f"✅ Patient {patient.id} logged in")
        return create_access_token(patient.id, ROLE_PATIENT), patient

    def login_facility_admin(self, email: str, password: str) -> tuple[str, FacilityAdmin]:
        facility_admin = self.db.query(FacilityAdmin).filter(FacilityAdmin.email == email).first()
        if not facility_admin or not verify_password(password, facility_admin.password_hash):
            self._reject(ROLE_FACILITY_ADMIN, email)

        logger.info(f"✅ Facility admin {facility_admin.id} logged in")
        token = create_access_token(
            facility_admin.id, ROLE_FACILITY_ADMIN, extra={"facilityId": facility_admin.facility_id}
        )
        return token, facility_admin
