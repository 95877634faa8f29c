import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.pop("REDIS_URL", None)
os.environ.pop("REDIS_HOST", None)

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from carelink.auth import ROLE_ADMIN, ROLE_FACILITY_ADMIN, ROLE_PATIENT, ROLE_PROVIDER
from carelink.database import Base, build_engine, get_db
from carelink.main import app
from carelink.models import (
    PROVIDER_PERMISSIONS,
    Admin,
    Department,
    Facility,
    FacilityAdmin,
    Patient,
    Provider,
    Slot,
)
from carelink.models_event import MobileClinicEvent
from carelink.rate_limiter import reset_rate_limits
from carelink.security_utils import create_access_token, hash_password

PASSWORD = "correct-horse-9"
# Hashed once for every seeded account
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'carelink-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits()
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_rate_limits()


def auth_headers(role: str, account_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(account_id, role)}"}


@pytest.fixture()
def world(db):
    """Two facilities with departments, slots, staff, patients and an event"""
    now = datetime.utcnow().replace(microsecond=0)

    hospital = Facility(name="City Hospital", type="hospital", longitude=28.04, latitude=-26.2)
    cardiology = Department(name="Cardiology")
    radiology = Department(name="Radiology")
    hospital.departments = [cardiology, radiology]

    clinic = Facility(name="Township Clinic", type="clinic", longitude=27.9, latitude=-26.1)
    general = Department(name="General")
    clinic.departments = [general]
    db.add_all([hospital, clinic])
    db.flush()

    soon = Slot(department_id=cardiology.id, start_at=now + timedelta(hours=2), end_at=now + timedelta(hours=3))
    later = Slot(department_id=cardiology.id, start_at=now + timedelta(days=3), end_at=now + timedelta(days=3, hours=1))
    closed = Slot(
        department_id=cardiology.id,
        start_at=now + timedelta(days=4),
        end_at=now + timedelta(days=4, hours=1),
        status="closed",
    )
    scan = Slot(department_id=radiology.id, start_at=now + timedelta(days=1), end_at=now + timedelta(days=1, hours=1))
    clinic_slot = Slot(department_id=general.id, start_at=now + timedelta(days=2), end_at=now + timedelta(days=2, hours=1))

    doctor = Provider(
        email="doctor@cityhospital.org",
        password_hash=PASSWORD_HASH,
        name="Dr Dlamini",
        facility_id=hospital.id,
        department_id=cardiology.id,
        role="doctor",
        permissions=list(PROVIDER_PERMISSIONS),
    )
    nurse = Provider(
        email="nurse@cityhospital.org",
        password_hash=PASSWORD_HASH,
        name="Nurse Khumalo",
        facility_id=hospital.id,
        department_id=radiology.id,
        role="nurse",
        permissions=[],
    )
    clinic_doctor = Provider(
        email="doctor@townshipclinic.org",
        password_hash=PASSWORD_HASH,
        name="Dr Naidoo",
        facility_id=clinic.id,
        department_id=general.id,
        role="doctor",
        permissions=list(PROVIDER_PERMISSIONS),
    )
    alice = Patient(
        phone="+27821234567",
        name="Alice",
        surname="Mokoena",
        preferred_language="zu",
        consented=True,
        facility_id=hospital.id,
        password_hash=PASSWORD_HASH,
    )
    bongani = Patient(phone="+27829876543", name="Bongani", facility_id=hospital.id)
    facility_admin = FacilityAdmin(
        name="Hospital Admin",
        email="admin@cityhospital.org",
        password_hash=PASSWORD_HASH,
        facility_id=hospital.id,
    )
    clinic_admin = FacilityAdmin(
        name="Clinic Admin",
        email="admin@townshipclinic.org",
        password_hash=PASSWORD_HASH,
        facility_id=clinic.id,
    )
    admin = Admin(email="root@carelink.org", password_hash=PASSWORD_HASH, name="Root")
    event = MobileClinicEvent(
        facility_id=hospital.id,
        title="Mobile eye clinic",
        type="mobile_clinic",
        longitude=28.05,
        latitude=-26.21,
        services=["eye tests"],
        starts_at=now + timedelta(days=5),
        capacity=10,
    )

    db.add_all(
        [soon, later, closed, scan, clinic_slot, doctor, nurse, clinic_doctor, alice, bongani]
        + [facility_admin, clinic_admin, admin, event]
    )
    db.commit()

    return SimpleNamespace(
        now=now,
        hospital_id=hospital.id,
        clinic_id=clinic.id,
        cardiology_id=cardiology.id,
        radiology_id=radiology.id,
        general_id=general.id,
        soon_slot_id=soon.id,
        later_slot_id=later.id,
        closed_slot_id=closed.id,
        scan_slot_id=scan.id,
        clinic_slot_id=clinic_slot.id,
        doctor_id=doctor.id,
        nurse_id=nurse.id,
        clinic_doctor_id=clinic_doctor.id,
        alice_id=alice.id,
        bongani_id=bongani.id,
        facility_admin_id=facility_admin.id,
        clinic_admin_id=clinic_admin.id,
        admin_id=admin.id,
        event_id=event.id,
        doctor_headers=auth_headers(ROLE_PROVIDER, doctor.id),
        nurse_headers=auth_headers(ROLE_PROVIDER, nurse.id),
        clinic_doctor_headers=auth_headers(ROLE_PROVIDER, clinic_doctor.id),
        alice_headers=auth_headers(ROLE_PATIENT, alice.id),
        bongani_headers=auth_headers(ROLE_PATIENT, bongani.id),
        facility_admin_headers=auth_headers(ROLE_FACILITY_ADMIN, facility_admin.id),
        clinic_admin_headers=auth_headers(ROLE_FACILITY_ADMIN, clinic_admin.id),
        admin_headers=auth_headers(ROLE_ADMIN, admin.id),
    )


@pytest.fixture()
def book(client, world):
    """Book a referral for a patient through the API and return its JSON"""

    def _book(slot_id=None, patient_id=None, department_id=None, reason="Chest pain"):
        resp = client.post(
            "/referrals",
            json={
                "fromFacilityId": world.clinic_id,
                "toDepartmentId": department_id or world.cardiology_id,
                "patientId": patient_id or world.alice_id,
                "slotId": slot_id or world.soon_slot_id,
                "reason": reason,
            },
            headers=world.doctor_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _book
