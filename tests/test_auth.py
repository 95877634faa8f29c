from datetime import timedelta

from carelink.auth import ROLE_PATIENT, ROLE_PROVIDER
from carelink.config import LOGIN_RATE_LIMIT
from carelink.models import Provider
from carelink.security_utils import create_access_token

from .conftest import PASSWORD, auth_headers


class TestBearerToken:
    def test_missing_token_is_401(self, client, world):
        resp = client.get("/patient/profile")
        assert resp.status_code == 401

    def test_malformed_token_is_401(self, client, world):
        resp = client.get("/patient/profile", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert "Invalid token format" in resp.json()["detail"]

    def test_bad_signature_is_401(self, client, world):
        token = create_access_token(world.alice_id, ROLE_PATIENT)
        header, payload, _ = token.split(".")
        resp = client.get("/patient/profile", headers={"Authorization": f"Bearer {header}.{payload}.forged"})
        assert resp.status_code == 401

    def test_expired_token_is_401_with_marker_header(self, client, world):
        token = create_access_token(world.alice_id, ROLE_PATIENT, expires_delta=timedelta(seconds=-30))
        resp = client.get("/patient/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.headers.get("X-Token-Expired") == "true"

    def test_token_for_deleted_account_is_401(self, client, world):
        resp = client.get("/patient/profile", headers=auth_headers(ROLE_PATIENT, 9999))
        assert resp.status_code == 401

    def test_unknown_role_is_401(self, client, world):
        resp = client.get("/patient/profile", headers=auth_headers("superuser", world.alice_id))
        assert resp.status_code == 401

    def test_wrong_role_is_403(self, client, world):
        resp = client.get("/patient/profile", headers=world.doctor_headers)
        assert resp.status_code == 403

    def test_missing_permission_is_403(self, client, world):
        resp = client.get("/provider/slots", headers=world.nurse_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Permission denied: manage_slots"

    def test_deactivated_provider_token_is_rejected(self, client, db, world):
        db.get(Provider, world.nurse_id).is_active = False
        db.commit()
        resp = client.get("/provider/dashboard", headers=world.nurse_headers)
        assert resp.status_code == 401


class TestLogin:
    def test_provider_login_returns_usable_token(self, client, world):
        resp = client.post("/provider/login", json={"email": "Doctor@CityHospital.org", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["provider"]["id"] == world.doctor_id
        assert "password" not in str(body["provider"]).lower()

        headers = {"Authorization": f"Bearer {body['token']}"}
        assert client.get("/provider/dashboard", headers=headers).status_code == 200

    def test_provider_login_wrong_password(self, client, world):
        resp = client.post("/provider/login", json={"email": "doctor@cityhospital.org", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    def test_deactivated_provider_cannot_log_in(self, client, db, world):
        db.get(Provider, world.doctor_id).is_active = False
        db.commit()
        resp = client.post("/provider/login", json={"email": "doctor@cityhospital.org", "password": PASSWORD})
        assert resp.status_code == 403

    def test_patient_login_with_local_phone_format(self, client, world):
        resp = client.post("/patient/login", json={"phone": "082 123 4567", "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["patient"]["id"] == world.alice_id

    def test_patient_without_password_cannot_log_in(self, client, world):
        resp = client.post("/patient/login", json={"phone": "+27829876543", "password": PASSWORD})
        assert resp.status_code == 401

    def test_admin_and_facility_admin_login(self, client, world):
        admin = client.post("/admin/login", json={"email": "root@carelink.org", "password": PASSWORD})
        assert admin.status_code == 200
        assert admin.json()["admin"]["id"] == world.admin_id

        fa = client.post("/facility-admin/login", json={"email": "admin@cityhospital.org", "password": PASSWORD})
        assert fa.status_code == 200
        assert fa.json()["facilityAdmin"]["facilityId"] == world.hospital_id

    def test_login_token_is_role_bound(self, client, world):
        body = client.post("/facility-admin/login", json={"email": "admin@cityhospital.org", "password": PASSWORD})
        headers = {"Authorization": f"Bearer {body.json()['token']}"}
        assert client.get("/admin/dashboard/stats", headers=headers).status_code == 403

    def test_login_is_rate_limited(self, client, world):
        payload = {"email": "nobody@example.org", "password": "whatever1"}
        for _ in range(LOGIN_RATE_LIMIT):
            assert client.post("/admin/login", json=payload).status_code == 401

        resp = client.post("/provider/login", json=payload)
        assert resp.status_code == 429
        assert "Retry-After" in resp.headers


def test_provider_token_carries_facility_claim(client, world):
    from carelink.security_utils import decode_access_token

    resp = client.post("/provider/login", json={"email": "doctor@cityhospital.org", "password": PASSWORD})
    claims = decode_access_token(resp.json()["token"])
    assert claims["role"] == ROLE_PROVIDER
    assert claims["facilityId"] == world.hospital_id
