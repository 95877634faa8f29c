import pytest

INTAKE = {
    "firstName": "Nomsa",
    "middleName": "Grace",
    "lastName": "Mthembu",
    "dateOfBirth": "1987-03-14",
    "gender": "female",
    "identityNumber": "8703140123088",
    "preferredLanguage": "zu",
    "phone": "082 444 5555",
    "email": "Nomsa@Example.org",
    "address": "12 Vilakazi Street",
    "city": "Soweto",
    "province": "Gauteng",
    "zipCode": "1804",
    "emergencyName": "Sibusiso Mthembu",
    "emergencyRelationship": "Brother",
    "emergencyPhone": "+27 83 111 2222",
    "insuranceProvider": "Discovery",
    "policyNumber": "POL-1",
    "allergies": "Penicillin",
    "medications": "None",
    "medicalConditions": "Asthma",
    "previousSurgeries": "None",
    "familyHistory": "Diabetes",
}


@pytest.fixture()
def patient_file(client, world):
    resp = client.post("/patients", json=INTAKE, headers=world.doctor_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreate:
    def test_normalizes_contacts(self, patient_file):
        assert patient_file["phone"] == "+27824445555"
        assert patient_file["emergencyPhone"] == "+27831112222"
        assert patient_file["email"] == "nomsa@example.org"
        assert patient_file["dateOfBirth"] == "1987-03-14"
        assert patient_file["appointments"] == []

    def test_duplicate_identity_number_is_400(self, client, world, patient_file):
        resp = client.post("/patients", json=INTAKE, headers=world.facility_admin_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Identity number already registered"
        assert len(client.get("/patients", headers=world.doctor_headers).json()) == 1

    @pytest.mark.parametrize(
        "field,value",
        [
            ("identityNumber", "  "),
            ("allergies", ""),
            ("phone", ""),
            ("emergencyPhone", "123"),
            ("email", "not-an-email"),
            ("gender", "unknown"),
            ("dateOfBirth", "2999-01-01"),
        ],
    )
    def test_invalid_fields_are_400(self, client, world, field, value):
        resp = client.post("/patients", json={**INTAKE, field: value}, headers=world.doctor_headers)
        assert resp.status_code == 400

    def test_missing_required_field_is_400(self, client, world):
        payload = {k: v for k, v in INTAKE.items() if k != "familyHistory"}
        assert client.post("/patients", json=payload, headers=world.doctor_headers).status_code == 400


class TestAccess:
    def test_requires_token(self, client, world):
        assert client.get("/patients").status_code == 401

    def test_patients_are_refused(self, client, world):
        assert client.get("/patients", headers=world.alice_headers).status_code == 403
        assert client.post("/patients", json=INTAKE, headers=world.alice_headers).status_code == 403


class TestLookupAndAppointments:
    def test_get_by_identity_number(self, client, world, patient_file):
        resp = client.get("/patients/8703140123088", headers=world.admin_headers)
        assert resp.status_code == 200
        assert resp.json()["id"] == patient_file["id"]

    def test_unknown_identity_number_is_404(self, client, world):
        resp = client.get("/patients/0000000000000", headers=world.doctor_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Patient file not found"

    def test_appointments_are_appended_in_date_order(self, client, world, patient_file):
        url = f"/patients/{patient_file['id']}/appointments"
        client.post(
            url,
            json={"hospital": "City Hospital", "doctor": "Dr Dlamini", "date": "2024-06-01T09:00:00"},
            headers=world.doctor_headers,
        )
        resp = client.post(
            url,
            json={
                "hospital": "Township Clinic",
                "doctor": "Dr Naidoo",
                "date": "2024-02-10T14:30:00+02:00",
                "reason": "Asthma review",
            },
            headers=world.doctor_headers,
        )
        assert resp.status_code == 201
        appointments = resp.json()["appointments"]
        assert [a["doctor"] for a in appointments] == ["Dr Naidoo", "Dr Dlamini"]
        assert appointments[0]["date"] == "2024-02-10T12:30:00"
        assert appointments[0]["reason"] == "Asthma review"

        listed = client.get("/patients/8703140123088", headers=world.doctor_headers).json()
        assert len(listed["appointments"]) == 2

    def test_appointment_needs_hospital_and_doctor(self, client, world, patient_file):
        resp = client.post(
            f"/patients/{patient_file['id']}/appointments",
            json={"hospital": "", "doctor": "Dr Dlamini", "date": "2024-06-01T09:00:00"},
            headers=world.doctor_headers,
        )
        assert resp.status_code == 400

    def test_appointment_for_unknown_file_is_404(self, client, world):
        resp = client.post(
            "/patients/9999/appointments",
            json={"hospital": "City Hospital", "doctor": "Dr Dlamini", "date": "2024-06-01T09:00:00"},
            headers=world.doctor_headers,
        )
        assert resp.status_code == 404
