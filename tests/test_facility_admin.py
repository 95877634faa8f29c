class TestAccount:
    def test_profile_includes_facility(self, client, world):
        resp = client.get("/facility-admin/profile", headers=world.facility_admin_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["facilityId"] == world.hospital_id
        assert body["facility"]["name"] == "City Hospital"
        assert body["facility"]["location"] == {"type": "Point", "coordinates": [28.04, -26.2]}

    def test_my_facility_embeds_slots(self, client, world):
        body = client.get("/facility-admin/my-facility", headers=world.facility_admin_headers).json()
        departments = {d["name"]: d for d in body["departments"]}
        assert set(departments) == {"Cardiology", "Radiology"}
        assert len(departments["Cardiology"]["slots"]) == 3

    def test_providers_are_refused(self, client, world):
        assert client.get("/facility/departments", headers=world.doctor_headers).status_code == 403


class TestDepartments:
    def test_crud(self, client, world):
        created = client.post("/facility/departments", json={"name": "Oncology"}, headers=world.facility_admin_headers)
        assert created.status_code == 201
        department = created.json()
        assert department["facilityId"] == world.hospital_id

        renamed = client.put(
            f"/facility/departments/{department['id']}",
            json={"name": "Oncology & Haematology"},
            headers=world.facility_admin_headers,
        )
        assert renamed.json()["name"] == "Oncology & Haematology"

        listed = client.get("/facility/departments", headers=world.facility_admin_headers).json()
        assert len(listed) == 3

        deleted = client.delete(f"/facility/departments/{department['id']}", headers=world.facility_admin_headers)
        assert deleted.json() == {"message": "Department deleted"}

    def test_duplicate_name_is_400(self, client, world):
        resp = client.post("/facility/departments", json={"name": "cardiology"}, headers=world.facility_admin_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Department already exists"

    def test_department_with_referrals_cannot_be_deleted(self, client, world, book):
        book()
        resp = client.delete(f"/facility/departments/{world.cardiology_id}", headers=world.facility_admin_headers)
        assert resp.status_code == 409

    def test_other_facility_department_is_404(self, client, world):
        resp = client.put(
            f"/facility/departments/{world.general_id}", json={"name": "Renamed"}, headers=world.facility_admin_headers
        )
        assert resp.status_code == 404


class TestPatients:
    def test_crud_is_facility_scoped(self, client, world):
        created = client.post(
            "/facility/patients",
            json={"phone": "+27831112222", "name": "Sipho", "consented": True},
            headers=world.facility_admin_headers,
        )
        assert created.status_code == 201
        patient = created.json()
        assert patient["facilityId"] == world.hospital_id

        updated = client.put(
            f"/facility/patients/{patient['id']}", json={"surname": "Zulu"}, headers=world.facility_admin_headers
        )
        assert updated.json()["surname"] == "Zulu"

        foreign = client.put(
            f"/facility/patients/{patient['id']}", json={"surname": "X"}, headers=world.clinic_admin_headers
        )
        assert foreign.status_code == 404

        deleted = client.delete(f"/facility/patients/{patient['id']}", headers=world.facility_admin_headers)
        assert deleted.status_code == 200

    def test_phone_taken_by_other_patient_is_400(self, client, world):
        resp = client.put(
            f"/facility/patients/{world.bongani_id}",
            json={"phone": "+27821234567"},
            headers=world.facility_admin_headers,
        )
        assert resp.status_code == 400

    def test_blank_phone_is_400_and_keeps_the_old_one(self, client, world):
        resp = client.put(
            f"/facility/patients/{world.bongani_id}", json={"phone": ""}, headers=world.facility_admin_headers
        )
        assert resp.status_code == 400

        patients = {p["id"]: p for p in client.get("/facility/patients", headers=world.facility_admin_headers).json()}
        assert patients[world.bongani_id]["phone"] == "+27829876543"

    def test_patient_with_referrals_cannot_be_deleted(self, client, world, book):
        book()
        resp = client.delete(f"/facility/patients/{world.alice_id}", headers=world.facility_admin_headers)
        assert resp.status_code == 409


class TestProviders:
    def test_create_in_own_facility(self, client, world):
        resp = client.post(
            "/facility/providers",
            json={
                "email": "coordinator@cityhospital.org",
                "password": "long-enough-1",
                "name": "Coordinator",
                "role": "coordinator",
                "departmentId": world.radiology_id,
                "permissions": ["create_referrals"],
                # Ignored: facility admins always create into their own facility
                "facilityId": world.clinic_id,
            },
            headers=world.facility_admin_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["facilityId"] == world.hospital_id
        assert body["department"] == "Radiology"

    def test_department_must_be_in_facility(self, client, world):
        resp = client.post(
            "/facility/providers",
            json={
                "email": "wrong@cityhospital.org",
                "password": "long-enough-1",
                "name": "Wrong",
                "role": "nurse",
                "departmentId": world.general_id,
            },
            headers=world.facility_admin_headers,
        )
        assert resp.status_code == 404

    def test_blank_email_is_400(self, client, world):
        resp = client.post(
            "/facility/providers",
            json={"email": " ", "password": "long-enough-1", "name": "Blank", "role": "nurse"},
            headers=world.facility_admin_headers,
        )
        assert resp.status_code == 400

    def test_update_and_deactivate(self, client, world):
        updated = client.put(
            f"/facility/providers/{world.nurse_id}",
            json={"permissions": ["manage_slots"]},
            headers=world.facility_admin_headers,
        )
        assert updated.json()["permissions"] == ["manage_slots"]
        assert client.get("/provider/slots", headers=world.nurse_headers).status_code == 200

        resp = client.delete(f"/facility/providers/{world.nurse_id}", headers=world.facility_admin_headers)
        assert resp.json() == {"message": "Provider deactivated"}
        assert client.get("/provider/slots", headers=world.nurse_headers).status_code == 401

    def test_other_facility_provider_is_404(self, client, world):
        resp = client.delete(f"/facility/providers/{world.clinic_doctor_id}", headers=world.facility_admin_headers)
        assert resp.status_code == 404

    def test_list(self, client, world):
        providers = client.get("/facility/providers", headers=world.facility_admin_headers).json()
        assert {p["id"] for p in providers} == {world.doctor_id, world.nurse_id}


def test_facility_analytics(client, world):
    resp = client.get("/facility/analytics", headers=world.facility_admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "totalPatients": 2,
        "activeSlots": 3,
        "upcomingEvents": 1,
        "providers": 2,
        "departments": 2,
    }
