from datetime import timedelta

from carelink.models_event import EventRsvp, MobileClinicEvent


def _rsvp(client, world, action, headers=None, event_id=None):
    return client.post(
        f"/events/{event_id or world.event_id}/rsvp",
        json={"action": action},
        headers=headers or world.alice_headers,
    )


def _entries(db, event_id, patient_id):
    db.expire_all()
    return db.query(EventRsvp).filter_by(event_id=event_id, patient_id=patient_id).count()


class TestRsvp:
    def test_yes_is_idempotent(self, client, db, world):
        first = _rsvp(client, world, "yes")
        second = _rsvp(client, world, "yes")
        assert first.status_code == 200 and second.status_code == 200
        assert second.json()["message"] == "RSVP updated"
        assert second.json()["event"]["rsvpCount"] == 1
        assert _entries(db, world.event_id, world.alice_id) == 1

    def test_yes_then_no_then_yes(self, client, db, world):
        _rsvp(client, world, "yes")
        no = _rsvp(client, world, "no")
        assert no.json()["event"]["rsvpCount"] == 0
        assert _entries(db, world.event_id, world.alice_id) == 0

        rsvps = _rsvp(client, world, "yes").json()["event"]["rsvps"]
        assert [(r["patientId"], r["status"]) for r in rsvps] == [(world.alice_id, "yes")]

    def test_cancel_removes_entry(self, client, db, world):
        _rsvp(client, world, "yes")
        _rsvp(client, world, "cancel")
        assert _entries(db, world.event_id, world.alice_id) == 0

    def test_status_field_is_accepted(self, client, world):
        resp = client.post(f"/events/{world.event_id}/rsvp", json={"status": "YES"}, headers=world.alice_headers)
        assert resp.status_code == 200
        assert resp.json()["event"]["rsvpCount"] == 1

    def test_invalid_answer_is_400(self, client, world):
        assert _rsvp(client, world, "maybe").status_code == 400

    def test_unknown_event_is_404(self, client, world):
        assert _rsvp(client, world, "yes", event_id=9999).status_code == 404

    def test_full_event_rejects_new_yes(self, client, db, world):
        db.get(MobileClinicEvent, world.event_id).capacity = 1
        db.commit()

        assert _rsvp(client, world, "yes").status_code == 200
        full = _rsvp(client, world, "yes", headers=world.bongani_headers)
        assert full.status_code == 409
        assert full.json()["detail"] == "Event is full"

        # An existing attendee repeating "yes" keeps their place
        assert _rsvp(client, world, "yes").status_code == 200
        assert _entries(db, world.event_id, world.alice_id) == 1

    def test_public_link(self, client, db, world):
        resp = client.post(
            f"/events/public/{world.event_id}/{world.bongani_id}/rsvp", json={"action": "yes"}
        )
        assert resp.status_code == 200
        assert _entries(db, world.event_id, world.bongani_id) == 1

        missing = client.post(f"/events/public/{world.event_id}/9999/rsvp", json={"action": "yes"})
        assert missing.status_code == 404


class TestEventDetails:
    def test_staff_see_patient_contacts(self, client, world):
        _rsvp(client, world, "yes")
        resp = client.get(f"/events/{world.event_id}/details", headers=world.facility_admin_headers)
        assert resp.status_code == 200
        rsvp = resp.json()["rsvps"][0]
        assert rsvp["name"] == "Alice"
        assert rsvp["phone"] == "+27821234567"
        assert rsvp["preferredLanguage"] == "zu"

    def test_patients_cannot_see_details(self, client, world):
        assert client.get(f"/events/{world.event_id}/details", headers=world.alice_headers).status_code == 403


class TestPatientEvents:
    def test_upcoming_events_carry_my_rsvp(self, client, world):
        before = client.get("/patient/events", headers=world.alice_headers).json()
        assert [e["id"] for e in before] == [world.event_id]
        assert before[0]["myRsvp"] is None

        _rsvp(client, world, "yes")
        after = client.get("/patient/events", headers=world.alice_headers).json()
        assert after[0]["myRsvp"] == "yes"

    def test_past_event_shown_only_when_rsvped(self, client, db, world):
        event = db.get(MobileClinicEvent, world.event_id)
        event.starts_at = world.now - timedelta(days=1)
        db.commit()

        assert client.get("/patient/events", headers=world.bongani_headers).json() == []
        client.post(f"/events/public/{world.event_id}/{world.alice_id}/rsvp", json={"action": "yes"})
        assert len(client.get("/patient/events", headers=world.alice_headers).json()) == 1


class TestManageEvents:
    def _payload(self, world, **overrides):
        payload = {
            "title": "Meds pickup",
            "type": "meds_pickup",
            "location": {"type": "Point", "coordinates": [28.1, -26.3]},
            "services": ["chronic meds"],
            "startsAt": (world.now + timedelta(days=9)).isoformat(),
            "capacity": 50,
        }
        payload.update(overrides)
        return payload

    def test_provider_crud(self, client, world):
        created = client.post("/provider/events", json=self._payload(world), headers=world.doctor_headers)
        assert created.status_code == 201
        event = created.json()
        assert event["facilityId"] == world.hospital_id
        assert event["location"]["coordinates"] == [28.1, -26.3]

        listed = client.get("/provider/events", headers=world.doctor_headers).json()
        assert {e["id"] for e in listed} == {world.event_id, event["id"]}

        updated = client.patch(
            f"/provider/events/{event['id']}", json={"capacity": 20}, headers=world.doctor_headers
        )
        assert updated.json()["capacity"] == 20

        assert client.delete(f"/provider/events/{event['id']}", headers=world.doctor_headers).status_code == 200

    def test_capacity_cannot_drop_below_rsvps(self, client, world):
        _rsvp(client, world, "yes")
        _rsvp(client, world, "yes", headers=world.bongani_headers)
        resp = client.put(
            f"/facility/events/{world.event_id}", json={"capacity": 1}, headers=world.facility_admin_headers
        )
        assert resp.status_code == 409

    def test_invalid_type_and_capacity_are_400(self, client, world):
        bad_type = client.post(
            "/facility/events", json=self._payload(world, type="concert"), headers=world.facility_admin_headers
        )
        zero = client.post(
            "/facility/events", json=self._payload(world, capacity=0), headers=world.facility_admin_headers
        )
        assert bad_type.status_code == 400
        assert zero.status_code == 400

    def test_other_facility_event_is_404(self, client, world):
        resp = client.delete(f"/facility/events/{world.event_id}", headers=world.clinic_admin_headers)
        assert resp.status_code == 404

    def test_requires_manage_events(self, client, world):
        assert client.get("/provider/events", headers=world.nurse_headers).status_code == 403
