from datetime import datetime

import pytest
from fastapi import HTTPException

from carelink.domain.referrals.schemas import ReferralCreate
from carelink.domain.referrals.service import ReferralService, _month_keys
from carelink.models import PatientNotification, Referral, Slot


def _slot_status(db, slot_id):
    db.expire_all()
    return db.get(Slot, slot_id).status


class TestCreateReferral:
    def test_books_slot_and_returns_referral(self, client, db, world, book):
        referral = book()
        assert referral["status"] == "booked"
        assert referral["slotId"] == world.soon_slot_id
        assert referral["patientId"] == world.alice_id
        assert referral["version"] == 1
        assert _slot_status(db, world.soon_slot_id) == "booked"

    def test_second_booking_of_same_slot_is_400(self, client, db, world, book):
        book()
        resp = client.post(
            "/referrals",
            json={
                "fromFacilityId": world.clinic_id,
                "toDepartmentId": world.cardiology_id,
                "patientId": world.bongani_id,
                "slotId": world.soon_slot_id,
            },
            headers=world.doctor_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Slot not available"
        assert db.query(Referral).filter(Referral.slot_id == world.soon_slot_id).count() == 1

    def test_closed_slot_is_not_bookable(self, client, world):
        resp = client.post(
            "/referrals",
            json={
                "fromFacilityId": world.clinic_id,
                "toDepartmentId": world.cardiology_id,
                "patientId": world.alice_id,
                "slotId": world.closed_slot_id,
            },
            headers=world.doctor_headers,
        )
        assert resp.status_code == 400

    def test_slot_must_belong_to_destination_department(self, client, db, world):
        resp = client.post(
            "/referrals",
            json={
                "fromFacilityId": world.clinic_id,
                "toDepartmentId": world.cardiology_id,
                "patientId": world.alice_id,
                "slotId": world.scan_slot_id,
            },
            headers=world.doctor_headers,
        )
        assert resp.status_code == 400
        assert _slot_status(db, world.scan_slot_id) == "open"

    @pytest.mark.parametrize(
        "field,detail",
        [
            ("fromFacilityId", "Facility not found"),
            ("toDepartmentId", "Department not found"),
            ("patientId", "Patient not found"),
        ],
    )
    def test_unknown_references_are_404(self, client, world, field, detail):
        payload = {
            "fromFacilityId": world.clinic_id,
            "toDepartmentId": world.cardiology_id,
            "patientId": world.alice_id,
            "slotId": world.soon_slot_id,
        }
        payload[field] = 9999
        resp = client.post("/referrals", json=payload, headers=world.doctor_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == detail

    def test_missing_fields_is_400(self, client, world):
        resp = client.post("/referrals", json={"patientId": world.alice_id}, headers=world.doctor_headers)
        assert resp.status_code == 400

    def test_requires_create_referrals_permission(self, client, world):
        resp = client.post(
            "/referrals",
            json={
                "fromFacilityId": world.clinic_id,
                "toDepartmentId": world.cardiology_id,
                "patientId": world.alice_id,
                "slotId": world.soon_slot_id,
            },
            headers=world.nurse_headers,
        )
        assert resp.status_code == 403

    def test_notifies_patient(self, client, db, world, book):
        book()
        messages = [n.message for n in db.query(PatientNotification).filter_by(patient_id=world.alice_id)]
        assert len(messages) == 1
        assert messages[0].startswith("Referral booked")


def test_concurrent_bookings_of_one_slot_yield_one_referral(session_factory, world):
    """Both sessions see the slot open; only one conditional claim can succeed"""
    first, second = session_factory(), session_factory()
    try:
        assert first.get(Slot, world.later_slot_id).status == "open"
        assert second.get(Slot, world.later_slot_id).status == "open"

        def request(patient_id):
            return ReferralCreate(
                fromFacilityId=world.clinic_id,
                toDepartmentId=world.cardiology_id,
                patientId=patient_id,
                slotId=world.later_slot_id,
            )

        winner = ReferralService(first).create_referral(request(world.alice_id))
        with pytest.raises(HTTPException) as exc_info:
            ReferralService(second).create_referral(request(world.bongani_id))

        assert exc_info.value.status_code == 400
        assert winner.status == "booked"
        assert second.query(Referral).filter(Referral.slot_id == world.later_slot_id).count() == 1
    finally:
        first.close()
        second.close()


class TestCancelReferral:
    def test_cancel_frees_slot(self, client, db, world, book):
        referral = book()
        resp = client.patch(f"/referrals/{referral['id']}/cancel", headers=world.doctor_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"
        assert _slot_status(db, world.soon_slot_id) == "open"

    def test_cancel_twice_is_400_and_changes_nothing(self, client, db, world, book):
        referral = book()
        first = client.patch(f"/referrals/{referral['id']}/cancel", headers=world.doctor_headers)
        assert first.json()["version"] == 2
        notifications = db.query(PatientNotification).filter_by(patient_id=world.alice_id).count()

        resp = client.patch(f"/referrals/{referral['id']}/cancel", headers=world.doctor_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Referral already cancelled"

        db.expire_all()
        assert db.get(Referral, referral["id"]).version == 2
        assert db.get(Slot, world.soon_slot_id).version == 3
        assert _slot_status(db, world.soon_slot_id) == "open"
        assert db.query(PatientNotification).filter_by(patient_id=world.alice_id).count() == notifications

    def test_recancel_does_not_free_a_rebooked_slot(self, client, db, world, book):
        first = book()
        client.patch(f"/referrals/{first['id']}/cancel", headers=world.doctor_headers)
        second = book(patient_id=world.bongani_id)

        resp = client.patch(f"/referrals/{first['id']}/cancel", headers=world.doctor_headers)
        assert resp.status_code == 400

        assert _slot_status(db, world.soon_slot_id) == "booked"
        assert db.get(Referral, second["id"]).status == "booked"
        assert db.get(Referral, second["id"]).slot_id == world.soon_slot_id

    def test_cancelled_slot_can_be_booked_again(self, client, db, world, book):
        first = book()
        client.patch(f"/referrals/{first['id']}/cancel", headers=world.doctor_headers)
        second = book(patient_id=world.bongani_id)
        assert second["slotId"] == world.soon_slot_id
        assert _slot_status(db, world.soon_slot_id) == "booked"

    def test_unknown_referral_is_404(self, client, world):
        assert client.patch("/referrals/9999/cancel", headers=world.doctor_headers).status_code == 404


class TestConfirmAndUpdate:
    def test_confirm_then_cancel(self, client, world, book):
        referral = book()
        confirmed = client.patch(f"/referrals/{referral['id']}/confirm", headers=world.doctor_headers)
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"
        assert confirmed.json()["version"] == 2

        cancelled = client.patch(f"/referrals/{referral['id']}/cancel", headers=world.doctor_headers)
        assert cancelled.json()["status"] == "cancelled"

        again = client.patch(f"/referrals/{referral['id']}/confirm", headers=world.doctor_headers)
        assert again.status_code == 400

    def test_update_reason(self, client, world, book):
        referral = book()
        resp = client.patch(
            f"/referrals/{referral['id']}", json={"reason": "Follow-up ECG"}, headers=world.doctor_headers
        )
        assert resp.status_code == 200
        assert resp.json()["reason"] == "Follow-up ECG"

    def test_update_slot_moves_booking(self, client, db, world, book):
        referral = book()
        resp = client.patch(
            f"/referrals/{referral['id']}", json={"slotId": world.later_slot_id}, headers=world.doctor_headers
        )
        assert resp.status_code == 200
        assert resp.json()["slotId"] == world.later_slot_id
        assert _slot_status(db, world.soon_slot_id) == "open"
        assert _slot_status(db, world.later_slot_id) == "booked"

    def test_move_to_taken_slot_changes_nothing(self, client, db, world, book):
        mine = book(slot_id=world.soon_slot_id)
        book(slot_id=world.later_slot_id, patient_id=world.bongani_id)

        resp = client.patch(
            f"/referrals/{mine['id']}", json={"slotId": world.later_slot_id}, headers=world.doctor_headers
        )
        assert resp.status_code == 400
        db.expire_all()
        assert db.get(Referral, mine["id"]).slot_id == world.soon_slot_id
        assert _slot_status(db, world.soon_slot_id) == "booked"


class TestListReferrals:
    def test_filters(self, client, world, book):
        book(slot_id=world.soon_slot_id)
        book(slot_id=world.later_slot_id, patient_id=world.bongani_id)

        everything = client.get("/referrals", headers=world.doctor_headers).json()
        assert len(everything) == 2

        alice = client.get("/referrals", params={"patientId": world.alice_id}, headers=world.admin_headers).json()
        assert [r["patientId"] for r in alice] == [world.alice_id]

        other = client.get(
            "/referrals", params={"fromFacilityId": world.hospital_id}, headers=world.facility_admin_headers
        ).json()
        assert other == []

    def test_patients_cannot_list(self, client, world):
        assert client.get("/referrals", headers=world.alice_headers).status_code == 403

    def test_provider_referrals_are_facility_scoped(self, client, world, book):
        book()
        sent = client.get("/provider/referrals", headers=world.clinic_doctor_headers).json()
        received = client.get("/provider/referrals", headers=world.doctor_headers).json()
        assert len(sent) == 1 and len(received) == 1
        assert received[0]["toDepartmentName"] == "Cardiology"
        assert received[0]["patient"]["name"] == "Alice"


class TestAnalytics:
    def test_status_counts_and_monthly_trend(self, client, world, book):
        first = book(slot_id=world.soon_slot_id)
        book(slot_id=world.later_slot_id, patient_id=world.bongani_id)
        client.patch(f"/referrals/{first['id']}/cancel", headers=world.doctor_headers)

        resp = client.get("/referral/analytics", headers=world.doctor_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["statusCounts"]["booked"] == 1
        assert body["statusCounts"]["cancelled"] == 1
        assert body["statusCounts"]["total"] == 2

        monthly = body["monthly"]
        assert len(monthly) == 6
        assert monthly[-1]["month"] == f"{datetime.utcnow():%Y-%m}"
        assert monthly[-1]["total"] == 2

    def test_patients_are_refused(self, client, world):
        assert client.get("/referral/analytics", headers=world.alice_headers).status_code == 403


def test_month_keys_cross_year_boundary():
    assert _month_keys(datetime(2024, 2, 15), 6) == [
        "2023-09",
        "2023-10",
        "2023-11",
        "2023-12",
        "2024-01",
        "2024-02",
    ]
