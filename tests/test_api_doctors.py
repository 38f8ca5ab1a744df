from datetime import time

import pytest

from accounts.enums import UserRole
from catalog.models import Condition, Institution
from doctors.enums import PayoutStatus
from doctors.models import DoctorService, Education, Payout, PayoutMethod, Schedule

pytestmark = pytest.mark.django_db


# ── directory ────────────────────────────────────────────────────────

def test_directory_hides_unapproved_doctors(client_for, patient, make_doctor, admin_user):
    active = make_doctor()
    pending = make_doctor(is_active=False)

    r = client_for(patient.user).get("/api/doctors/")
    assert [row["id"] for row in r.data["data"]] == [active.pk]
    assert client_for(patient.user).get(f"/api/doctors/{pending.pk}/").status_code == 404

    # a pending doctor still sees their own profile
    r = client_for(pending.user).get("/api/doctors/")
    assert {row["id"] for row in r.data["data"]} == {active.pk, pending.pk}

    r = client_for(admin_user).get("/api/doctors/")
    assert {row["id"] for row in r.data["data"]} == {active.pk, pending.pk}


def test_directory_filters(client_for, patient, make_doctor, service):
    offers, other = make_doctor(), make_doctor(first_name="Zacarias")
    DoctorService.objects.create(doctor=offers, service=service, amount=30)
    client = client_for(patient.user)

    r = client.get("/api/doctors/", {"service": service.pk})
    assert [row["id"] for row in r.data["data"]] == [offers.pk]
    r = client.get("/api/doctors/", {"s": "zacar"})
    assert [row["id"] for row in r.data["data"]] == [other.pk]


def test_doctor_profile_updates(client_for, make_doctor, admin_user):
    me, other = make_doctor(is_active=False), make_doctor()
    client = client_for(me.user)

    r = client.patch(f"/api/doctors/{me.pk}/", {"biography": "EMDR", "is_active": True}, format="json")
    assert r.status_code == 200
    me.refresh_from_db()
    assert me.biography == "EMDR"
    assert me.is_active is False

    assert client.patch(f"/api/doctors/{other.pk}/", {"biography": "x"}, format="json").status_code == 403

    r = client_for(admin_user).patch(f"/api/doctors/{me.pk}/", {"is_active": True}, format="json")
    assert r.status_code == 200
    me.refresh_from_db()
    assert me.is_active is True


def test_only_admin_creates_doctors(client_for, patient, admin_user, make_user):
    payload = {
        "ci": 777, "first_name": "Rosa", "first_last_name": "Diaz", "birth_date": "1979-04-04",
        "address": "Caracas", "biography": "Family therapy",
    }
    assert client_for(patient.user).post("/api/doctors/", payload, format="json").status_code == 403

    client = client_for(admin_user)
    assert client.post("/api/doctors/", payload, format="json").status_code == 400
    r = client.post("/api/doctors/", {**payload, "user": make_user(UserRole.DOCTOR).pk}, format="json")
    assert r.status_code == 201


# ── children ─────────────────────────────────────────────────────────

def test_payout_methods_are_private(client_for, make_doctor, patient, admin_user):
    owner, other = make_doctor(), make_doctor()
    url = f"/api/doctors/{owner.pk}/payout-methods/"

    r = client_for(owner.user).post(url, {"type": "bank_transfer", "account_number": "0102-1"}, format="json")
    assert r.status_code == 201
    method_id = r.data["id"]

    assert client_for(other.user).post(url, {"type": "pago_movil", "pago_movil_phone": "0414"}, format="json").status_code == 403
    assert client_for(other.user).delete(f"{url}{method_id}/").status_code == 403
    assert client_for(other.user).get(url).data["data"] == []
    assert client_for(patient.user).get(url).status_code == 403

    assert client_for(admin_user).get(url).status_code == 200
    assert client_for(admin_user).delete(f"{url}{method_id}/").status_code == 403

    assert client_for(owner.user).delete(f"{url}{method_id}/").status_code == 204
    assert not PayoutMethod.objects.exists()


def test_schedules_validate_window(client_for, doctor):
    url = f"/api/doctors/{doctor.pk}/schedules/"
    client = client_for(doctor.user)
    bad = client.post(url, {"day": "monday", "start_time": "12:00", "end_time": "09:00"}, format="json")
    assert bad.status_code == 400
    ok = client.post(url, {"day": "monday", "start_time": "09:00", "end_time": "12:00"}, format="json")
    assert ok.status_code == 201
    assert ok.data["doctor"] == doctor.pk


def test_patient_cannot_touch_doctor_children(client_for, patient, doctor):
    url = f"/api/doctors/{doctor.pk}/schedules/"
    r = client_for(patient.user).post(url, {"day": "monday", "start_time": "09:00", "end_time": "12:00"}, format="json")
    assert r.status_code == 403


def test_patients_browse_public_doctor_rows(client_for, patient, make_doctor, service):
    doctor, colleague = make_doctor(), make_doctor()
    Schedule.objects.create(doctor=doctor, day="monday", start_time=time(9), end_time=time(12))
    Education.objects.create(
        doctor=doctor, institution=Institution.objects.create(name="UCV", is_verified=True),
        degree="MSc", specialization="Clinical psychology", start_year=2005, end_year=2007,
    )
    DoctorService.objects.create(doctor=doctor, service=service, amount=30)
    client = client_for(patient.user)
    base = f"/api/doctors/{doctor.pk}"

    assert client.get(f"{base}/").status_code == 200
    r = client.get(f"{base}/schedules/")
    assert r.status_code == 200
    assert [row["day"] for row in r.data["data"]] == ["monday"]
    assert len(client.get(f"{base}/educations/").data["data"]) == 1
    assert client.get(f"{base}/age-groups/").status_code == 200
    assert client.get(f"{base}/services/").data["data"][0]["amount"] == 30

    # contact and payout details stay with the owner
    assert client.get(f"{base}/phones/").data["data"] == []
    assert client.get(f"{base}/payout-methods/").status_code == 403

    # browsing follows the doctor profile: other doctors only read their own
    assert client_for(colleague.user).get(f"{base}/schedules/").status_code == 403
    assert client.get("/api/doctors/999999/schedules/").status_code == 404


# ── payouts ──────────────────────────────────────────────────────────

def _payout(doctor, status=PayoutStatus.PENDING):
    return Payout.objects.create(doctor=doctor, type="bank_transfer", amount="120.00", status=status, account_number="0102-1")


def test_payouts_are_visible_to_owner_and_admin(client_for, make_doctor, patient, admin_user):
    owner, other = make_doctor(), make_doctor()
    paid = _payout(owner, PayoutStatus.COMPLETED)
    _payout(owner)
    _payout(other)
    url = f"/api/doctors/{owner.pk}/payouts/"
    client = client_for(owner.user)

    r = client.get(url)
    assert r.status_code == 200
    assert r.data["pagination"]["totalCount"] == 2

    r = client.get(url, {"status": "completed"})
    assert [row["id"] for row in r.data["data"]] == [paid.pk]
    assert client.get(url, {"status": "lost"}).status_code == 400

    r = client.get(f"{url}{paid.pk}/")
    assert r.status_code == 200
    assert r.data["amount"] == "120.00"

    assert client_for(other.user).get(url).status_code == 403
    assert client_for(patient.user).get(url).status_code == 403
    assert len(client_for(admin_user).get(url).data["data"]) == 2
    assert client_for(admin_user).get("/api/doctors/999999/payouts/").status_code == 404


def test_payouts_are_read_only(client_for, doctor):
    payout = _payout(doctor)
    url = f"/api/doctors/{doctor.pk}/payouts/"
    client = client_for(doctor.user)
    assert client.post(url, {"type": "pago_movil", "amount": "10.00"}, format="json").status_code == 405
    assert client.delete(f"{url}{payout.pk}/").status_code == 405


# ── catalog links ────────────────────────────────────────────────────

def test_services_are_keyed_by_catalog_id(client_for, make_doctor, service):
    owner, other = make_doctor(), make_doctor()
    url = f"/api/doctors/{owner.pk}/services/"
    client = client_for(owner.user)

    r = client.post(url, {"service": service.pk, "amount": 35}, format="json")
    assert r.status_code == 201
    assert client.post(url, {"service": service.pk, "amount": 50}, format="json").status_code == 409

    r = client.get(f"{url}{service.pk}/")
    assert r.status_code == 200
    assert r.data["amount"] == 35

    r = client.patch(f"{url}{service.pk}/", {"amount": 45}, format="json")
    assert r.status_code == 200
    assert DoctorService.objects.get(doctor=owner, service=service).amount == 45

    assert client_for(other.user).patch(f"{url}{service.pk}/", {"amount": 1}, format="json").status_code == 403
    assert client_for(other.user).post(url, {"service": service.pk, "amount": 1}, format="json").status_code == 403

    assert client.delete(f"{url}{service.pk}/").status_code == 204


def test_condition_links(client_for, doctor):
    anxiety = Condition.objects.create(name="Anxiety")
    url = f"/api/doctors/{doctor.pk}/conditions/"
    client = client_for(doctor.user)
    r = client.post(url, {"condition": anxiety.pk, "type": "primary"}, format="json")
    assert r.status_code == 201
    r = client.get(f"/api/doctors/{doctor.pk}/")
    assert r.data["conditions"][0]["condition_name"] == "Anxiety"
