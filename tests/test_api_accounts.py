import pytest

from accounts.enums import UserRole
from accounts.models import User
from doctors.models import Doctor
from persons.models import Person

pytestmark = pytest.mark.django_db

PROFILE = {
    "ci": 12345678, "first_name": "Maria", "first_last_name": "Lopez",
    "birth_date": "1992-07-14", "address": "Av. Bolivar, Caracas",
}


def test_patient_registration_creates_person(client_for):
    r = client_for().post("/api/accounts/register/", {
        "email": "Maria@Example.com", "password": "a-strong-pass-91", **PROFILE,
    }, format="json")
    assert r.status_code == 201, r.data
    user = User.objects.get(email="maria@example.com")
    assert user.role == UserRole.PATIENT
    assert Person.objects.get(user=user).ci == PROFILE["ci"]
    assert r.data["user"]["person"] is not None
    assert set(r.data["tokens"]) == {"access", "refresh"}


def test_duplicate_email_is_rejected(client_for, make_user):
    make_user(email="taken@example.com")
    r = client_for().post("/api/accounts/register/", {
        "email": "taken@example.com", "password": "a-strong-pass-91", **PROFILE,
    }, format="json")
    assert r.status_code == 400
    assert "email" in r.data["error"]["details"]
    assert not Person.objects.exists()


def test_doctor_registration_starts_inactive(client_for):
    r = client_for().post("/api/accounts/register/doctor/", {
        "email": "dr@example.com", "password": "a-strong-pass-91", "biography": "Gestalt", **PROFILE,
    }, format="json")
    assert r.status_code == 201, r.data
    doctor = Doctor.objects.get(user__email="dr@example.com")
    assert doctor.user.role == UserRole.DOCTOR
    assert doctor.is_active is False


def test_login_and_me(client_for, patient):
    patient.user.set_password("a-strong-pass-91")
    patient.user.save()

    r = client_for().post("/api/accounts/login/", {"email": patient.user.email, "password": "a-strong-pass-91"}, format="json")
    assert r.status_code == 200
    access = r.data["tokens"]["access"]

    client = client_for()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    r = client.get("/api/accounts/me/")
    assert r.status_code == 200
    assert r.data["person"] == patient.pk
    assert r.data["doctor"] is None
    assert r.data["role"] == UserRole.PATIENT


def test_bad_credentials(client_for, patient):
    r = client_for().post("/api/accounts/login/", {"email": patient.user.email, "password": "nope"}, format="json")
    assert r.status_code == 400
    assert r.data["error"]["code"] == "VALIDATION_ERROR"


def test_garbage_token_is_unauthorized(client_for):
    client = client_for()
    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
    r = client.get("/api/accounts/me/")
    assert r.status_code == 401
    assert r.data["success"] is False
