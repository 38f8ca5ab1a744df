import itertools
from datetime import date, time, timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.enums import UserRole
from accounts.models import User
from appointments.enums import ApptStatus
from appointments.models import Appointment
from catalog.models import Service
from doctors.enums import DayOfWeek
from doctors.models import Doctor, DoctorService, Schedule
from persons.models import Person

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.PATIENT, email=None, password="s3cret-pass!"):
        n = next(_seq)
        return User.objects.create_user(email=email or f"user{n}@example.com", password=password, role=role)
    return _make


@pytest.fixture
def make_person(make_user):
    def _make(user=None, **kw):
        n = next(_seq)
        user = user or make_user(UserRole.PATIENT)
        fields = dict(ci=10_000 + n, first_name="Ana", first_last_name=f"Perez{n}",
                      birth_date=date(1990, 1, 1), address="Caracas")
        fields.update(kw)
        return Person.objects.create(user=user, **fields)
    return _make


@pytest.fixture
def make_doctor(make_user):
    def _make(user=None, is_active=True, **kw):
        n = next(_seq)
        user = user or make_user(UserRole.DOCTOR)
        fields = dict(ci=20_000 + n, first_name="Luis", first_last_name=f"Gomez{n}",
                      birth_date=date(1980, 5, 5), address="Valencia", biography="CBT therapist")
        fields.update(kw)
        return Doctor.objects.create(user=user, is_active=is_active, **fields)
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def patient(make_person):
    return make_person()


@pytest.fixture
def doctor(make_doctor):
    return make_doctor()


@pytest.fixture
def service(db):
    return Service.objects.create(name="Individual therapy", description="One-on-one session", duration=45)


@pytest.fixture
def future_slot():
    """A start time three days ahead at 10:00 UTC."""
    return (timezone.now() + timedelta(days=3)).replace(hour=10, minute=0, second=0, microsecond=0)


@pytest.fixture
def bookable_doctor(doctor, service, future_slot):
    DoctorService.objects.create(doctor=doctor, service=service, amount=40)
    Schedule.objects.create(
        doctor=doctor, day=DayOfWeek.from_date(future_slot), start_time=time(9, 0), end_time=time(17, 0),
    )
    return doctor


@pytest.fixture
def make_appointment(service):
    """Insert an appointment directly, skipping booking rules."""
    def _make(person, doctor, status=ApptStatus.SCHEDULED, start_at=None, minutes=45):
        start_at = start_at or timezone.now() + timedelta(days=5)
        return Appointment.objects.create(
            person=person, doctor=doctor, service=service, status=status,
            start_at=start_at, end_at=start_at + timedelta(minutes=minutes),
        )
    return _make


@pytest.fixture
def client_for():
    def _client(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c
    return _client
