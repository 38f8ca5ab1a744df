from datetime import timedelta

import pytest
from django.utils import timezone

from appointments.enums import ApptStatus
from appointments.services.booking import (
    book_appointment, cancel_appointment, check_overlap, create_review,
    reschedule_appointment, transition_status, validate_doctor_service,
)
from billing.models import Payment
from core.exceptions import BusinessRuleError
from persons.models import PaymentMethod, PaymentMethodPerson

pytestmark = pytest.mark.django_db


def _book(person, doctor, service, start_at, **kw):
    return book_appointment(person=person, doctor=doctor, service=service, start_at=start_at, **kw)


# ── booking ──────────────────────────────────────────────────────────

def test_booking_sets_end_from_service_duration(patient, bookable_doctor, service, future_slot):
    appt = _book(patient, bookable_doctor, service, future_slot, notes="first visit")
    assert appt.status == ApptStatus.SCHEDULED
    assert appt.end_at - appt.start_at == timedelta(minutes=45)
    assert appt.payment is None
    assert appt.notes == "first visit"


def test_booking_records_payment_at_service_price(patient, bookable_doctor, service, future_slot):
    method = PaymentMethod.objects.create(type="card", card_number="4242")
    saved = PaymentMethodPerson.objects.create(person=patient, payment_method=method, nickname="visa")

    appt = _book(patient, bookable_doctor, service, future_slot, payment_method=saved)

    payment = Payment.objects.get(appointment=appt)
    assert payment.person == patient
    assert payment.amount == 40


def test_booking_rejects_someone_elses_payment_method(make_person, patient, bookable_doctor, service, future_slot):
    method = PaymentMethod.objects.create(type="card", card_number="4242")
    foreign = PaymentMethodPerson.objects.create(person=make_person(), payment_method=method, nickname="visa")

    with pytest.raises(BusinessRuleError) as exc:
        _book(patient, bookable_doctor, service, future_slot, payment_method=foreign)
    assert exc.value.status_code == 404
    assert not Payment.objects.exists()


def test_doctor_must_offer_service(patient, doctor, service, future_slot):
    with pytest.raises(BusinessRuleError, match="does not offer"):
        validate_doctor_service(doctor, service)
    with pytest.raises(BusinessRuleError):
        _book(patient, doctor, service, future_slot)


def test_inactive_doctor_cannot_be_booked(patient, bookable_doctor, service, future_slot):
    bookable_doctor.is_active = False
    bookable_doctor.save()
    with pytest.raises(BusinessRuleError, match="not currently accepting"):
        _book(patient, bookable_doctor, service, future_slot)


def test_minimum_advance(patient, bookable_doctor, service, future_slot, settings):
    settings.BOOKING_MIN_ADVANCE_HOURS = 100
    with pytest.raises(BusinessRuleError, match="at least 100 hours"):
        _book(patient, bookable_doctor, service, future_slot)


def test_schedule_day_and_hours(patient, bookable_doctor, service, future_slot):
    with pytest.raises(BusinessRuleError, match="not available on"):
        _book(patient, bookable_doctor, service, future_slot + timedelta(days=1))
    # end of the window is exclusive
    with pytest.raises(BusinessRuleError, match="not available at this time"):
        _book(patient, bookable_doctor, service, future_slot.replace(hour=17))
    assert _book(patient, bookable_doctor, service, future_slot.replace(hour=9))


def test_overlap_rules(make_person, bookable_doctor, service, future_slot):
    first = _book(make_person(), bookable_doctor, service, future_slot)

    with pytest.raises(BusinessRuleError, match="conflicts"):
        _book(make_person(), bookable_doctor, service, future_slot + timedelta(minutes=30))

    # back-to-back is fine
    assert _book(make_person(), bookable_doctor, service, future_slot + timedelta(minutes=45))

    cancel_appointment(first, "patient ill", enforce_advance=False)
    assert _book(make_person(), bookable_doctor, service, future_slot)


def test_overlap_can_exclude_the_appointment_itself(patient, bookable_doctor, service, future_slot):
    appt = _book(patient, bookable_doctor, service, future_slot)
    check_overlap(bookable_doctor, appt.start_at, appt.end_at, exclude_id=appt.pk)


def test_reschedule_keeps_duration(patient, bookable_doctor, service, future_slot):
    appt = _book(patient, bookable_doctor, service, future_slot)
    reschedule_appointment(appt, future_slot + timedelta(minutes=20))
    appt.refresh_from_db()
    assert appt.start_at == future_slot + timedelta(minutes=20)
    assert appt.end_at - appt.start_at == timedelta(minutes=45)


# ── status ───────────────────────────────────────────────────────────

def test_status_moves_forward(patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    transition_status(appt, ApptStatus.CONFIRMED)
    transition_status(appt, ApptStatus.COMPLETED)
    appt.refresh_from_db()
    assert appt.status == ApptStatus.COMPLETED

    with pytest.raises(BusinessRuleError):
        transition_status(appt, ApptStatus.CANCELLED)


def test_status_cannot_skip_confirmation(patient, doctor, make_appointment):
    with pytest.raises(BusinessRuleError, match="scheduled to completed"):
        transition_status(make_appointment(patient, doctor), ApptStatus.COMPLETED)


def test_cancel_rules(patient, doctor, make_appointment):
    soon = make_appointment(patient, doctor, start_at=timezone.now() + timedelta(hours=3))
    with pytest.raises(BusinessRuleError, match="24 hours"):
        cancel_appointment(soon, "conflict")

    cancel_appointment(soon, "conflict", enforce_advance=False)
    soon.refresh_from_db()
    assert soon.status == ApptStatus.CANCELLED
    assert soon.cancellation_reason == "conflict"

    with pytest.raises(BusinessRuleError, match="already cancelled"):
        cancel_appointment(soon, "again", enforce_advance=False)

    done = make_appointment(patient, doctor, ApptStatus.COMPLETED)
    with pytest.raises(BusinessRuleError, match="completed"):
        cancel_appointment(done, "too late", enforce_advance=False)


# ── reviews ──────────────────────────────────────────────────────────

def test_review_rules(make_person, doctor, make_appointment):
    person, stranger = make_person(), make_person()

    pending = make_appointment(person, doctor)
    with pytest.raises(BusinessRuleError, match="completed"):
        create_review(pending, person, 5)

    done = make_appointment(person, doctor, ApptStatus.COMPLETED)
    with pytest.raises(BusinessRuleError) as exc:
        create_review(done, stranger, 5)
    assert exc.value.status_code == 403

    review = create_review(done, person, 4, "helpful")
    assert review.score == 4

    with pytest.raises(BusinessRuleError) as exc:
        create_review(done, person, 3)
    assert exc.value.status_code == 409
    assert exc.value.error_code == "CONFLICT"
