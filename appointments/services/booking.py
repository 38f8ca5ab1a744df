"""
Booking rules. Views call these after the access check has passed; every
violation is raised as BusinessRuleError so the API renders it in the usual
error envelope.
"""
import logging
from datetime import timedelta, timezone as dt_timezone

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from billing.models import Payment
from core.exceptions import BusinessRuleError
from doctors.enums import DayOfWeek
from doctors.models import Doctor, DoctorService, Schedule
from ..enums import ApptStatus, STATUS_TRANSITIONS
from ..models import Appointment, Review

logger = logging.getLogger(__name__)


def validate_doctor_service(doctor, service):
    """Return (price, duration_minutes) for a service the doctor offers."""
    link = DoctorService.objects.select_related("service").filter(doctor=doctor, service=service).first()
    if link is None:
        raise BusinessRuleError("Doctor does not offer this service")
    return link.amount, link.service.duration


def validate_minimum_advance(start_at, now=None):
    now = now or timezone.now()
    hours = settings.BOOKING_MIN_ADVANCE_HOURS
    if start_at - now < timedelta(hours=hours):
        raise BusinessRuleError(f"Appointments must be booked at least {hours} hours in advance")


def validate_doctor_schedule(doctor, start_at):
    # weekday and time of day are taken in UTC
    utc = start_at.astimezone(dt_timezone.utc)
    day = DayOfWeek.from_date(utc)
    slots = Schedule.objects.filter(doctor=doctor, day=day)
    if not slots.exists():
        raise BusinessRuleError(f"Doctor is not available on {day.label}s")
    t = utc.time()
    if not slots.filter(start_time__lte=t, end_time__gt=t).exists():
        hours = ", ".join(f"{s.start_time:%H:%M}-{s.end_time:%H:%M}" for s in slots)
        raise BusinessRuleError(f"Doctor is not available at this time. Available hours: {hours}")


def check_overlap(doctor, start_at, end_at, exclude_id=None):
    qs = (
        Appointment.objects
        .filter(doctor=doctor, start_at__lt=end_at, end_at__gt=start_at)
        .exclude(status=ApptStatus.CANCELLED)
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise BusinessRuleError("This time slot conflicts with an existing appointment")


def book_appointment(*, person, doctor, service, start_at, payment_method=None, notes=""):
    """
    Create a scheduled appointment. When a saved payment method (PaymentMethodPerson)
    is given, a payment for the service price is recorded and linked.
    """
    if not doctor.is_active:
        raise BusinessRuleError("Doctor is not currently accepting appointments")

    price, duration = validate_doctor_service(doctor, service)
    end_at = start_at + timedelta(minutes=duration)

    with transaction.atomic():
        # serialize bookings per doctor so two requests cannot take the same slot
        Doctor.objects.select_for_update().filter(pk=doctor.pk).first()

        validate_minimum_advance(start_at)
        validate_doctor_schedule(doctor, start_at)
        check_overlap(doctor, start_at, end_at)

        payment = None
        if payment_method is not None:
            if payment_method.person_id != person.pk:
                raise BusinessRuleError(
                    "Payment method not found or does not belong to you", code="NOT_FOUND", status_code=404
                )
            payment = Payment.objects.create(
                person=person, payment_method=payment_method.payment_method, amount=price,
            )

        appt = Appointment.objects.create(
            person=person,
            doctor=doctor,
            service=service,
            payment=payment,
            start_at=start_at,
            end_at=end_at,
            status=ApptStatus.SCHEDULED,
            notes=notes or "",
        )

    logger.info(f"appointment {appt.pk} booked: person={person.pk} doctor={doctor.pk} start={start_at.isoformat()}")
    return appt


def reschedule_appointment(appt, start_at):
    if appt.status in ApptStatus.terminal():
        raise BusinessRuleError(f"Cannot reschedule a {appt.status} appointment")
    end_at = start_at + (appt.end_at - appt.start_at)
    with transaction.atomic():
        Doctor.objects.select_for_update().filter(pk=appt.doctor_id).first()
        validate_minimum_advance(start_at)
        validate_doctor_schedule(appt.doctor, start_at)
        check_overlap(appt.doctor, start_at, end_at, exclude_id=appt.pk)
        appt.start_at, appt.end_at = start_at, end_at
        appt.save(update_fields=["start_at", "end_at", "updated_at"])
    logger.info(f"appointment {appt.pk} rescheduled to {start_at.isoformat()}")
    return appt


def transition_status(appt, new_status):
    if new_status == appt.status:
        return appt
    allowed = STATUS_TRANSITIONS.get(appt.status, set())
    if new_status not in allowed:
        raise BusinessRuleError(f"Cannot change status from {appt.status} to {new_status}")
    appt.status = new_status
    appt.save(update_fields=["status", "updated_at"])
    logger.info(f"appointment {appt.pk} -> {new_status}")
    return appt


def cancel_appointment(appt, reason, enforce_advance=True, now=None):
    """Patients cancel with advance notice (enforce_advance); admins and doctors can cancel any time."""
    if appt.status == ApptStatus.CANCELLED:
        raise BusinessRuleError("Appointment is already cancelled")
    if appt.status == ApptStatus.COMPLETED:
        raise BusinessRuleError("Cannot cancel a completed appointment")

    if enforce_advance:
        now = now or timezone.now()
        hours = settings.CANCELLATION_MIN_ADVANCE_HOURS
        if appt.start_at - now < timedelta(hours=hours):
            raise BusinessRuleError(f"Appointments can only be cancelled at least {hours} hours in advance")

    appt.status = ApptStatus.CANCELLED
    appt.cancellation_reason = reason
    appt.save(update_fields=["status", "cancellation_reason", "updated_at"])
    logger.info(f"appointment {appt.pk} cancelled")
    return appt


@transaction.atomic
def create_review(appt, person, score, description=""):
    if appt.person_id != person.pk:
        raise BusinessRuleError("You can only review your own appointments", code="FORBIDDEN", status_code=403)
    if appt.status != ApptStatus.COMPLETED:
        raise BusinessRuleError("Only completed appointments can be reviewed")
    if Review.objects.filter(appointment=appt).exists():
        raise BusinessRuleError("This appointment has already been reviewed", code="CONFLICT", status_code=409)
    return Review.objects.create(appointment=appt, score=score, description=description or "")
