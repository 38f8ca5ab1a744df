"""
Resource access resolver.

Every API route asks ``check_resource_access`` (or an ``AccessResolver``) before
touching data. The decision is taken in two steps:

1. look up the scope in the permission matrix (missing entry == ``none``);
2. for ``own`` / ``assigned`` scopes, verify the caller's relationship to the
   concrete instance with read-only queries.

``list`` is never checked per instance: list endpoints filter their queryset by
ownership/assignment themselves (see ``access.mixins.ResourceAccessMixin``).

A failing lookup never escapes: it is logged and turned into a 500
``INTERNAL_ERROR`` decision. "Not found" and "not yours" both come back as the
same 403 so the response does not reveal whether a row exists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.core.exceptions import ImproperlyConfigured
from django.db.models import Q
from rest_framework.exceptions import PermissionDenied

from accounts.enums import UserRole
from appointments.enums import ApptStatus
from appointments.models import Appointment, Review
from billing.models import Payment
from doctors.models import Doctor, Education, Schedule, AgeGroup, PayoutMethod
from persons.models import Person, Phone, PaymentMethodPerson, Progress
from .enums import Action, DecisionCode, PermissionScope, Resource
from .matrix import PERMISSIONS, PermissionMatrix, has_permission

logger = logging.getLogger(__name__)

NO_PERMISSION_MESSAGE = "You do not have permission to perform this action"
FORBIDDEN_MESSAGE = "You do not have permission to access this resource"
INTERNAL_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class Caller:
    """Authenticated identity for one request."""
    user_id: int | str
    role: str

    @classmethod
    def from_user(cls, user) -> "Caller":
        return cls(user_id=user.pk, role=user.role)


@dataclass(frozen=True)
class AccessContext:
    """Related ids used when the target instance does not exist yet (create) or is a junction row."""
    person_id: int | str | None = None
    doctor_id: int | str | None = None
    appointment_id: int | str | None = None


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    status: int = 200
    message: str = ""
    code: str = ""

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def forbidden(cls, message: str = FORBIDDEN_MESSAGE) -> "AccessDecision":
        return cls(allowed=False, status=403, message=message, code=DecisionCode.FORBIDDEN)

    @classmethod
    def internal_error(cls) -> "AccessDecision":
        return cls(allowed=False, status=500, message=INTERNAL_ERROR_MESSAGE, code=DecisionCode.INTERNAL_ERROR)

    def __bool__(self):
        return self.allowed

    def body(self) -> dict:
        return {"success": False, "error": {"message": self.message, "code": str(self.code)}}


class InvalidIdentifier(ValueError):
    pass


def _coerce_id(value) -> int | None:
    """Accept ints and numeric strings; None / "" mean "not supplied"."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidIdentifier(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidIdentifier(value)


# ---------------------------------------------------------------------
# Ownership (scope = own)
# ---------------------------------------------------------------------
def owns_person(user_id, person_id) -> bool:
    return Person.objects.filter(pk=person_id, user_id=user_id).exists()


def owns_doctor(user_id, doctor_id) -> bool:
    return Doctor.objects.filter(pk=doctor_id, user_id=user_id).exists()


def _own_person(caller, pk, ctx):
    return owns_person(caller.user_id, pk)


def _own_doctor(caller, pk, ctx):
    return owns_doctor(caller.user_id, pk)


def _own_appointment(caller, pk, ctx):
    # only patients own appointments; doctors reach them through assignment
    if caller.role != UserRole.PATIENT:
        return False
    return Appointment.objects.filter(pk=pk, person__user_id=caller.user_id).exists()


def _own_payment(caller, pk, ctx):
    return Payment.objects.filter(pk=pk, person__user_id=caller.user_id).exists()


def _own_payment_method(caller, pk, ctx):
    return PaymentMethodPerson.objects.filter(pk=pk, person__user_id=caller.user_id).exists()


def _own_payout_method(caller, pk, ctx):
    return PayoutMethod.objects.filter(pk=pk, doctor__user_id=caller.user_id).exists()


def _own_review(caller, pk, ctx):
    return Review.objects.filter(pk=pk, appointment__person__user_id=caller.user_id).exists()


def _own_progress(caller, pk, ctx):
    return Progress.objects.filter(pk=pk, person__user_id=caller.user_id).exists()


def _own_phone(caller, pk, ctx):
    return Phone.objects.filter(pk=pk).filter(
        Q(person__user_id=caller.user_id) | Q(doctor__user_id=caller.user_id)
    ).exists()


def _own_education(caller, pk, ctx):
    return Education.objects.filter(pk=pk, doctor__user_id=caller.user_id).exists()


def _own_schedule(caller, pk, ctx):
    return Schedule.objects.filter(pk=pk, doctor__user_id=caller.user_id).exists()


def _own_age_group(caller, pk, ctx):
    return AgeGroup.objects.filter(pk=pk, doctor__user_id=caller.user_id).exists()


def _own_via_context_doctor(caller, pk, ctx):
    # junction rows are addressed by (doctor, catalog id); the doctor decides ownership
    doctor_id = _coerce_id(ctx.doctor_id)
    if doctor_id is None:
        return False
    return owns_doctor(caller.user_id, doctor_id)


def _not_ownable(caller, pk, ctx):
    # shared catalog rows have no owner
    return False


OWNERSHIP_CHECKS = {
    Resource.PERSON: _own_person,
    Resource.DOCTOR: _own_doctor,
    Resource.APPOINTMENT: _own_appointment,
    Resource.PAYMENT: _own_payment,
    Resource.PAYMENT_METHOD: _own_payment_method,
    Resource.PAYOUT_METHOD: _own_payout_method,
    Resource.REVIEW: _own_review,
    Resource.PROGRESS: _own_progress,
    Resource.PHONE: _own_phone,
    Resource.EDUCATION: _own_education,
    Resource.SCHEDULE: _own_schedule,
    Resource.AGE_GROUP: _own_age_group,
    Resource.DOCTOR_SERVICE: _own_via_context_doctor,
    Resource.DOCTOR_TREATMENT_METHOD: _own_via_context_doctor,
    Resource.DOCTOR_CONDITION: _own_via_context_doctor,
    Resource.DOCTOR_LANGUAGE: _own_via_context_doctor,
    Resource.SERVICE: _not_ownable,
    Resource.CONDITION: _not_ownable,
    Resource.LANGUAGE: _not_ownable,
    Resource.PLACE: _not_ownable,
    Resource.INSTITUTION: _not_ownable,
    Resource.TREATMENT_METHOD: _not_ownable,
}


# ---------------------------------------------------------------------
# Assignment (scope = assigned, doctors only)
# ---------------------------------------------------------------------
def has_completed_session(doctor_id, person_id) -> bool:
    return Appointment.objects.filter(
        doctor_id=doctor_id, person_id=person_id, status=ApptStatus.COMPLETED
    ).exists()


def _assigned_person(doctor, pk, ctx):
    person_id = pk if pk is not None else _coerce_id(ctx.person_id)
    if person_id is None:
        return False
    return Appointment.objects.filter(doctor_id=doctor.pk, person_id=person_id).exists()


def _assigned_appointment(doctor, pk, ctx):
    appointment_id = pk if pk is not None else _coerce_id(ctx.appointment_id)
    if appointment_id is None:
        return False
    return Appointment.objects.filter(pk=appointment_id, doctor_id=doctor.pk).exists()


def _assigned_payment(doctor, pk, ctx):
    if pk is None:
        return False
    return Appointment.objects.filter(payment_id=pk, doctor_id=doctor.pk).exists()


def _assigned_review(doctor, pk, ctx):
    if pk is None:
        return False
    return Review.objects.filter(pk=pk, appointment__doctor_id=doctor.pk).exists()


def _assigned_progress(doctor, pk, ctx):
    # only patients the doctor has actually held (completed) a session with
    if pk is None:
        person_id = _coerce_id(ctx.person_id)
    else:
        person_id = Progress.objects.filter(pk=pk).values_list("person_id", flat=True).first()
    if person_id is None:
        return False
    return has_completed_session(doctor.pk, person_id)


def _not_assignable(doctor, pk, ctx):
    return False


ASSIGNMENT_CHECKS = {
    Resource.PERSON: _assigned_person,
    Resource.APPOINTMENT: _assigned_appointment,
    Resource.PAYMENT: _assigned_payment,
    Resource.REVIEW: _assigned_review,
    Resource.PROGRESS: _assigned_progress,
    Resource.DOCTOR: _not_assignable,
    Resource.PAYMENT_METHOD: _not_assignable,
    Resource.PAYOUT_METHOD: _not_assignable,
    Resource.SERVICE: _not_assignable,
    Resource.CONDITION: _not_assignable,
    Resource.LANGUAGE: _not_assignable,
    Resource.PLACE: _not_assignable,
    Resource.INSTITUTION: _not_assignable,
    Resource.TREATMENT_METHOD: _not_assignable,
    Resource.PHONE: _not_assignable,
    Resource.EDUCATION: _not_assignable,
    Resource.SCHEDULE: _not_assignable,
    Resource.AGE_GROUP: _not_assignable,
    Resource.DOCTOR_SERVICE: _not_assignable,
    Resource.DOCTOR_TREATMENT_METHOD: _not_assignable,
    Resource.DOCTOR_CONDITION: _not_assignable,
    Resource.DOCTOR_LANGUAGE: _not_assignable,
}

# resources whose assigned checks always need an identifier. Unlike other
# resources, a bare non-list call is denied here instead of allowed.
IDENTIFIER_REQUIRED = {Resource.PROGRESS}


def _ensure_exhaustive(table, name):
    missing = [r.value for r in Resource if r not in table]
    if missing:
        raise ImproperlyConfigured(f"{name} has no handler for: {', '.join(missing)}")


_ensure_exhaustive(OWNERSHIP_CHECKS, "OWNERSHIP_CHECKS")
_ensure_exhaustive(ASSIGNMENT_CHECKS, "ASSIGNMENT_CHECKS")


class AccessResolver:
    """Turns a (role, resource, action) scope into a decision for one concrete request."""

    def __init__(self, permissions: PermissionMatrix = PERMISSIONS):
        self.permissions = permissions

    def check(self, user_id, role, resource, action, resource_id=None, context: AccessContext | None = None) -> AccessDecision:
        scope = has_permission(role, resource, action, self.permissions)

        if scope is None or scope == PermissionScope.NONE:
            logger.info(f"access denied (no permission): role={role} resource={resource} action={action} id={resource_id}")
            return AccessDecision.forbidden(NO_PERMISSION_MESSAGE)

        if scope == PermissionScope.ALL:
            return AccessDecision.allow()

        # list endpoints filter their own querysets
        if action == Action.LIST:
            return AccessDecision.allow()

        caller = Caller(user_id=user_id, role=role)
        resource = Resource(resource)
        context = context or AccessContext()

        if scope == PermissionScope.OWN:
            decision = self._guard("ownership", self.check_ownership, caller, resource, resource_id, context)
        elif scope == PermissionScope.ASSIGNED:
            decision = self._guard("assignment", self.check_assignment, caller, resource, resource_id, context)
        else:
            decision = AccessDecision.forbidden()

        if not decision:
            logger.info(
                f"access denied ({decision.code}): role={role} resource={resource.value} "
                f"action={action} id={resource_id} context={context}"
            )
        return decision

    def _guard(self, label, check, caller, resource, resource_id, context) -> AccessDecision:
        try:
            return check(caller, resource, resource_id, context)
        except InvalidIdentifier:
            return AccessDecision.forbidden()
        except Exception:
            logger.exception(f"Error checking {label}: resource={resource.value} id={resource_id}")
            return AccessDecision.internal_error()

    def check_ownership(self, caller: Caller, resource: Resource, resource_id, context: AccessContext) -> AccessDecision:
        pk = _coerce_id(resource_id)

        if pk is None:
            # create path: verify the parent the new row will hang off
            person_id = _coerce_id(context.person_id)
            doctor_id = _coerce_id(context.doctor_id)
            if person_id is not None and caller.role == UserRole.PATIENT:
                return _decide(owns_person(caller.user_id, person_id))
            if doctor_id is not None and caller.role == UserRole.DOCTOR:
                return _decide(owns_doctor(caller.user_id, doctor_id))
            # top-level create: the handler stamps the owner through CreateIntent
            return AccessDecision.allow()

        return _decide(OWNERSHIP_CHECKS[resource](caller, pk, context))

    def check_assignment(self, caller: Caller, resource: Resource, resource_id, context: AccessContext) -> AccessDecision:
        if caller.role != UserRole.DOCTOR:
            return AccessDecision.forbidden()

        doctor = Doctor.objects.filter(user_id=caller.user_id).first()
        if doctor is None:
            return AccessDecision.forbidden()

        pk = _coerce_id(resource_id)
        if (
            pk is None
            and _coerce_id(context.person_id) is None
            and _coerce_id(context.appointment_id) is None
            and resource not in IDENTIFIER_REQUIRED
        ):
            return AccessDecision.allow()

        return _decide(ASSIGNMENT_CHECKS[resource](doctor, pk, context))


def _decide(allowed: bool) -> AccessDecision:
    return AccessDecision.allow() if allowed else AccessDecision.forbidden()


default_resolver = AccessResolver()


def check_resource_access(user_id, role, resource, action, resource_id=None, context: AccessContext | None = None) -> AccessDecision:
    return default_resolver.check(user_id, role, resource, action, resource_id, context)


class CreateIntent:
    """
    Owner stamping for creates.

    Top-level creates pass the access check without a context match; the new
    row's owner must then come from here (the caller's own profile), never
    from request input.
    """

    def __init__(self, caller: Caller):
        self.caller = caller

    def person(self) -> Person:
        person = Person.objects.filter(user_id=self.caller.user_id).first()
        if person is None:
            raise PermissionDenied("No patient profile linked to this user.")
        return person

    def doctor(self) -> Doctor:
        doctor = Doctor.objects.filter(user_id=self.caller.user_id).first()
        if doctor is None:
            raise PermissionDenied("No doctor profile linked to this user.")
        return doctor
