"""
Role x resource x action permission matrix.

Scopes:
- all:      any instance of the resource
- own:      only instances traced back to the caller's own Person / Doctor
- assigned: only instances linked to the caller (a doctor) through an appointment
- none:     never

A missing (role, resource, action) entry is treated exactly like ``none``.
The matrix is frozen at import and must not be mutated at runtime.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from accounts.enums import UserRole
from .enums import Action, PermissionScope, Resource

ALL = PermissionScope.ALL
OWN = PermissionScope.OWN
ASSIGNED = PermissionScope.ASSIGNED
NONE = PermissionScope.NONE

C, R, U, D, L = Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE, Action.LIST


def _crudl(scope):
    return {C: scope, R: scope, U: scope, D: scope, L: scope}


def _browse(scope=ALL):
    return {R: scope, L: scope}


_PATIENT = {
    Resource.PERSON: _crudl(OWN),
    Resource.DOCTOR: _browse(),
    Resource.APPOINTMENT: _crudl(OWN),
    Resource.PAYMENT: {C: OWN, R: OWN, L: OWN},
    Resource.PAYMENT_METHOD: _crudl(OWN),
    Resource.PAYOUT_METHOD: _browse(NONE),
    Resource.REVIEW: {C: OWN, R: ALL, U: OWN, L: ALL},
    Resource.SERVICE: _browse(),
    Resource.CONDITION: _browse(),
    Resource.LANGUAGE: _browse(),
    Resource.PLACE: _browse(),
    Resource.INSTITUTION: _browse(),
    Resource.TREATMENT_METHOD: _browse(),
    # progress notes are written by doctors only
    Resource.PROGRESS: _browse(OWN),
    Resource.PHONE: _crudl(OWN),
}

_DOCTOR = {
    Resource.PERSON: {R: ASSIGNED, U: ASSIGNED, L: ASSIGNED},
    Resource.DOCTOR: {R: OWN, U: OWN, L: ALL},
    Resource.APPOINTMENT: {R: ASSIGNED, U: ASSIGNED, L: ASSIGNED},
    Resource.PAYMENT: _browse(ASSIGNED),
    Resource.PAYMENT_METHOD: _browse(NONE),
    Resource.PAYOUT_METHOD: _crudl(OWN),
    Resource.REVIEW: _browse(ASSIGNED),
    Resource.SERVICE: _browse(),
    Resource.CONDITION: _browse(),
    Resource.LANGUAGE: _browse(),
    Resource.PLACE: _browse(),
    # doctors may suggest institutions; they are stored unverified
    Resource.INSTITUTION: {C: OWN, R: ALL, L: ALL},
    Resource.TREATMENT_METHOD: _browse(),
    Resource.PROGRESS: _crudl(ASSIGNED),
    Resource.PHONE: _crudl(OWN),
    Resource.EDUCATION: _crudl(OWN),
    Resource.SCHEDULE: _crudl(OWN),
    Resource.AGE_GROUP: _crudl(OWN),
    Resource.DOCTOR_SERVICE: _crudl(OWN),
    Resource.DOCTOR_TREATMENT_METHOD: _crudl(OWN),
    Resource.DOCTOR_CONDITION: _crudl(OWN),
    Resource.DOCTOR_LANGUAGE: _crudl(OWN),
}

_ADMIN = {
    Resource.PERSON: _crudl(ALL),
    Resource.DOCTOR: _crudl(ALL),
    Resource.APPOINTMENT: _crudl(ALL),
    Resource.PAYMENT: _browse(),
    Resource.PAYMENT_METHOD: _browse(),
    Resource.PAYOUT_METHOD: _browse(),
    Resource.REVIEW: _crudl(ALL),
    Resource.SERVICE: _crudl(ALL),
    Resource.CONDITION: _crudl(ALL),
    Resource.LANGUAGE: _crudl(ALL),
    Resource.PLACE: _crudl(ALL),
    Resource.INSTITUTION: _crudl(ALL),
    Resource.TREATMENT_METHOD: _crudl(ALL),
    # clinical notes stay between patient and doctor, even for admins
    Resource.PROGRESS: _crudl(NONE),
    Resource.PHONE: _crudl(ALL),
    Resource.EDUCATION: _crudl(ALL),
    Resource.SCHEDULE: _crudl(ALL),
    Resource.AGE_GROUP: _crudl(ALL),
    Resource.DOCTOR_SERVICE: _crudl(ALL),
    Resource.DOCTOR_TREATMENT_METHOD: _crudl(ALL),
    Resource.DOCTOR_CONDITION: _crudl(ALL),
    Resource.DOCTOR_LANGUAGE: _crudl(ALL),
}

PermissionMatrix = Mapping[str, Mapping[str, Mapping[str, PermissionScope]]]


def _key(value) -> str:
    return getattr(value, "value", value)


def freeze(matrix: dict) -> PermissionMatrix:
    """Return a read-only, nested copy of ``matrix`` keyed by plain tag strings."""
    return MappingProxyType({
        _key(role): MappingProxyType({
            _key(resource): MappingProxyType({
                _key(action): PermissionScope(scope) for action, scope in actions.items()
            })
            for resource, actions in resources.items()
        })
        for role, resources in matrix.items()
    })


PERMISSIONS: PermissionMatrix = freeze({
    UserRole.PATIENT: _PATIENT,
    UserRole.DOCTOR: _DOCTOR,
    UserRole.ADMIN: _ADMIN,
})


def has_permission(role, resource, action, matrix: PermissionMatrix = PERMISSIONS) -> PermissionScope | None:
    """
    Scope configured for (role, resource, action), or None when there is no entry.
    Callers must treat None exactly like ``PermissionScope.NONE``.
    """
    try:
        return matrix.get(_key(role), {}).get(_key(resource), {}).get(_key(action))
    except TypeError:
        # unhashable input; nothing can match it
        return None
