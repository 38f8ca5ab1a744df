"""
Permission matrix: lookups, deny-by-default and immutability.
"""
import itertools

import pytest

from access.enums import Action, PermissionScope, Resource
from access.guards import NO_PERMISSION_MESSAGE, check_resource_access
from access.matrix import PERMISSIONS, freeze, has_permission
from accounts.enums import UserRole

ROLES = list(UserRole)
ALL_COMBOS = list(itertools.product(ROLES, Resource, Action))


# ── lookups ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("role,resource,action,expected", [
    (UserRole.PATIENT, Resource.APPOINTMENT, Action.CREATE, PermissionScope.OWN),
    (UserRole.PATIENT, Resource.REVIEW, Action.READ, PermissionScope.ALL),
    (UserRole.PATIENT, Resource.PROGRESS, Action.READ, PermissionScope.OWN),
    (UserRole.PATIENT, Resource.PAYOUT_METHOD, Action.LIST, PermissionScope.NONE),
    (UserRole.DOCTOR, Resource.PERSON, Action.UPDATE, PermissionScope.ASSIGNED),
    (UserRole.DOCTOR, Resource.PROGRESS, Action.CREATE, PermissionScope.ASSIGNED),
    (UserRole.DOCTOR, Resource.PAYOUT_METHOD, Action.DELETE, PermissionScope.OWN),
    (UserRole.DOCTOR, Resource.DOCTOR, Action.LIST, PermissionScope.ALL),
    (UserRole.ADMIN, Resource.PAYMENT, Action.READ, PermissionScope.ALL),
    (UserRole.ADMIN, Resource.DOCTOR_LANGUAGE, Action.DELETE, PermissionScope.ALL),
])
def test_configured_scopes(role, resource, action, expected):
    assert has_permission(role, resource, action) == expected


@pytest.mark.parametrize("role,resource,action", [
    (UserRole.PATIENT, Resource.PROGRESS, Action.CREATE),
    (UserRole.PATIENT, Resource.REVIEW, Action.DELETE),
    (UserRole.PATIENT, Resource.SCHEDULE, Action.READ),
    (UserRole.DOCTOR, Resource.APPOINTMENT, Action.CREATE),
    (UserRole.DOCTOR, Resource.PERSON, Action.DELETE),
    (UserRole.ADMIN, Resource.PAYMENT, Action.CREATE),
    (UserRole.ADMIN, Resource.PAYOUT_METHOD, Action.DELETE),
])
def test_missing_entries_return_none(role, resource, action):
    assert has_permission(role, resource, action) is None


def test_plain_strings_and_members_are_interchangeable():
    assert has_permission("DOCTOR", "payout-method", "delete") == PermissionScope.OWN
    assert has_permission(UserRole.DOCTOR, Resource.PAYOUT_METHOD, Action.DELETE) == PermissionScope.OWN


@pytest.mark.parametrize("role,resource,action", [
    ("ROOT", "person", "read"),
    ("PATIENT", "spaceship", "read"),
    ("PATIENT", "person", "explode"),
    (["PATIENT"], "person", "read"),
    (None, None, None),
])
def test_unknown_or_malformed_input_never_raises(role, resource, action):
    assert has_permission(role, resource, action) is None


def test_every_scope_is_a_known_value():
    for role, resources in PERMISSIONS.items():
        assert role in UserRole.values
        for resource, actions in resources.items():
            assert resource in Resource.values
            for action, scope in actions.items():
                assert action in Action.values
                assert scope in PermissionScope.values


# ── invariants ───────────────────────────────────────────────────────

@pytest.mark.parametrize("role,resource,action", [
    c for c in ALL_COMBOS if has_permission(*c) in (None, PermissionScope.NONE)
])
def test_unlisted_or_none_is_denied(role, resource, action):
    # no database access is needed to deny these
    decision = check_resource_access(1, role, resource, action, resource_id=1)
    assert not decision.allowed
    assert decision.status == 403
    assert decision.code == "FORBIDDEN"
    assert decision.message == NO_PERMISSION_MESSAGE


@pytest.mark.parametrize("action", list(Action))
def test_admin_never_reaches_progress(action):
    assert has_permission(UserRole.ADMIN, Resource.PROGRESS, action) in (None, PermissionScope.NONE)
    for resource_id in (None, 1, "1"):
        decision = check_resource_access(1, UserRole.ADMIN, Resource.PROGRESS, action, resource_id)
        assert not decision.allowed
        assert decision.code == "FORBIDDEN"


@pytest.mark.parametrize("role,resource,action", [
    c for c in ALL_COMBOS if has_permission(*c) == PermissionScope.ALL
])
def test_scope_all_allows_without_ids(role, resource, action):
    assert check_resource_access(1, role, resource, action).allowed


def test_matrix_is_read_only():
    with pytest.raises(TypeError):
        PERMISSIONS["PATIENT"] = {}
    with pytest.raises(TypeError):
        PERMISSIONS["PATIENT"]["person"]["read"] = PermissionScope.ALL


def test_freeze_normalises_keys():
    frozen = freeze({UserRole.PATIENT: {Resource.PLACE: {Action.READ: "all"}}})
    assert list(frozen) == ["PATIENT"]
    assert frozen["PATIENT"]["place"]["read"] == PermissionScope.ALL
    assert has_permission(UserRole.PATIENT, Resource.PLACE, Action.READ, frozen) == PermissionScope.ALL
    assert has_permission(UserRole.PATIENT, Resource.PLACE, Action.LIST, frozen) is None
