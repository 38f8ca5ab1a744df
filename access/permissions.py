from rest_framework.exceptions import APIException
from rest_framework.permissions import BasePermission

from .enums import Action
from .guards import AccessDecision, check_resource_access

# DRF viewset action -> access action; custom @actions authorize explicitly
VIEW_ACTIONS = {
    "list": Action.LIST,
    "retrieve": Action.READ,
    "create": Action.CREATE,
    "update": Action.UPDATE,
    "partial_update": Action.UPDATE,
    "destroy": Action.DELETE,
}

class AccessDenied(APIException):
    """A denied AccessDecision, raised so the exception handler can render it (403 or 500)."""
    status_code = 403
    default_code = "FORBIDDEN"

    def __init__(self, decision: AccessDecision):
        super().__init__(detail=decision.message, code=str(decision.code))
        self.status_code = decision.status
        self.error_code = str(decision.code)
        self.decision = decision

def enforce(decision: AccessDecision) -> None:
    if not decision:
        raise AccessDenied(decision)

class ResourceAccessPermission(BasePermission):
    """
    Consults the access resolver for the view's `access_resource`.

    The view provides:
    - get_access_action()       -> Action | None (None: the view authorizes itself)
    - get_access_resource_id()  -> id of the addressed instance, if any
    - get_access_context()      -> AccessContext (parent ids from the URL / body)
    """
    def has_permission(self, request, view):
        u = request.user
        if not u or not u.is_authenticated:
            return False
        action = view.get_access_action()
        if action is None:
            return True
        enforce(check_resource_access(
            u.pk,
            u.role,
            view.access_resource,
            action,
            view.get_access_resource_id(),
            view.get_access_context(),
        ))
        return True
