from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from accounts.enums import UserRole
from .guards import AccessContext, Caller, CreateIntent, check_resource_access
from .permissions import VIEW_ACTIONS, ResourceAccessPermission, enforce

class ResourceAccessMixin:
    """
    Viewset glue for the access resolver.

    Subclasses set `access_resource` and, where lists must be narrowed to what
    the caller may see, override `scope_queryset` (usually via `scope_by_role`).
    Nested views override `get_access_context` to pass their parent ids.
    """
    access_resource = None
    permission_classes = [IsAuthenticated, ResourceAccessPermission]
    lookup_value_regex = r"\d+"

    @property
    def caller(self) -> Caller:
        return Caller.from_user(self.request.user)

    @property
    def create_intent(self) -> CreateIntent:
        return CreateIntent(self.caller)

    def get_access_action(self):
        return VIEW_ACTIONS.get(self.action)

    def get_access_resource_id(self):
        if self.action in ("list", "create"):
            return None
        return self.kwargs.get(self.lookup_url_kwarg or self.lookup_field)

    def get_access_context(self) -> AccessContext:
        return AccessContext()

    def authorize(self, action, resource_id=None, resource=None, context: AccessContext | None = None):
        """Explicit check for custom actions (cancel, review, ...)."""
        u = self.request.user
        enforce(check_resource_access(
            u.pk, u.role, resource or self.access_resource, action, resource_id,
            context if context is not None else self.get_access_context(),
        ))

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            qs = self.scope_queryset(qs)
        return qs

    def scope_queryset(self, qs):
        return qs

    def scope_by_role(self, qs, patient=None, doctor=None):
        """
        Narrow a list to the caller's rows. `patient` / `doctor` are lookups (str or Q
        factory) resolved against the caller's user id; a missing lookup hides everything.
        """
        u = self.request.user
        if u.role == UserRole.ADMIN:
            return qs
        lookup = patient if u.role == UserRole.PATIENT else doctor if u.role == UserRole.DOCTOR else None
        if lookup is None:
            return qs.none()
        if callable(lookup):
            return qs.filter(lookup(u.pk)).distinct()
        return qs.filter(Q(**{lookup: u.pk})).distinct()

class NestedResourceMixin(ResourceAccessMixin):
    """
    Child resources under /persons/{person_pk}/... or /doctors/{doctor_pk}/...

    The parent id from the URL narrows the queryset, is handed to the resolver
    as creation context, and is stamped on new rows.
    """
    parent_model = None
    parent_lookup = "person_pk"
    parent_field = "person"
    # only this role (and admins) may add rows under someone's parent; None lifts the restriction
    parent_role = UserRole.PATIENT

    def get_parent(self):
        if not hasattr(self, "_parent"):
            self._parent = get_object_or_404(self.parent_model, pk=self.kwargs[self.parent_lookup])
        return self._parent

    def get_queryset(self):
        return super().get_queryset().filter(**{f"{self.parent_field}_id": self.kwargs[self.parent_lookup]})

    def get_access_context(self) -> AccessContext:
        return AccessContext(**{f"{self.parent_field}_id": self.kwargs.get(self.parent_lookup)})

    def ensure_parent_role(self):
        role = self.request.user.role
        if self.parent_role is not None and role not in (self.parent_role, UserRole.ADMIN):
            raise PermissionDenied("You do not have permission to perform this action")

    def perform_create(self, serializer):
        self.ensure_parent_role()
        serializer.save(**{self.parent_field: self.get_parent()})
