from django.db.models import Q
from rest_framework import viewsets, mixins, serializers

from access.enums import Action, Resource
from access.guards import AccessContext
from access.mixins import ResourceAccessMixin, NestedResourceMixin
from accounts.enums import UserRole
from appointments.enums import ApptStatus
from core.exceptions import BusinessRuleError
from .models import Person, Phone, PaymentMethodPerson, Progress
from .serializers import PersonSerializer, PhoneSerializer, PaymentMethodPersonSerializer, ProgressSerializer


class PersonViewSet(ResourceAccessMixin, viewsets.ModelViewSet):
    """
    Patient: own person record.
    Doctor: persons they have an appointment with (read/update).
    Admin: everything.
    """
    access_resource = Resource.PERSON
    queryset = Person.objects.select_related("place")
    serializer_class = PersonSerializer

    def scope_queryset(self, qs):
        qs = self.scope_by_role(qs, patient="user_id", doctor="appointments__doctor__user_id")
        s = self.request.query_params.get("s")
        if s:
            qs = qs.filter(
                Q(first_name__icontains=s) | Q(first_last_name__icontains=s) | Q(ci__icontains=s)
            )
        return qs

    def perform_create(self, serializer):
        u = self.request.user
        if u.role == UserRole.ADMIN:
            owner = serializer.validated_data.get("user")
            if owner is None:
                raise serializers.ValidationError({"user": "This field is required."})
        else:
            owner = u
        if Person.objects.filter(user=owner).exists():
            raise BusinessRuleError("A person profile already exists for this user.", code="CONFLICT", status_code=409)
        serializer.save(user=owner)

    def perform_update(self, serializer):
        # the owning account never changes
        serializer.validated_data.pop("user", None)
        serializer.save()


class PersonPhoneViewSet(NestedResourceMixin, viewsets.ModelViewSet):
    access_resource = Resource.PHONE
    parent_model = Person
    queryset = Phone.objects.all()
    serializer_class = PhoneSerializer

    def scope_queryset(self, qs):
        return self.scope_by_role(qs, patient="person__user_id")


class PaymentMethodViewSet(NestedResourceMixin, viewsets.ModelViewSet):
    """Saved payment methods of a person (the person <-> method association rows)."""
    access_resource = Resource.PAYMENT_METHOD
    parent_model = Person
    queryset = PaymentMethodPerson.objects.select_related("payment_method")
    serializer_class = PaymentMethodPersonSerializer

    def scope_queryset(self, qs):
        return self.scope_by_role(qs, patient="person__user_id")


def progress_visible_to_doctor(user_id):
    # both conditions must hold on the same appointment row
    return Q(
        person__appointments__doctor__user_id=user_id,
        person__appointments__status=ApptStatus.COMPLETED,
    )


class ProgressViewSet(ResourceAccessMixin,
                      viewsets.GenericViewSet,
                      mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      mixins.UpdateModelMixin,
                      mixins.DestroyModelMixin):
    """
    Progress notes. Patients read their own; doctors manage notes of patients
    they completed a session with; admins have no access at all.
    """
    access_resource = Resource.PROGRESS
    queryset = Progress.objects.select_related("person", "doctor", "condition")
    serializer_class = ProgressSerializer

    def scope_queryset(self, qs):
        qs = self.scope_by_role(qs, patient="person__user_id", doctor=progress_visible_to_doctor)
        person_id = self.request.query_params.get("person")
        if person_id and person_id.isdigit():
            qs = qs.filter(person_id=person_id)
        return qs


class PersonProgressViewSet(NestedResourceMixin, ProgressViewSet, mixins.CreateModelMixin):
    parent_model = Person
    # notes are written by the treating doctor
    parent_role = None

    def list(self, request, *args, **kwargs):
        # the person itself must be visible before its notes are listed
        self.authorize(Action.READ, resource=Resource.PERSON, resource_id=self.kwargs["person_pk"], context=AccessContext())
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.save(person=self.get_parent(), doctor=self.create_intent.doctor())
