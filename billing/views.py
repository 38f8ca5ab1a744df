from rest_framework import viewsets, mixins
from rest_framework.exceptions import ValidationError

from access.enums import Resource
from access.mixins import ResourceAccessMixin, NestedResourceMixin
from persons.models import Person, PaymentMethodPerson
from .models import Payment
from .serializers import PaymentSerializer


class PaymentViewSet(ResourceAccessMixin,
                     viewsets.GenericViewSet,
                     mixins.ListModelMixin,
                     mixins.CreateModelMixin,
                     mixins.RetrieveModelMixin):
    """
    Patient: own payments (list/create/read).
    Doctor: payments attached to their appointments (read-only).
    Admin: read-only view of everything.
    """
    access_resource = Resource.PAYMENT
    queryset = Payment.objects.select_related("payment_method", "appointment")
    serializer_class = PaymentSerializer

    def scope_queryset(self, qs):
        return self.scope_by_role(qs, patient="person__user_id", doctor="appointment__doctor__user_id")

    def perform_create(self, serializer):
        person = self.create_intent.person()
        method = serializer.validated_data["payment_method"]
        if not PaymentMethodPerson.objects.filter(person=person, payment_method=method).exists():
            raise ValidationError({"payment_method": "Payment method not found or does not belong to you."})
        serializer.save(person=person)


class PersonPaymentViewSet(NestedResourceMixin,
                           viewsets.GenericViewSet,
                           mixins.ListModelMixin,
                           mixins.RetrieveModelMixin):
    access_resource = Resource.PAYMENT
    parent_model = Person
    queryset = Payment.objects.select_related("payment_method", "appointment")
    serializer_class = PaymentSerializer

    def scope_queryset(self, qs):
        return self.scope_by_role(qs, patient="person__user_id", doctor="appointment__doctor__user_id")
