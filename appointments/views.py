from collections.abc import Mapping

from django.db.models import Q
from django.utils.dateparse import parse_datetime
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from access.enums import Action, Resource
from access.guards import AccessContext
from access.mixins import ResourceAccessMixin
from .models import Appointment, Review
from .serializers import (
    AppointmentSerializer, AppointmentCreateSerializer, AppointmentUpdateSerializer,
    CancelSerializer, ReviewSerializer, ReviewInputSerializer,
)
from .services.booking import (
    book_appointment, transition_status, reschedule_appointment,
    cancel_appointment, create_review,
)


class AppointmentViewSet(ResourceAccessMixin, viewsets.ModelViewSet):
    """
    Patients book and manage their own sessions; doctors see and progress the
    sessions booked with them; admins see everything.

    Filters: ?status=, ?doctor=, ?person=, ?start=<iso>, ?end=<iso>
    """
    access_resource = Resource.APPOINTMENT
    queryset = Appointment.objects.select_related("person", "doctor", "service", "review")
    serializer_class = AppointmentSerializer

    def get_access_context(self):
        # runs before validation; a non-object body is left for the serializer to reject
        if self.action == "create" and isinstance(self.request.data, Mapping):
            return AccessContext(person_id=self.request.data.get("person"))
        return AccessContext()

    def scope_queryset(self, qs):
        qs = self.scope_by_role(qs, patient="person__user_id", doctor="doctor__user_id")
        p = self.request.query_params
        status_ = p.get("status")
        if status_:
            qs = qs.filter(status__iexact=status_)
        for param in ("doctor", "person"):
            value = p.get(param)
            if value and value.isdigit():
                qs = qs.filter(**{f"{param}_id": value})
        start = parse_datetime(p.get("start") or "")
        if start:
            qs = qs.filter(start_at__gte=start)
        end = parse_datetime(p.get("end") or "")
        if end:
            qs = qs.filter(end_at__lte=end)
        return qs

    def create(self, request, *args, **kwargs):
        s = AppointmentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if request.user.is_admin:
            person = data.get("person")
            if person is None:
                raise ValidationError({"person": "This field is required."})
        else:
            person = self.create_intent.person()

        appt = book_appointment(
            person=person,
            doctor=data["doctor"],
            service=data["service"],
            start_at=data["start_at"],
            payment_method=data.get("payment_method"),
            notes=data.get("notes", ""),
        )
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        appt = self.get_object()
        s = AppointmentUpdateSerializer(data=request.data, partial=kwargs.get("partial", False))
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if "status" in data and data["status"] != appt.status:
            if request.user.is_patient:
                raise PermissionDenied("Patients cannot change the appointment status")
            transition_status(appt, data["status"])
        if "start_at" in data and data["start_at"] != appt.start_at:
            reschedule_appointment(appt, data["start_at"])
        if "notes" in data:
            appt.notes = data["notes"]
            appt.save(update_fields=["notes", "updated_at"])
        return Response(AppointmentSerializer(appt).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        # cancelling is an update of the appointment
        self.authorize(Action.UPDATE, resource_id=pk)
        appt = self.get_object()
        s = CancelSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        cancel_appointment(
            appt,
            s.validated_data["reason"],
            enforce_advance=request.user.is_patient,
        )
        return Response(AppointmentSerializer(appt).data)

    @action(detail=True, methods=["post"])
    def review(self, request, pk=None):
        self.authorize(Action.READ, resource_id=pk)
        appt = self.get_object()
        self.authorize(Action.CREATE, resource=Resource.REVIEW, context=AccessContext(person_id=appt.person_id))
        s = ReviewInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        review = create_review(appt, appt.person, s.validated_data["score"], s.validated_data.get("description", ""))
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class ReviewViewSet(ResourceAccessMixin, viewsets.ModelViewSet):
    """
    Reviews are public to patients. Doctors see the reviews left on their own
    sessions. Filter by doctor with ?doctor=<id>.
    """
    access_resource = Resource.REVIEW
    queryset = Review.objects.select_related("appointment__person", "appointment__doctor")
    serializer_class = ReviewSerializer

    def scope_queryset(self, qs):
        qs = self.scope_by_role(qs, patient=lambda user_id: Q(), doctor="appointment__doctor__user_id")
        doctor_id = self.request.query_params.get("doctor")
        if doctor_id and doctor_id.isdigit():
            qs = qs.filter(appointment__doctor_id=doctor_id)
        return qs

    def perform_create(self, serializer):
        appt = serializer.validated_data["appointment"]
        if self.request.user.is_admin:
            person = appt.person
        else:
            person = self.create_intent.person()
        serializer.instance = create_review(
            appt, person, serializer.validated_data["score"], serializer.validated_data.get("description", ""),
        )
