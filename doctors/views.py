import logging

from django.db.models import Q
from rest_framework import viewsets, serializers

from access.enums import Action, Resource
from access.guards import AccessContext
from access.mixins import ResourceAccessMixin, NestedResourceMixin
from accounts.enums import UserRole
from core.exceptions import BusinessRuleError
from persons.models import Phone
from persons.serializers import PhoneSerializer
from .enums import PayoutStatus
from .models import (
    Doctor, Education, Schedule, AgeGroup, PayoutMethod, Payout,
    DoctorService, DoctorTreatmentMethod, DoctorCondition, DoctorLanguage,
)
from .serializers import (
    DoctorSerializer, DoctorListSerializer, EducationSerializer, ScheduleSerializer,
    AgeGroupSerializer, PayoutMethodSerializer, PayoutSerializer,
    DoctorServiceSerializer, DoctorTreatmentMethodSerializer,
    DoctorConditionSerializer, DoctorLanguageSerializer,
)

logger = logging.getLogger(__name__)


class DoctorViewSet(ResourceAccessMixin, viewsets.ModelViewSet):
    """
    Public directory of therapists.

    Non-admins only see approved (active) doctors plus their own profile.
    Filters: ?s=<name>, ?service=<id>, ?condition=<id>, ?language=<id>, ?place=<id>
    """
    access_resource = Resource.DOCTOR
    queryset = Doctor.objects.select_related("place").prefetch_related(
        "doctor_services__service",
        "doctor_conditions__condition",
        "doctor_languages__language",
        "doctor_treatment_methods__treatment_method",
    )

    def get_serializer_class(self):
        if self.action == "list":
            return DoctorListSerializer
        return DoctorSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        u = self.request.user
        if u.role != UserRole.ADMIN:
            qs = qs.filter(Q(is_active=True) | Q(user_id=u.pk))
        return qs

    def scope_queryset(self, qs):
        p = self.request.query_params
        s = p.get("s")
        if s:
            qs = qs.filter(
                Q(first_name__icontains=s) | Q(first_last_name__icontains=s) | Q(biography__icontains=s)
            )
        for param, lookup in (
            ("service", "doctor_services__service_id"),
            ("condition", "doctor_conditions__condition_id"),
            ("language", "doctor_languages__language_id"),
            ("place", "place_id"),
        ):
            value = p.get(param)
            if value and value.isdigit():
                qs = qs.filter(**{lookup: value})
        return qs.distinct()

    def perform_create(self, serializer):
        owner = serializer.validated_data.get("user")
        if owner is None:
            raise serializers.ValidationError({"user": "This field is required."})
        if Doctor.objects.filter(user=owner).exists():
            raise BusinessRuleError("A doctor profile already exists for this user.", code="CONFLICT", status_code=409)
        serializer.save()

    def perform_update(self, serializer):
        serializer.validated_data.pop("user", None)
        # approval is an admin decision
        if not self.request.user.is_admin:
            serializer.validated_data.pop("is_active", None)
        doctor = serializer.save()
        logger.info(f"doctor {doctor.pk} updated by user {self.request.user.pk}")


class DoctorChildViewSet(NestedResourceMixin, viewsets.ModelViewSet):
    """Base for rows hanging off /doctors/{doctor_pk}/..."""
    parent_model = Doctor
    parent_lookup = "doctor_pk"
    parent_field = "doctor"
    parent_role = UserRole.DOCTOR
    # profile rows anyone who may read the doctor can browse (hours, credentials, ...)
    public_listing = False

    def get_access_action(self):
        if self.public_listing and self.action == "list":
            # checked against the parent doctor in list()
            return None
        return super().get_access_action()

    def list(self, request, *args, **kwargs):
        if self.public_listing:
            self.authorize(Action.READ, resource=Resource.DOCTOR, resource_id=self.kwargs[self.parent_lookup], context=AccessContext())
            self.get_parent()
        return super().list(request, *args, **kwargs)

    def scope_queryset(self, qs):
        if self.public_listing:
            return qs
        return self.scope_by_role(qs, doctor="doctor__user_id")


class EducationViewSet(DoctorChildViewSet):
    access_resource = Resource.EDUCATION
    public_listing = True
    queryset = Education.objects.select_related("institution")
    serializer_class = EducationSerializer


class ScheduleViewSet(DoctorChildViewSet):
    access_resource = Resource.SCHEDULE
    public_listing = True
    queryset = Schedule.objects.all()
    serializer_class = ScheduleSerializer


class AgeGroupViewSet(DoctorChildViewSet):
    access_resource = Resource.AGE_GROUP
    public_listing = True
    queryset = AgeGroup.objects.all()
    serializer_class = AgeGroupSerializer


class PayoutMethodViewSet(DoctorChildViewSet):
    access_resource = Resource.PAYOUT_METHOD
    queryset = PayoutMethod.objects.all()
    serializer_class = PayoutMethodSerializer

    def perform_create(self, serializer):
        super().perform_create(serializer)
        self._clear_other_preferred(serializer.instance)

    def perform_update(self, serializer):
        super().perform_update(serializer)
        self._clear_other_preferred(serializer.instance)

    @staticmethod
    def _clear_other_preferred(method):
        if method.is_preferred:
            PayoutMethod.objects.filter(doctor_id=method.doctor_id, is_preferred=True).exclude(pk=method.pk).update(is_preferred=False)


class PayoutViewSet(NestedResourceMixin, viewsets.ReadOnlyModelViewSet):
    """
    Payouts received by a doctor (read-only; rows are written by the back office).
    Visible to the doctor themself and to admins.
    Filter: ?status=pending|processing|completed|failed
    """
    access_resource = Resource.DOCTOR
    parent_model = Doctor
    parent_lookup = "doctor_pk"
    parent_field = "doctor"
    queryset = Payout.objects.all()
    serializer_class = PayoutSerializer

    def get_access_action(self):
        # payout history is as private as editing the profile it belongs to
        return Action.UPDATE

    def get_access_resource_id(self):
        return self.kwargs.get(self.parent_lookup)

    def list(self, request, *args, **kwargs):
        self.get_parent()
        return super().list(request, *args, **kwargs)

    def scope_queryset(self, qs):
        status = self.request.query_params.get("status")
        if status:
            if status not in PayoutStatus.values:
                raise serializers.ValidationError({"status": f"Must be one of: {', '.join(PayoutStatus.values)}."})
            qs = qs.filter(status=status)
        return qs


class DoctorPhoneViewSet(DoctorChildViewSet):
    access_resource = Resource.PHONE
    queryset = Phone.objects.all()
    serializer_class = PhoneSerializer


class DoctorCatalogLinkViewSet(DoctorChildViewSet):
    """
    Doctor <-> catalog junction rows, addressed by the catalog id:
    /doctors/{doctor_pk}/services/{service_id}/
    """
    catalog_field = None
    public_listing = True
    lookup_url_kwarg = "pk"

    def perform_create(self, serializer):
        self.ensure_parent_role()
        doctor = self.get_parent()
        item = serializer.validated_data[self.catalog_field]
        model = serializer.Meta.model
        if model.objects.filter(doctor=doctor, **{self.catalog_field: item}).exists():
            raise BusinessRuleError(
                f"This {self.catalog_field.replace('_', ' ')} is already linked to the doctor.",
                code="CONFLICT", status_code=409,
            )
        serializer.save(doctor=doctor)

    def perform_update(self, serializer):
        # the catalog side is the row's identity
        serializer.validated_data.pop(self.catalog_field, None)
        serializer.save()


class DoctorServiceViewSet(DoctorCatalogLinkViewSet):
    access_resource = Resource.DOCTOR_SERVICE
    queryset = DoctorService.objects.select_related("service")
    serializer_class = DoctorServiceSerializer
    catalog_field = "service"
    lookup_field = "service_id"


class DoctorTreatmentMethodViewSet(DoctorCatalogLinkViewSet):
    access_resource = Resource.DOCTOR_TREATMENT_METHOD
    queryset = DoctorTreatmentMethod.objects.select_related("treatment_method")
    serializer_class = DoctorTreatmentMethodSerializer
    catalog_field = "treatment_method"
    lookup_field = "treatment_method_id"


class DoctorConditionViewSet(DoctorCatalogLinkViewSet):
    access_resource = Resource.DOCTOR_CONDITION
    queryset = DoctorCondition.objects.select_related("condition")
    serializer_class = DoctorConditionSerializer
    catalog_field = "condition"
    lookup_field = "condition_id"


class DoctorLanguageViewSet(DoctorCatalogLinkViewSet):
    access_resource = Resource.DOCTOR_LANGUAGE
    queryset = DoctorLanguage.objects.select_related("language")
    serializer_class = DoctorLanguageSerializer
    catalog_field = "language"
    lookup_field = "language_id"
