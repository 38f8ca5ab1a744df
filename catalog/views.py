from rest_framework import viewsets

from access.enums import Resource
from access.mixins import ResourceAccessMixin
from .models import Place, Institution, Service, Condition, Language, TreatmentMethod
from .serializers import (
    PlaceSerializer, InstitutionSerializer, ServiceSerializer,
    ConditionSerializer, LanguageSerializer, TreatmentMethodSerializer,
)


class CatalogViewSet(ResourceAccessMixin, viewsets.ModelViewSet):
    """Shared reference data: everyone browses, admins curate. ?s= searches by name."""

    def scope_queryset(self, qs):
        s = self.request.query_params.get("s")
        if s:
            qs = qs.filter(name__icontains=s)
        return qs


class PlaceViewSet(CatalogViewSet):
    access_resource = Resource.PLACE
    queryset = Place.objects.all()
    serializer_class = PlaceSerializer


class ServiceViewSet(CatalogViewSet):
    access_resource = Resource.SERVICE
    queryset = Service.objects.all()
    serializer_class = ServiceSerializer


class ConditionViewSet(CatalogViewSet):
    access_resource = Resource.CONDITION
    queryset = Condition.objects.all()
    serializer_class = ConditionSerializer


class LanguageViewSet(CatalogViewSet):
    access_resource = Resource.LANGUAGE
    queryset = Language.objects.all()
    serializer_class = LanguageSerializer


class TreatmentMethodViewSet(CatalogViewSet):
    access_resource = Resource.TREATMENT_METHOD
    queryset = TreatmentMethod.objects.all()
    serializer_class = TreatmentMethodSerializer


class InstitutionViewSet(CatalogViewSet):
    """
    Doctors may suggest institutions for their education entries; suggestions
    stay hidden from everyone but admins until verified.
    """
    access_resource = Resource.INSTITUTION
    queryset = Institution.objects.select_related("place")
    serializer_class = InstitutionSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if not self.request.user.is_admin:
            qs = qs.filter(is_verified=True)
        return qs

    def perform_create(self, serializer):
        if self.request.user.is_admin:
            serializer.save()
        else:
            serializer.save(is_verified=False)
