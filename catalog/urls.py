from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    PlaceViewSet, InstitutionViewSet, ServiceViewSet,
    ConditionViewSet, LanguageViewSet, TreatmentMethodViewSet,
)

router = DefaultRouter()
router.register("places", PlaceViewSet, basename="place")
router.register("institutions", InstitutionViewSet, basename="institution")
router.register("services", ServiceViewSet, basename="service")
router.register("conditions", ConditionViewSet, basename="condition")
router.register("languages", LanguageViewSet, basename="language")
router.register("treatment-methods", TreatmentMethodViewSet, basename="treatment-method")

urlpatterns = [ path("", include(router.urls)) ]
