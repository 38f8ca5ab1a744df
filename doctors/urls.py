from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedSimpleRouter

from .views import (
    DoctorViewSet, EducationViewSet, ScheduleViewSet, AgeGroupViewSet, PayoutMethodViewSet,
    PayoutViewSet, DoctorPhoneViewSet, DoctorServiceViewSet, DoctorTreatmentMethodViewSet,
    DoctorConditionViewSet, DoctorLanguageViewSet,
)

router = DefaultRouter()
router.register("doctors", DoctorViewSet, basename="doctor")

doctors_router = NestedSimpleRouter(router, "doctors", lookup="doctor")
doctors_router.register("educations", EducationViewSet, basename="doctor-education")
doctors_router.register("schedules", ScheduleViewSet, basename="doctor-schedule")
doctors_router.register("age-groups", AgeGroupViewSet, basename="doctor-age-group")
doctors_router.register("payout-methods", PayoutMethodViewSet, basename="doctor-payout-method")
doctors_router.register("payouts", PayoutViewSet, basename="doctor-payout")
doctors_router.register("phones", DoctorPhoneViewSet, basename="doctor-phone")
doctors_router.register("services", DoctorServiceViewSet, basename="doctor-service")
doctors_router.register("treatment-methods", DoctorTreatmentMethodViewSet, basename="doctor-treatment-method")
doctors_router.register("conditions", DoctorConditionViewSet, basename="doctor-condition")
doctors_router.register("languages", DoctorLanguageViewSet, basename="doctor-language")

urlpatterns = [
    path("", include(router.urls)),
    path("", include(doctors_router.urls)),
]
