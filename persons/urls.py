from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedSimpleRouter

from .views import (
    PersonViewSet, PersonPhoneViewSet, PaymentMethodViewSet,
    ProgressViewSet, PersonProgressViewSet,
)

router = DefaultRouter()
router.register("persons", PersonViewSet, basename="person")
router.register("progresses", ProgressViewSet, basename="progress")

persons_router = NestedSimpleRouter(router, "persons", lookup="person")
persons_router.register("phones", PersonPhoneViewSet, basename="person-phone")
persons_router.register("payment-methods", PaymentMethodViewSet, basename="person-payment-method")
persons_router.register("progresses", PersonProgressViewSet, basename="person-progress")

urlpatterns = [
    path("", include(router.urls)),
    path("", include(persons_router.urls)),
]
