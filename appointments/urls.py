from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AppointmentViewSet, ReviewViewSet

router = DefaultRouter()
router.register("appointments", AppointmentViewSet, basename="appointment")
router.register("reviews", ReviewViewSet, basename="review")

urlpatterns = [ path("", include(router.urls)) ]
