from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PaymentViewSet, PersonPaymentViewSet

router = DefaultRouter()
router.register("payments", PaymentViewSet, basename="payment")

person_payments = PersonPaymentViewSet.as_view({"get": "list"})
person_payment_detail = PersonPaymentViewSet.as_view({"get": "retrieve"})

urlpatterns = [
    path("persons/<int:person_pk>/payments/", person_payments, name="person-payment-list"),
    path("persons/<int:person_pk>/payments/<int:pk>/", person_payment_detail, name="person-payment-detail"),
    path("", include(router.urls)),
]
