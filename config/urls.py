from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/accounts/", include("accounts.urls")),
    # persons/, progresses/
    path("api/", include("persons.urls")),
    # doctors/ and nested doctor sub-resources
    path("api/", include("doctors.urls")),
    # appointments/, reviews/
    path("api/", include("appointments.urls")),
    path("api/", include("billing.urls")),
    path("api/", include("catalog.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
]
