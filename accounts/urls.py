from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

urlpatterns = [
    path("register/", views.register),
    path("register/doctor/", views.register_doctor),
    path("login/", views.login_password),
    path("token/refresh/", TokenRefreshView.as_view()),
    path("me/", views.me),
]
