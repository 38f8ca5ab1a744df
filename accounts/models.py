from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _
from .enums import UserRole

class UserManager(BaseUserManager):
    """Email-keyed accounts. Addresses are stored lower-cased so lookups are case-insensitive."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required")
        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, role=UserRole.PATIENT, **extra_fields):
        extra_fields.setdefault("is_staff", role == UserRole.ADMIN)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, role=role, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.update(is_staff=True, is_superuser=True)
        extra_fields.setdefault("role", UserRole.ADMIN)
        if extra_fields["role"] != UserRole.ADMIN:
            raise ValueError("Superusers must have the ADMIN role.")
        return self._create_user(email, password, **extra_fields)

class User(AbstractUser):
    # login is by email; one role per account
    username = None
    email = models.EmailField(_("email address"), unique=True)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.PATIENT)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    @property
    def is_patient(self):
        return self.role == UserRole.PATIENT

    @property
    def is_doctor(self):
        return self.role == UserRole.DOCTOR

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def __str__(self):
        return f"{self.email} ({self.role})"
