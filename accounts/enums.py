from django.db import models

class UserRole(models.TextChoices):
    PATIENT = "PATIENT", "Patient"
    DOCTOR  = "DOCTOR", "Doctor"
    ADMIN   = "ADMIN", "Admin"
