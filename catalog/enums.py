from django.db import models

class InstitutionType(models.TextChoices):
    UNIVERSITY = "university", "University"
    HOSPITAL = "hospital", "Hospital"
    CLINIC = "clinic", "Clinic"
    RESEARCH_CENTER = "research_center", "Research center"
    OTHER = "other", "Other"
