from django.core.validators import MinValueValidator
from django.db import models
from .enums import InstitutionType

class Place(models.Model):
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=100)  # city, state, country, ...

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name

class Institution(models.Model):
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=24, choices=InstitutionType.choices, default=InstitutionType.OTHER)
    place = models.ForeignKey(Place, null=True, blank=True, on_delete=models.SET_NULL, related_name="institutions")
    # suggestions coming from doctors stay unverified until an admin reviews them
    is_verified = models.BooleanField(default=False)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name

class Service(models.Model):
    name = models.CharField(max_length=255)
    description = models.CharField(max_length=500)
    duration = models.PositiveIntegerField(default=45, validators=[MinValueValidator(1)])  # minutes

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name

class Condition(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name

class Language(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name

class TreatmentMethod(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField()

    class Meta:
        ordering = ["name", "id"]

    def __str__(self): return self.name
