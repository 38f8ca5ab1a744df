from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from billing.models import Payment
from catalog.models import Service
from doctors.models import Doctor
from persons.models import Person
from .enums import ApptStatus

class Appointment(models.Model):
    person = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="appointments")
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="appointments")
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name="appointments")
    payment = models.OneToOneField(Payment, null=True, blank=True, on_delete=models.SET_NULL, related_name="appointment")

    status = models.CharField(max_length=16, choices=ApptStatus.choices, default=ApptStatus.SCHEDULED)

    start_at = models.DateTimeField()
    end_at   = models.DateTimeField()

    cancellation_reason = models.TextField(blank=True)
    notes  = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["doctor","start_at"]),
            models.Index(fields=["person","start_at"]),
            models.Index(fields=["doctor","person","status"]),
        ]
        ordering = ["start_at","id"]

    def __str__(self):
        return f"Appt#{self.id} P:{self.person_id} D:{self.doctor_id} {self.start_at:%Y-%m-%d %H:%M} ({self.status})"

class Review(models.Model):
    appointment = models.OneToOneField(Appointment, on_delete=models.CASCADE, related_name="review")
    score = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Review#{self.id} A:{self.appointment_id} {self.score}/5"
