from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from catalog.models import Place, Institution, Service, Condition, Language, TreatmentMethod
from .enums import DayOfWeek, PayoutType, PayoutStatus, ConditionType, LanguageType

class Doctor(models.Model):
    """
    Therapist profile. Exactly one per doctor user; the owner of every
    doctor-side record (schedules, educations, payout methods, offered services, ...).
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="doctor")

    ci = models.PositiveIntegerField(unique=True)
    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    first_last_name = models.CharField(max_length=100)
    second_last_name = models.CharField(max_length=100, blank=True)
    birth_date = models.DateField()
    address = models.CharField(max_length=500)
    place = models.ForeignKey(Place, null=True, blank=True, on_delete=models.SET_NULL, related_name="doctors")

    biography = models.TextField()
    first_session_expectation = models.TextField(blank=True)
    biggest_strengths = models.TextField(blank=True)

    # new registrations stay hidden until approved
    is_active = models.BooleanField(default=False)

    services = models.ManyToManyField(Service, through="DoctorService", related_name="doctors", blank=True)
    conditions = models.ManyToManyField(Condition, through="DoctorCondition", related_name="doctors", blank=True)
    languages = models.ManyToManyField(Language, through="DoctorLanguage", related_name="doctors", blank=True)
    treatment_methods = models.ManyToManyField(TreatmentMethod, through="DoctorTreatmentMethod", related_name="doctors", blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    @property
    def full_name(self):
        return " ".join(p for p in [self.first_name, self.first_last_name] if p)

    def __str__(self):
        return f"Dr. {self.full_name}"

class Education(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="educations")
    institution = models.ForeignKey(Institution, on_delete=models.PROTECT, related_name="educations")
    degree = models.CharField(max_length=100)  # MSc, PhD, Diploma, ...
    specialization = models.CharField(max_length=255)
    start_year = models.PositiveSmallIntegerField()
    end_year = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["-end_year", "id"]

    def clean(self):
        if self.end_year < self.start_year:
            raise ValidationError("end_year must not be before start_year.")

    def __str__(self):
        return f"{self.degree} {self.specialization}"

class Schedule(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="schedules")
    day = models.CharField(max_length=10, choices=DayOfWeek.choices)
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        ordering = ["doctor", "day", "start_time"]
        indexes = [models.Index(fields=["doctor", "day"])]

    def clean(self):
        if self.end_time <= self.start_time:
            raise ValidationError("end_time must be after start_time.")

    def __str__(self):
        return f"{self.day} {self.start_time:%H:%M}-{self.end_time:%H:%M}"

class AgeGroup(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="age_groups")
    name = models.CharField(max_length=50)  # Children, Teenagers, Adults
    min_age = models.PositiveSmallIntegerField()
    max_age = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["min_age", "id"]

    def __str__(self):
        return f"{self.name} ({self.min_age}-{self.max_age})"

class PayoutMethod(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="payout_methods")
    type = models.CharField(max_length=16, choices=PayoutType.choices)
    nickname = models.CharField(max_length=100, blank=True)
    is_preferred = models.BooleanField(default=False)

    # bank transfer
    bank_name = models.CharField(max_length=255, blank=True)
    account_number = models.CharField(max_length=50, blank=True)
    account_type = models.CharField(max_length=50, blank=True)  # checking, savings

    # pago movil
    pago_movil_phone = models.CharField(max_length=20, blank=True)
    pago_movil_bank_code = models.CharField(max_length=10, blank=True)
    pago_movil_ci = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_preferred", "id"]

    def __str__(self):
        return f"{self.get_type_display()} ({self.doctor_id})"

class Payout(models.Model):
    """
    Money sent to a doctor. Destination details are copied from the payout
    method at the time of sending, so later edits to the method don't rewrite history.
    """
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="payouts")
    type = models.CharField(max_length=16, choices=PayoutType.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=12, choices=PayoutStatus.choices, default=PayoutStatus.PENDING)

    bank_name = models.CharField(max_length=255, blank=True)
    account_number = models.CharField(max_length=50, blank=True)
    account_type = models.CharField(max_length=50, blank=True)

    pago_movil_phone = models.CharField(max_length=20, blank=True)
    pago_movil_bank_code = models.CharField(max_length=10, blank=True)
    pago_movil_ci = models.PositiveIntegerField(null=True, blank=True)

    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["doctor", "status"])]

    def __str__(self):
        return f"Payout #{self.pk} {self.amount} ({self.status})"

# ---------------------------------------------------------------------
# Doctor <-> catalog junctions
# ---------------------------------------------------------------------
class DoctorService(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="doctor_services")
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="doctor_services")
    amount = models.PositiveIntegerField()  # price for this service

    class Meta:
        constraints = [models.UniqueConstraint(fields=["doctor", "service"], name="uniq_doctor_service")]

    def __str__(self):
        return f"{self.doctor_id}:{self.service_id} @ {self.amount}"

class DoctorTreatmentMethod(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="doctor_treatment_methods")
    treatment_method = models.ForeignKey(TreatmentMethod, on_delete=models.CASCADE, related_name="doctor_treatment_methods")

    class Meta:
        constraints = [models.UniqueConstraint(fields=["doctor", "treatment_method"], name="uniq_doctor_treatment_method")]

class DoctorCondition(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="doctor_conditions")
    condition = models.ForeignKey(Condition, on_delete=models.CASCADE, related_name="doctor_conditions")
    type = models.CharField(max_length=10, choices=ConditionType.choices, default=ConditionType.OTHER)

    class Meta:
        constraints = [models.UniqueConstraint(fields=["doctor", "condition"], name="uniq_doctor_condition")]

class DoctorLanguage(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="doctor_languages")
    language = models.ForeignKey(Language, on_delete=models.CASCADE, related_name="doctor_languages")
    type = models.CharField(max_length=10, choices=LanguageType.choices, default=LanguageType.NATIVE)

    class Meta:
        constraints = [models.UniqueConstraint(fields=["doctor", "language"], name="uniq_doctor_language")]
