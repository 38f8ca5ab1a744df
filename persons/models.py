from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from catalog.models import Place, Condition
from .enums import PaymentMethodType

class Person(models.Model):
    """
    Patient profile. Exactly one per patient user; the owner of every
    patient-side record (phones, payment methods, payments, progress, appointments).
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="person")

    ci = models.PositiveIntegerField(unique=True)  # national id
    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    first_last_name = models.CharField(max_length=100)
    second_last_name = models.CharField(max_length=100, blank=True)
    birth_date = models.DateField()
    address = models.CharField(max_length=500)
    place = models.ForeignKey(Place, null=True, blank=True, on_delete=models.SET_NULL, related_name="persons")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    @property
    def full_name(self):
        return " ".join(p for p in [self.first_name, self.first_last_name] if p)

    def __str__(self):
        return f"{self.full_name} (CI {self.ci})"

class Phone(models.Model):
    # belongs to exactly one of person / doctor
    person = models.ForeignKey(Person, null=True, blank=True, on_delete=models.CASCADE, related_name="phones")
    doctor = models.ForeignKey("doctors.Doctor", null=True, blank=True, on_delete=models.CASCADE, related_name="phones")
    area_code = models.PositiveIntegerField()
    number = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(person__isnull=False, doctor__isnull=True)
                    | models.Q(person__isnull=True, doctor__isnull=False)
                ),
                name="phone_single_owner",
            ),
        ]
        ordering = ["id"]

    def clean(self):
        if bool(self.person_id) == bool(self.doctor_id):
            raise ValidationError("A phone belongs to exactly one person or doctor.")

    def __str__(self):
        return f"({self.area_code}) {self.number}"

class PaymentMethod(models.Model):
    type = models.CharField(max_length=16, choices=PaymentMethodType.choices)

    # card
    card_number = models.CharField(max_length=4, blank=True)  # last 4 digits only
    card_holder_name = models.CharField(max_length=255, blank=True)
    card_brand = models.CharField(max_length=50, blank=True)
    expiration_month = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(12)])
    expiration_year = models.PositiveSmallIntegerField(null=True, blank=True)

    # pago movil
    pago_movil_phone = models.CharField(max_length=20, blank=True)
    pago_movil_bank_code = models.CharField(max_length=10, blank=True)
    pago_movil_ci = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        if self.type == PaymentMethodType.CARD:
            return f"{self.card_brand or 'Card'} ****{self.card_number}"
        return f"Pago Movil {self.pago_movil_phone}"

class PaymentMethodPerson(models.Model):
    """A person's saved payment method. This is the owned record behind `payment-method`."""
    person = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="payment_methods")
    payment_method = models.ForeignKey(PaymentMethod, on_delete=models.CASCADE, related_name="holders")
    is_preferred = models.BooleanField(default=False)
    nickname = models.CharField(max_length=100)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_preferred", "id"]

    def __str__(self):
        return f"{self.nickname} ({self.person_id})"

class Progress(models.Model):
    person = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="progresses")
    doctor = models.ForeignKey("doctors.Doctor", null=True, blank=True, on_delete=models.SET_NULL, related_name="progress_notes")
    condition = models.ForeignKey(Condition, null=True, blank=True, on_delete=models.SET_NULL, related_name="progresses")
    title = models.CharField(max_length=255)
    level = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Progress#{self.id} P:{self.person_id} {self.title}"
