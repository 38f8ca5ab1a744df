from django.db import models

class DayOfWeek(models.TextChoices):
    MONDAY = "monday", "Monday"
    TUESDAY = "tuesday", "Tuesday"
    WEDNESDAY = "wednesday", "Wednesday"
    THURSDAY = "thursday", "Thursday"
    FRIDAY = "friday", "Friday"
    SATURDAY = "saturday", "Saturday"
    SUNDAY = "sunday", "Sunday"

    @classmethod
    def from_date(cls, value):
        # date.weekday(): Monday == 0
        return list(cls)[value.weekday()]

class PayoutType(models.TextChoices):
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
    PAGO_MOVIL = "pago_movil", "Pago Movil"

class ConditionType(models.TextChoices):
    PRIMARY = "primary", "Primary"
    OTHER = "other", "Other"

class LanguageType(models.TextChoices):
    NATIVE = "native", "Native"
    FOREIGN = "foreign", "Foreign"

class PayoutStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
