from django.db import models

class Resource(models.TextChoices):
    PERSON = "person", "Person"
    DOCTOR = "doctor", "Doctor"
    APPOINTMENT = "appointment", "Appointment"
    PAYMENT = "payment", "Payment"
    PAYMENT_METHOD = "payment-method", "Payment method"
    PAYOUT_METHOD = "payout-method", "Payout method"
    REVIEW = "review", "Review"
    SERVICE = "service", "Service"
    CONDITION = "condition", "Condition"
    LANGUAGE = "language", "Language"
    PLACE = "place", "Place"
    INSTITUTION = "institution", "Institution"
    TREATMENT_METHOD = "treatment-method", "Treatment method"
    PROGRESS = "progress", "Progress"
    PHONE = "phone", "Phone"
    EDUCATION = "education", "Education"
    SCHEDULE = "schedule", "Schedule"
    AGE_GROUP = "age-group", "Age group"
    DOCTOR_SERVICE = "doctor-service", "Doctor service"
    DOCTOR_TREATMENT_METHOD = "doctor-treatment-method", "Doctor treatment method"
    DOCTOR_CONDITION = "doctor-condition", "Doctor condition"
    DOCTOR_LANGUAGE = "doctor-language", "Doctor language"

class Action(models.TextChoices):
    CREATE = "create", "Create"
    READ = "read", "Read"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"
    LIST = "list", "List"

class PermissionScope(models.TextChoices):
    ALL = "all", "All"
    OWN = "own", "Own"
    ASSIGNED = "assigned", "Assigned"
    NONE = "none", "None"

class DecisionCode(models.TextChoices):
    FORBIDDEN = "FORBIDDEN", "Forbidden"
    INTERNAL_ERROR = "INTERNAL_ERROR", "Internal error"
