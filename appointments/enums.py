from django.db import models

class ApptStatus(models.TextChoices):
    SCHEDULED = "scheduled","Scheduled"
    CONFIRMED = "confirmed","Confirmed"
    COMPLETED = "completed","Completed"
    CANCELLED = "cancelled","Cancelled"

    @classmethod
    def terminal(cls):
        return {cls.COMPLETED, cls.CANCELLED}

# scheduled -> confirmed -> completed, cancellable until completed
STATUS_TRANSITIONS = {
    ApptStatus.SCHEDULED: {ApptStatus.CONFIRMED, ApptStatus.CANCELLED},
    ApptStatus.CONFIRMED: {ApptStatus.COMPLETED, ApptStatus.CANCELLED},
}
