from django.db import models

class PaymentMethodType(models.TextChoices):
    CARD = "card", "Card"
    PAGO_MOVIL = "pago_movil", "Pago Movil"
