from rest_framework import serializers

from persons.models import PaymentMethod
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    payment_method = serializers.PrimaryKeyRelatedField(queryset=PaymentMethod.objects.all())
    payment_method_type = serializers.CharField(source="payment_method.type", read_only=True)
    appointment = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = ["id","person","payment_method","payment_method_type","amount","date","appointment","created_at","updated_at"]
        read_only_fields = ["person","created_at","updated_at"]

    def get_appointment(self, obj):
        appt = getattr(obj, "appointment", None)
        return appt.pk if appt else None
