from django.db import transaction
from rest_framework import serializers

from accounts.enums import UserRole
from accounts.models import User
from .enums import PaymentMethodType
from .models import Person, Phone, PaymentMethod, PaymentMethodPerson, Progress

class PersonSerializer(serializers.ModelSerializer):
    # only admins may pick the user; everyone else gets their own account stamped on create
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role=UserRole.PATIENT), required=False)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Person
        fields = [
            "id","user","ci","first_name","middle_name","first_last_name","second_last_name",
            "full_name","birth_date","address","place","is_active","created_at","updated_at",
        ]
        read_only_fields = ["created_at","updated_at"]

class PhoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = Phone
        fields = ["id","person","doctor","area_code","number"]
        read_only_fields = ["person","doctor"]

class PaymentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = [
            "id","type",
            "card_number","card_holder_name","card_brand","expiration_month","expiration_year",
            "pago_movil_phone","pago_movil_bank_code","pago_movil_ci",
        ]

    def validate_card_number(self, value):
        if value and (len(value) != 4 or not value.isdigit()):
            raise serializers.ValidationError("Store the last 4 digits only.")
        return value

    def validate(self, data):
        kind = data.get("type", getattr(self.instance, "type", None))
        if kind == PaymentMethodType.CARD:
            if not (data.get("card_number") or getattr(self.instance, "card_number", "")):
                raise serializers.ValidationError({"card_number": "Required for card payment methods."})
        elif kind == PaymentMethodType.PAGO_MOVIL:
            if not (data.get("pago_movil_phone") or getattr(self.instance, "pago_movil_phone", "")):
                raise serializers.ValidationError({"pago_movil_phone": "Required for Pago Movil payment methods."})
        return data

class PaymentMethodPersonSerializer(serializers.ModelSerializer):
    payment_method = PaymentMethodSerializer()

    class Meta:
        model = PaymentMethodPerson
        fields = ["id","person","payment_method","is_preferred","nickname","created_at","updated_at"]
        read_only_fields = ["person","created_at","updated_at"]

    @transaction.atomic
    def create(self, validated):
        method = PaymentMethod.objects.create(**validated.pop("payment_method"))
        link = PaymentMethodPerson.objects.create(payment_method=method, **validated)
        if link.is_preferred:
            _clear_other_preferred(link)
        return link

    @transaction.atomic
    def update(self, instance, validated):
        method_data = validated.pop("payment_method", None)
        if method_data:
            for k, v in method_data.items():
                setattr(instance.payment_method, k, v)
            instance.payment_method.save()
        instance = super().update(instance, validated)
        if instance.is_preferred:
            _clear_other_preferred(instance)
        return instance

def _clear_other_preferred(link):
    PaymentMethodPerson.objects.filter(person_id=link.person_id, is_preferred=True).exclude(pk=link.pk).update(is_preferred=False)

class ProgressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Progress
        fields = ["id","person","doctor","condition","title","level","notes","created_at"]
        read_only_fields = ["person","doctor","created_at"]
