from rest_framework import serializers

from catalog.models import Service
from doctors.models import Doctor
from persons.models import Person, PaymentMethodPerson
from .enums import ApptStatus
from .models import Appointment, Review


class AppointmentSerializer(serializers.ModelSerializer):
    person_name = serializers.CharField(source="person.full_name", read_only=True)
    doctor_name = serializers.CharField(source="doctor.full_name", read_only=True)
    service_name = serializers.CharField(source="service.name", read_only=True)
    has_review = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = [
            "id","person","person_name","doctor","doctor_name","service","service_name",
            "payment","status","start_at","end_at","cancellation_reason","notes",
            "has_review","created_at","updated_at",
        ]
        read_only_fields = fields

    def get_has_review(self, obj):
        return hasattr(obj, "review")


class AppointmentCreateSerializer(serializers.Serializer):
    # person is only honoured for admins; patients always book for themselves
    person = serializers.PrimaryKeyRelatedField(queryset=Person.objects.all(), required=False)
    doctor = serializers.PrimaryKeyRelatedField(queryset=Doctor.objects.all())
    service = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all())
    start_at = serializers.DateTimeField()
    payment_method = serializers.PrimaryKeyRelatedField(
        queryset=PaymentMethodPerson.objects.select_related("payment_method"), required=False, allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class AppointmentUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ApptStatus.choices, required=False)
    start_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)


class ReviewSerializer(serializers.ModelSerializer):
    doctor = serializers.IntegerField(source="appointment.doctor_id", read_only=True)
    person_name = serializers.CharField(source="appointment.person.full_name", read_only=True)

    class Meta:
        model = Review
        fields = ["id","appointment","doctor","person_name","score","description","created_at"]
        read_only_fields = ["created_at"]
        # one review per appointment is enforced by create_review (409)
        extra_kwargs = {"appointment": {"validators": []}}

    def get_fields(self):
        fields = super().get_fields()
        if self.instance is not None:
            # a review never moves to another appointment
            fields["appointment"].read_only = True
        return fields


class ReviewInputSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=1, max_value=5)
    description = serializers.CharField(required=False, allow_blank=True, max_length=2000)
