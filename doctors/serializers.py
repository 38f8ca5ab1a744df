from rest_framework import serializers

from accounts.enums import UserRole
from accounts.models import User
from .models import (
    Doctor, Education, Schedule, AgeGroup, PayoutMethod, Payout,
    DoctorService, DoctorTreatmentMethod, DoctorCondition, DoctorLanguage,
)
from .enums import PayoutType


class DoctorServiceSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source="service.name", read_only=True)
    duration = serializers.IntegerField(source="service.duration", read_only=True)

    class Meta:
        model = DoctorService
        fields = ["id","doctor","service","service_name","duration","amount"]
        read_only_fields = ["doctor"]


class DoctorTreatmentMethodSerializer(serializers.ModelSerializer):
    treatment_method_name = serializers.CharField(source="treatment_method.name", read_only=True)

    class Meta:
        model = DoctorTreatmentMethod
        fields = ["id","doctor","treatment_method","treatment_method_name"]
        read_only_fields = ["doctor"]


class DoctorConditionSerializer(serializers.ModelSerializer):
    condition_name = serializers.CharField(source="condition.name", read_only=True)

    class Meta:
        model = DoctorCondition
        fields = ["id","doctor","condition","condition_name","type"]
        read_only_fields = ["doctor"]


class DoctorLanguageSerializer(serializers.ModelSerializer):
    language_name = serializers.CharField(source="language.name", read_only=True)

    class Meta:
        model = DoctorLanguage
        fields = ["id","doctor","language","language_name","type"]
        read_only_fields = ["doctor"]


class DoctorSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role=UserRole.DOCTOR), required=False)
    full_name = serializers.CharField(read_only=True)
    services = DoctorServiceSerializer(source="doctor_services", many=True, read_only=True)
    conditions = DoctorConditionSerializer(source="doctor_conditions", many=True, read_only=True)
    languages = DoctorLanguageSerializer(source="doctor_languages", many=True, read_only=True)
    treatment_methods = DoctorTreatmentMethodSerializer(source="doctor_treatment_methods", many=True, read_only=True)

    class Meta:
        model = Doctor
        fields = [
            "id","user","ci","first_name","middle_name","first_last_name","second_last_name",
            "full_name","birth_date","address","place",
            "biography","first_session_expectation","biggest_strengths","is_active",
            "services","conditions","languages","treatment_methods",
            "created_at","updated_at",
        ]
        read_only_fields = ["created_at","updated_at"]


class DoctorListSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Doctor
        fields = ["id","full_name","place","biography","is_active"]


class EducationSerializer(serializers.ModelSerializer):
    institution_name = serializers.CharField(source="institution.name", read_only=True)

    class Meta:
        model = Education
        fields = ["id","doctor","institution","institution_name","degree","specialization","start_year","end_year"]
        read_only_fields = ["doctor"]

    def validate(self, data):
        start = data.get("start_year", getattr(self.instance, "start_year", None))
        end = data.get("end_year", getattr(self.instance, "end_year", None))
        if start is not None and end is not None and end < start:
            raise serializers.ValidationError({"end_year": "Must not be before start_year."})
        return data


class ScheduleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Schedule
        fields = ["id","doctor","day","start_time","end_time"]
        read_only_fields = ["doctor"]

    def validate(self, data):
        start = data.get("start_time", getattr(self.instance, "start_time", None))
        end = data.get("end_time", getattr(self.instance, "end_time", None))
        if start is not None and end is not None and end <= start:
            raise serializers.ValidationError({"end_time": "Must be after start_time."})
        return data


class AgeGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = AgeGroup
        fields = ["id","doctor","name","min_age","max_age"]
        read_only_fields = ["doctor"]

    def validate(self, data):
        lo = data.get("min_age", getattr(self.instance, "min_age", None))
        hi = data.get("max_age", getattr(self.instance, "max_age", None))
        if lo is not None and hi is not None and hi < lo:
            raise serializers.ValidationError({"max_age": "Must not be below min_age."})
        return data


class PayoutMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayoutMethod
        fields = [
            "id","doctor","type","nickname","is_preferred",
            "bank_name","account_number","account_type",
            "pago_movil_phone","pago_movil_bank_code","pago_movil_ci",
            "created_at","updated_at",
        ]
        read_only_fields = ["doctor","created_at","updated_at"]

    def validate(self, data):
        kind = data.get("type", getattr(self.instance, "type", None))
        if kind == PayoutType.BANK_TRANSFER:
            if not (data.get("account_number") or getattr(self.instance, "account_number", "")):
                raise serializers.ValidationError({"account_number": "Required for bank transfers."})
        elif kind == PayoutType.PAGO_MOVIL:
            if not (data.get("pago_movil_phone") or getattr(self.instance, "pago_movil_phone", "")):
                raise serializers.ValidationError({"pago_movil_phone": "Required for Pago Movil payouts."})
        return data


class PayoutSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payout
        fields = [
            "id","doctor","type","amount","status",
            "bank_name","account_number","account_type",
            "pago_movil_phone","pago_movil_bank_code","pago_movil_ci",
            "processed_at","created_at","updated_at",
        ]
        read_only_fields = fields
