from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from doctors.models import Doctor
from persons.models import Person
from .enums import UserRole
from .models import User

class _AccountSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)

    ci = serializers.IntegerField(min_value=1)
    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    first_last_name = serializers.CharField(max_length=100)
    second_last_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    birth_date = serializers.DateField()
    address = serializers.CharField(max_length=500)

    role = None
    profile_model = None

    def validate_email(self, value):
        value = User.objects.normalize_email(value).lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_ci(self, value):
        if self.profile_model.objects.filter(ci=value).exists():
            raise serializers.ValidationError("This CI is already registered.")
        return value

    @transaction.atomic
    def create(self, validated):
        email = validated.pop("email")
        pwd = validated.pop("password")
        user = User.objects.create_user(
            email=email,
            password=pwd,
            first_name=validated["first_name"],
            last_name=validated["first_last_name"],
            role=self.role,
        )
        self.profile_model.objects.create(user=user, **validated)
        return user

class RegisterSerializer(_AccountSerializer):
    """Patient sign-up: user + person in one step."""
    role = UserRole.PATIENT
    profile_model = Person

class DoctorRegisterSerializer(_AccountSerializer):
    """Therapist sign-up. The doctor profile starts inactive until an admin approves it."""
    role = UserRole.DOCTOR
    profile_model = Doctor

    biography = serializers.CharField()
    first_session_expectation = serializers.CharField(required=False, allow_blank=True)
    biggest_strengths = serializers.CharField(required=False, allow_blank=True)

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    def validate(self, data):
        user = authenticate(email=data["email"].lower(), password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        if not user.is_active:
            raise serializers.ValidationError("Account is disabled")
        data["user"] = user
        return data

class MeSerializer(serializers.ModelSerializer):
    person = serializers.SerializerMethodField()
    doctor = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id","email","first_name","last_name","role","person","doctor"]

    def get_person(self, obj):
        return Person.objects.filter(user=obj).values_list("pk", flat=True).first()

    def get_doctor(self, obj):
        return Doctor.objects.filter(user=obj).values_list("pk", flat=True).first()
