from rest_framework import serializers
from .models import Place, Institution, Service, Condition, Language, TreatmentMethod

class PlaceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Place
        fields = ["id","name","type"]

class InstitutionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Institution
        fields = ["id","name","type","place","is_verified"]

class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id","name","description","duration"]

class ConditionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Condition
        fields = ["id","name"]

class LanguageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Language
        fields = ["id","name"]

class TreatmentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = TreatmentMethod
        fields = ["id","name","description"]
