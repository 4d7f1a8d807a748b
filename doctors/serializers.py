from rest_framework import serializers

from accounts.serializers import ApiSerializer
from .models import Doctor


class DoctorSerializer(ApiSerializer):
    entity_class = Doctor

    doctorID = serializers.IntegerField(source="id", required=False, default=0)
    doctorName = serializers.CharField(
        source="name", required=False, allow_blank=True, allow_null=True, default=""
    )
    username = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    confirmPassword = serializers.CharField(
        source="confirm_password", required=False, allow_blank=True, allow_null=True, default=""
    )
    gender = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    doctorSpecialization = serializers.CharField(
        source="specialization", required=False, allow_blank=True, allow_null=True, default=""
    )
    doctorYearsOfExperience = serializers.IntegerField(
        source="years_of_experience", required=False, default=0
    )
