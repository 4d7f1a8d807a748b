from rest_framework import serializers

from accounts.serializers import ApiDateField, ApiSerializer
from .models import Patient


class PatientSerializer(ApiSerializer):
    entity_class = Patient

    patientID = serializers.IntegerField(source="id", required=False, default=0)
    patientName = serializers.CharField(
        source="name", required=False, allow_blank=True, allow_null=True, default=""
    )
    username = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    confirmPassword = serializers.CharField(
        source="confirm_password", required=False, allow_blank=True, allow_null=True, default=""
    )
    gender = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    dateOfBirth = ApiDateField(source="date_of_birth", required=False, allow_null=True)
