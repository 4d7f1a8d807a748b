from rest_framework import serializers

from accounts.serializers import ApiDateField, ApiSerializer
from .models import Appointment


class AppointmentSerializer(ApiSerializer):
    entity_class = Appointment

    appointmentID = serializers.IntegerField(source="id", required=False, default=0)
    patientID = serializers.IntegerField(source="patient_id", required=False, allow_null=True)
    doctorID = serializers.IntegerField(source="doctor_id", required=False, allow_null=True)
    appointmentDate = ApiDateField(source="date", required=False, allow_null=True)
    appointmentTime = serializers.TimeField(source="time", required=False, allow_null=True)
    appointmentStatus = serializers.CharField(
        source="status", required=False, allow_blank=True, allow_null=True, default=""
    )
    purposeDescription = serializers.CharField(
        source="purpose_description",
        required=False,
        allow_blank=True,
        allow_null=True,
        default="",
    )
