from dataclasses import asdict

from django import forms

from .models import Appointment


class AppointmentForm(forms.Form):
    id = forms.IntegerField(required=False, initial=0, widget=forms.HiddenInput)
    patient_id = forms.IntegerField(
        label="Patient ID",
        min_value=1,
        error_messages={"required": "Patient ID is required."},
    )
    doctor_id = forms.IntegerField(
        label="Doctor",
        min_value=1,
        widget=forms.Select,
        error_messages={"required": "Doctor ID is required."},
    )
    date = forms.DateField(
        label="Appointment date",
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={
            "required": "Appointment date is required.",
            "invalid": "Invalid date format.",
        },
    )
    time = forms.TimeField(
        label="Appointment time",
        widget=forms.TimeInput(attrs={"type": "time"}),
        error_messages={
            "required": "Appointment time is required.",
            "invalid": "Invalid time format.",
        },
    )
    status = forms.CharField(
        label="Appointment status",
        max_length=20,
        error_messages={
            "required": "Appointment status is required.",
            "max_length": "Appointment status cannot be longer than 20 characters.",
        },
    )
    purpose_description = forms.CharField(
        label="Purpose",
        max_length=250,
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        error_messages={
            "max_length": "Purpose description cannot be longer than 250 characters.",
        },
    )

    def __init__(self, *args, doctors=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.set_doctors(doctors)

    def set_doctors(self, doctors):
        """Offer ``doctors`` in the doctor select, labelled by specialization."""
        self.fields["doctor_id"].widget.choices = [("", "Select a doctor")] + [
            (doctor.id, doctor.specialization or doctor.name) for doctor in doctors
        ]

    @classmethod
    def for_appointment(cls, appointment: Appointment, doctors=()):
        return cls(initial=asdict(appointment), doctors=doctors)

    def to_appointment(self) -> Appointment:
        data = dict(self.cleaned_data)
        data["id"] = data.get("id") or 0
        data["purpose_description"] = data.get("purpose_description") or ""
        return Appointment(**data)
