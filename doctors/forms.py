from django import forms

from accounts.forms import RegistrationFormMixin, password_fields
from .models import Doctor


class DoctorRegistrationForm(RegistrationFormMixin, forms.Form):
    name = forms.CharField(label="Doctor's name", max_length=100)
    username = forms.CharField(max_length=50)
    password, confirm_password = password_fields()
    gender = forms.CharField(max_length=10)
    specialization = forms.CharField(max_length=100)
    years_of_experience = forms.IntegerField(
        min_value=0,
        max_value=100,
        error_messages={
            "min_value": "Years of experience must be between 0 and 100.",
            "max_value": "Years of experience must be between 0 and 100.",
        },
    )

    def to_doctor(self) -> Doctor:
        return Doctor(**self.cleaned_data)
