from django import forms

from accounts.forms import RegistrationFormMixin, password_fields
from .models import Patient


class PatientRegistrationForm(RegistrationFormMixin, forms.Form):
    name = forms.CharField(label="Patient's name", max_length=100)
    username = forms.CharField(max_length=50)
    password, confirm_password = password_fields()
    gender = forms.CharField(max_length=10)
    date_of_birth = forms.DateField(
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={"invalid": "Invalid date format."},
    )

    def to_patient(self) -> Patient:
        return Patient(**self.cleaned_data)
