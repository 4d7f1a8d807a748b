import logging

from django.shortcuts import redirect, render

from accounts.errors import render_error_page
from accounts.services.api_client import ApiClient
from accounts.session import get_session, session_required
from accounts.view_models import FormPage
from appointments.services import get_appointments_by_patient_id
from appointments.view_models import AppointmentListPage
from .forms import PatientRegistrationForm
from .services import get_patient_by_username, register_patient

logger = logging.getLogger(__name__)


@session_required
def dashboard(request):
    return render(request, "patients/dashboard.html")


def register(request):
    """Patient sign-up, forwarded to the remote API"""
    if request.method != "POST":
        return _render_register(request, PatientRegistrationForm())

    form = PatientRegistrationForm(request.POST)
    if not form.is_valid():
        return _render_register(request, form, "Please correct the errors in the form.")

    registered, error = register_patient(ApiClient.from_settings(), form.to_patient())
    if registered:
        return _render_register(request, PatientRegistrationForm(), "Registration successful!", True)
    return _render_register(request, form, error)


def _render_register(request, form, message="", succeeded=False):
    page = FormPage(form=form, message=message, succeeded=succeeded)
    return render(request, "patients/register.html", {"page": page})


@session_required
def my_appointments(request):
    """Appointments of the signed-in patient"""
    logger.info("PatientAppointments called")
    username = get_session(request).username

    if not username:
        logger.warning("Username is not found in cookies. Redirecting to login.")
        return redirect("accounts:login")

    client = ApiClient.for_request(request)
    patient, error = get_patient_by_username(client, username)
    if error:
        return render_error_page(request, error)

    appointments, error = get_appointments_by_patient_id(client, patient.id)
    if error:
        return render_error_page(request, error)

    if not appointments:
        logger.info("No appointments found for patient ID: %s", patient.id)

    page = AppointmentListPage(title="My appointments", appointments=appointments)
    return render(request, "patients/appointments.html", {"page": page})
