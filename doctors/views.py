import logging

from django.shortcuts import redirect, render

from accounts.errors import render_error_page
from accounts.services.api_client import ApiClient
from accounts.session import get_session, session_required
from accounts.view_models import FormPage
from appointments.services import get_appointments_by_doctor_id
from appointments.view_models import AppointmentListPage
from .forms import DoctorRegistrationForm
from .services import get_doctor_by_username, register_doctor

logger = logging.getLogger(__name__)


@session_required
def dashboard(request):
    return render(request, "doctors/dashboard.html")


def register(request):
    """Doctor sign-up, forwarded to the remote API"""
    if request.method != "POST":
        return _render_register(request, DoctorRegistrationForm())

    form = DoctorRegistrationForm(request.POST)
    if not form.is_valid():
        return _render_register(request, form, "Please correct the errors in the form.")

    registered, error = register_doctor(ApiClient.from_settings(), form.to_doctor())
    if registered:
        return _render_register(request, DoctorRegistrationForm(), "Registration successful!", True)
    return _render_register(request, form, error)


def _render_register(request, form, message="", succeeded=False):
    page = FormPage(form=form, message=message, succeeded=succeeded)
    return render(request, "doctors/register.html", {"page": page})


@session_required
def appointments_list(request):
    """Appointments of the signed-in doctor"""
    logger.info("DoctorAppointments called")
    username = get_session(request).username

    if not username:
        logger.warning("Username is not found in cookies. Redirecting to login.")
        return redirect("accounts:login")

    client = ApiClient.for_request(request)
    doctor, error = get_doctor_by_username(client, username)
    if error:
        return render_error_page(request, error)

    appointments, error = get_appointments_by_doctor_id(client, doctor.id)
    if error:
        return render_error_page(request, error)

    if not appointments:
        logger.info("No appointments found for doctor ID: %s", doctor.id)

    page = AppointmentListPage(title="My appointments", appointments=appointments)
    return render(request, "doctors/appointments.html", {"page": page})
