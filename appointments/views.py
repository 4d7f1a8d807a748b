import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from accounts.errors import render_error_page
from accounts.services.api_client import ApiClient, ApiUnavailableError
from accounts.session import get_session
from doctors.services import get_all_doctors
from .forms import AppointmentForm
from .models import Appointment
from .services import get_all_appointments, get_appointment_by_id, save_appointment
from .view_models import AppointmentFormPage, AppointmentListPage

logger = logging.getLogger(__name__)

DOCTORS_UNAVAILABLE_MESSAGE = "An error occurred while retrieving doctors."
APPOINTMENT_UNAVAILABLE_MESSAGE = "An error occurred while retrieving the appointment."


def load_doctor_options(client):
    """
    Fetch the doctors offered in the appointment form.

    Never fails the page: any problem yields an empty list and a warning.
    Returns: (doctors, message)
    """
    try:
        doctors, error = get_all_doctors(client)
    except ApiUnavailableError:
        logger.warning("Doctors could not be retrieved; showing an empty list.")
        return [], DOCTORS_UNAVAILABLE_MESSAGE

    if error:
        return [], error
    return doctors, ""


def appointment_list(request):
    """All appointments known to the API"""
    logger.info("Attempting to get all appointments.")
    client = ApiClient.for_request(request)

    appointments, error = get_all_appointments(client)
    if error:
        return render_error_page(request, error)

    page = AppointmentListPage(title="All appointments", appointments=appointments)
    return render(request, "appointments/appointment_list.html", {"page": page})


def manage_appointment(request):
    """Blank booking form, prefilled with the signed-in patient's id"""
    logger.info("Navigated to ManageAppointment view.")
    client = ApiClient.for_request(request)
    doctors, message = load_doctor_options(client)

    patient_id = get_session(request).patient_id or ""
    if not patient_id:
        logger.warning("PatientId cookie is not set or is empty.")

    form = AppointmentForm(initial={"id": 0, "patient_id": patient_id}, doctors=doctors)
    return _render_manage(request, form, doctors, message, patient_id)


@require_POST
def save_appointment_view(request):
    """
    Insert or update an appointment.

    An id greater than zero updates and then shows the doctor's list;
    anything else inserts and then shows the patient's list.
    """
    form = AppointmentForm(request.POST)
    if not form.is_valid():
        logger.info("Appointment form rejected: %s", form.errors.as_json())
        doctors, _ = load_doctor_options(ApiClient.for_request(request))
        form.set_doctors(doctors)
        return _render_manage(request, form, doctors, "Please correct the errors in the form.")

    appointment = form.to_appointment()
    logger.info("Attempting to save appointment with ID: %s", appointment.id)
    client = ApiClient.for_request(request)

    saved, error = save_appointment(client, appointment)
    if saved:
        messages.success(request, "Saved Successfully")
        if appointment.is_new:
            return redirect("patients:appointments")
        return redirect("doctors:appointments")

    doctors, _ = load_doctor_options(client)
    form.set_doctors(doctors)
    return _render_manage(request, form, doctors, error)


def edit_appointment(request, appointment_id=None):
    """Edit form, loaded from the API when an id is given"""
    client = ApiClient.for_request(request)
    doctors, message = load_doctor_options(client)
    appointment = Appointment()

    if appointment_id is not None:
        logger.info("Attempting to retrieve appointment with ID: %s", appointment_id)
        try:
            fetched, error = get_appointment_by_id(client, appointment_id)
        except ApiUnavailableError:
            fetched, error = None, APPOINTMENT_UNAVAILABLE_MESSAGE
        if fetched is not None:
            appointment = fetched
        else:
            message = error

    form = AppointmentForm.for_appointment(appointment, doctors=doctors)
    page = AppointmentFormPage(form=form, doctors=doctors, message=message)
    return render(request, "appointments/edit_appointment.html", {"page": page})


def _render_manage(request, form, doctors, message="", patient_id=""):
    page = AppointmentFormPage(form=form, doctors=doctors, patient_id=patient_id, message=message)
    return render(request, "appointments/manage_appointment.html", {"page": page})
