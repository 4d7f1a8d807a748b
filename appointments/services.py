"""
Appointment calls against the remote API.

Every call returns a ``(value, error_message)`` pair:
- on a 2xx response the JSON body is deserialized and ``error_message`` is None
- on any other status, or a body that does not deserialize, ``value`` is None
  and ``error_message`` is a message fit to show the user

Transport failures are not handled here; ``ApiUnavailableError`` propagates
from the client.
"""

import logging

from accounts.serializers import dump_entity, load_entities, load_entity
from accounts.services.api_client import (
    GET_ALL_APPOINTMENTS,
    GET_APPOINTMENT_BY_ID,
    GET_APPOINTMENTS_BY_DOCTOR_ID,
    GET_APPOINTMENTS_BY_PATIENT_ID,
    SAVE_APPOINTMENT,
    UPDATE_APPOINTMENT,
)
from .models import Appointment
from .serializers import AppointmentSerializer

logger = logging.getLogger(__name__)

LIST_FAILED_MESSAGE = "Failed to retrieve appointments."
FETCH_FAILED_MESSAGE = "Failed to retrieve the appointment."
SAVE_FAILED_MESSAGE = "Failed to save the appointment."


def _load_list(response, description):
    if not response.ok:
        logger.error(
            "Failed to retrieve %s. HTTP Status Code: %s", description, response.status_code
        )
        return None, LIST_FAILED_MESSAGE

    appointments = load_entities(AppointmentSerializer, response.json())
    if appointments is None:
        return None, LIST_FAILED_MESSAGE

    logger.info("Successfully retrieved %d %s.", len(appointments), description)
    return appointments, None


def get_all_appointments(client):
    return _load_list(client.get(GET_ALL_APPOINTMENTS), "appointments")


def get_appointments_by_doctor_id(client, doctor_id):
    response = client.get(GET_APPOINTMENTS_BY_DOCTOR_ID.format(id=doctor_id))
    return _load_list(response, f"appointments for doctor {doctor_id}")


def get_appointments_by_patient_id(client, patient_id):
    response = client.get(GET_APPOINTMENTS_BY_PATIENT_ID.format(id=patient_id))
    return _load_list(response, f"appointments for patient {patient_id}")


def get_appointment_by_id(client, appointment_id):
    response = client.get(GET_APPOINTMENT_BY_ID.format(id=appointment_id))
    if not response.ok:
        logger.error(
            "Failed to retrieve appointment with ID: %s. HTTP Status Code: %s",
            appointment_id,
            response.status_code,
        )
        return None, FETCH_FAILED_MESSAGE

    appointment = load_entity(AppointmentSerializer, response.json())
    if appointment is None:
        return None, FETCH_FAILED_MESSAGE
    return appointment, None


def save_appointment(client, appointment: Appointment):
    """
    Insert or update ``appointment``.

    An id greater than zero means the API already holds the appointment and
    it is updated; anything else is inserted.

    Returns:
        (True, None) on success, (False, message) otherwise.
    """
    payload = dump_entity(AppointmentSerializer, appointment)

    if appointment.is_new:
        response = client.post(SAVE_APPOINTMENT, payload)
        action = "create new appointment"
    else:
        response = client.post(UPDATE_APPOINTMENT, payload)
        action = f"update appointment with ID: {appointment.id}"

    if not response.ok:
        logger.error("Failed to %s. HTTP Status Code: %s", action, response.status_code)
        return False, SAVE_FAILED_MESSAGE

    logger.info("Succeeded to %s.", action)
    return True, None
