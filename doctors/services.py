"""
Doctor calls against the remote API.

Same contract as ``appointments.services``: each call returns
``(value, error_message)`` and lets ``ApiUnavailableError`` propagate.
"""

import logging

from accounts.serializers import dump_entity, load_entities, load_entity
from accounts.services.api_client import (
    DOCTOR_REGISTER,
    GET_ALL_DOCTORS,
    GET_DOCTOR_BY_USERNAME,
    path_segment,
)
from .serializers import DoctorSerializer

logger = logging.getLogger(__name__)

LIST_FAILED_MESSAGE = "Failed to retrieve doctors."
FETCH_FAILED_MESSAGE = "Failed to retrieve doctor data."
REGISTER_FAILED_MESSAGE = "Registration failed."


def get_all_doctors(client):
    response = client.get(GET_ALL_DOCTORS)
    if not response.ok:
        logger.error(
            "Failed to retrieve doctors. HTTP Status Code: %s, Reason: %s",
            response.status_code,
            response.reason,
        )
        return None, LIST_FAILED_MESSAGE

    doctors = load_entities(DoctorSerializer, response.json())
    if doctors is None:
        return None, LIST_FAILED_MESSAGE

    logger.info("Deserialized list of doctors. Count: %d", len(doctors))
    return doctors, None


def get_doctor_by_username(client, username: str):
    response = client.get(GET_DOCTOR_BY_USERNAME.format(username=path_segment(username)))
    if not response.ok:
        logger.error(
            "Failed to retrieve doctor data for %s. Status code: %s",
            username,
            response.status_code,
        )
        return None, FETCH_FAILED_MESSAGE

    doctor = load_entity(DoctorSerializer, response.json())
    if doctor is None:
        logger.warning("No doctor data found for username: %s", username)
        return None, FETCH_FAILED_MESSAGE
    return doctor, None


def register_doctor(client, doctor):
    """Returns (True, None) when the API accepted the registration."""
    response = client.post(DOCTOR_REGISTER, dump_entity(DoctorSerializer, doctor))
    if not response.ok:
        logger.error(
            "Doctor registration failed for %s. Status code: %s",
            doctor.username,
            response.status_code,
        )
        return False, REGISTER_FAILED_MESSAGE

    logger.info("Doctor registration successful for %s.", doctor.username)
    return True, None
