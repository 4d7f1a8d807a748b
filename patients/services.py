import logging

from accounts.serializers import dump_entity, load_entity
from accounts.services.api_client import GET_PATIENT_BY_USERNAME, PATIENT_REGISTER, path_segment
from .serializers import PatientSerializer

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to retrieve patient data."
REGISTER_FAILED_MESSAGE = "Registration failed."


def get_patient_by_username(client, username: str):
    """Returns (Patient, None) or (None, message)."""
    response = client.get(GET_PATIENT_BY_USERNAME.format(username=path_segment(username)))
    if not response.ok:
        logger.error(
            "Failed to retrieve patient data for %s. Status Code: %s, Reason: %s",
            username,
            response.status_code,
            response.reason,
        )
        return None, FETCH_FAILED_MESSAGE

    patient = load_entity(PatientSerializer, response.json())
    if patient is None:
        logger.warning("Patient data is null for username: %s", username)
        return None, FETCH_FAILED_MESSAGE
    return patient, None


def register_patient(client, patient):
    response = client.post(PATIENT_REGISTER, dump_entity(PatientSerializer, patient))
    if not response.ok:
        logger.error("Registration failed. Status code: %s", response.status_code)
        return False, REGISTER_FAILED_MESSAGE

    logger.info("Registration successful for patient: %s", patient.username)
    return True, None
