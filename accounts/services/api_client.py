"""
Outbound client for the remote appointment API.

A client is built per incoming request and never mutated afterwards: the
bearer token travels with the client instance, and headers are assembled
fresh for every call.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests
from django.conf import settings

from accounts.session import get_session

logger = logging.getLogger(__name__)

# Remote API endpoints, relative to API_BASE_URL.
LOGIN = "login"
GET_PATIENT_BY_USERNAME = "api/GetPatientByUsername/{username}"
GET_ALL_APPOINTMENTS = "api/GetAllAppointments"
GET_ALL_DOCTORS = "api/GetAllDoctors"
GET_APPOINTMENT_BY_ID = "api/GetAppointmentById/{id}"
UPDATE_APPOINTMENT = "api/UpdateAppointmentData"
SAVE_APPOINTMENT = "api/SaveAppointmentData"
GET_DOCTOR_BY_USERNAME = "api/GetDoctorByUsername/{username}"
GET_APPOINTMENTS_BY_DOCTOR_ID = "api/GetAppointmentsByDoctorId/{id}"
GET_APPOINTMENTS_BY_PATIENT_ID = "api/GetAppointmentsByPatientId/{id}"
DOCTOR_REGISTER = "api/DoctorRegister"
PATIENT_REGISTER = "api/PatientRegister"


def path_segment(value) -> str:
    """Escape ``value`` for use as one URL path segment."""
    segment = quote(str(value), safe="")
    # "." and ".." would be collapsed as relative path steps.
    if segment.strip(".") == "":
        segment = segment.replace(".", "%2E")
    return segment


class ApiUnavailableError(Exception):
    """Raised when the remote API cannot be reached at all."""

    def __init__(self, message="The appointment service is unavailable.", path=""):
        self.message = message
        self.path = path
        super().__init__(self.message)


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        """Parsed JSON body, or None when the body is empty or not JSON."""
        if not self.body or not self.body.strip():
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            logger.error("[API] Response body is not valid JSON: %.200r", self.body)
            return None


@dataclass(frozen=True)
class ApiClient:
    base_url: str
    token: Optional[str] = None
    timeout: float = 10.0

    @classmethod
    def for_request(cls, request):
        token = get_session(request).auth_token
        if not token:
            logger.warning("[API] No auth token in cookies; calling API unauthenticated.")
        return cls.from_settings(token=token)

    @classmethod
    def from_settings(cls, token=None):
        return cls(
            base_url=getattr(settings, "API_BASE_URL", "https://localhost:7187/"),
            token=token,
            timeout=getattr(settings, "API_TIMEOUT", 10.0),
        )

    def with_token(self, token):
        return ApiClient(base_url=self.base_url, token=token, timeout=self.timeout)

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get(self, path: str) -> ApiResponse:
        return self._send("GET", path)

    def post(self, path: str, payload) -> ApiResponse:
        return self._send("POST", path, payload)

    def _send(self, method, path, payload=None) -> ApiResponse:
        url = self.url(path)
        logger.info("[API] %s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                headers=self.headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.exception("[API] %s %s failed: %s", method, url, exc)
            raise ApiUnavailableError(path=path) from exc

        result = ApiResponse(
            status_code=response.status_code,
            body=response.text or "",
            reason=response.reason or "",
        )
        if result.ok:
            logger.info("[API] %s %s -> %s", method, url, result.status_code)
        else:
            logger.error(
                "[API] %s %s -> %s %s: %.500s",
                method,
                url,
                result.status_code,
                result.reason,
                result.body,
            )
        return result
