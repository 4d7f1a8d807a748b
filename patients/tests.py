from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from accounts.services.api_client import ApiClient
from accounts.session import AUTH_TOKEN_COOKIE, USERNAME_COOKIE
from accounts.testing import REQUESTS_TARGET, FakeApi, api_response, make_token
from patients.forms import PatientRegistrationForm
from patients.services import get_patient_by_username

REGISTRATION_DATA = {
    "name": "Alice Smith",
    "username": "alice",
    "password": "secret123",
    "confirm_password": "secret123",
    "gender": "Female",
    "date_of_birth": "1990-04-12",
}


class PatientRegistrationFormTests(SimpleTestCase):
    def test_valid_form(self):
        form = PatientRegistrationForm(data=REGISTRATION_DATA)
        self.assertTrue(form.is_valid(), form.errors)

    def test_passwords_must_match(self):
        form = PatientRegistrationForm(data={**REGISTRATION_DATA, "confirm_password": "secret124"})
        self.assertFalse(form.is_valid())
        self.assertIn("confirm_password", form.errors)

    def test_invalid_date_of_birth(self):
        form = PatientRegistrationForm(data={**REGISTRATION_DATA, "date_of_birth": "12/40/1990"})
        self.assertFalse(form.is_valid())
        self.assertIn("Invalid date format.", form.errors["date_of_birth"])


@override_settings(API_BASE_URL="https://localhost:7187/")
class PatientServiceTests(SimpleTestCase):
    def setUp(self):
        self.client_api = ApiClient.from_settings(token="tok")

    def test_record_with_null_text_fields_is_loaded(self):
        fake = FakeApi(
            {
                ("GET", "api/GetPatientByUsername/alice"): api_response(
                    200, {"patientID": 7, "patientName": None, "username": None, "dateOfBirth": None}
                )
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            patient, error = get_patient_by_username(self.client_api, "alice")

        self.assertIsNone(error)
        self.assertEqual(patient.id, 7)
        self.assertIsNone(patient.name)

    def test_dot_username_stays_in_the_path(self):
        fake = FakeApi({("GET", "api/GetPatientByUsername/%2E"): api_response(404)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            patient, error = get_patient_by_username(self.client_api, ".")

        self.assertIsNone(patient)
        self.assertEqual(error, "Failed to retrieve patient data.")


@override_settings(API_BASE_URL="https://localhost:7187/")
class PatientRegisterViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("patients:register")

    def test_successful_registration(self):
        fake = FakeApi({("POST", "api/PatientRegister"): api_response(200)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, REGISTRATION_DATA)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Registration successful!")
        body = fake.call_to("POST", "api/PatientRegister")["json"]
        self.assertEqual(body["patientName"], "Alice Smith")
        self.assertEqual(body["dateOfBirth"], "1990-04-12")

    def test_rejected_registration(self):
        fake = FakeApi({("POST", "api/PatientRegister"): api_response(400)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, REGISTRATION_DATA)

        self.assertContains(response, "Registration failed.")

    def test_mismatched_passwords_make_no_api_call(self):
        fake = FakeApi()
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {**REGISTRATION_DATA, "confirm_password": "x"})

        self.assertContains(response, "Passwords do not match.")
        self.assertEqual(fake.calls, [])


@override_settings(API_BASE_URL="https://localhost:7187/", API_JWT_SIGNING_KEY="")
class PatientAppointmentsViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("patients:appointments")
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        self.client.cookies[USERNAME_COOKIE] = "alice"

    def test_lists_own_appointments(self):
        fake = FakeApi(
            {
                ("GET", "api/GetPatientByUsername/alice"): api_response(200, {"patientID": 7}),
                ("GET", "api/GetAppointmentsByPatientId/7"): api_response(
                    200, [{"appointmentID": 5, "patientID": 7, "purposeDescription": "Follow-up"}]
                ),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateUsed(response, "patients/appointments.html")
        self.assertContains(response, "Follow-up")

    def test_no_appointments_state(self):
        fake = FakeApi(
            {
                ("GET", "api/GetPatientByUsername/alice"): api_response(200, {"patientID": 7}),
                ("GET", "api/GetAppointmentsByPatientId/7"): api_response(200, None),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateNotUsed(response, "accounts/error.html")
        self.assertContains(response, "No appointments found.")

    def test_unknown_patient_renders_error_screen(self):
        fake = FakeApi({("GET", "api/GetPatientByUsername/alice"): api_response(404)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateUsed(response, "accounts/error.html")
        self.assertContains(response, "Failed to retrieve patient data.")

    def test_username_is_escaped_in_api_path(self):
        self.client.cookies[USERNAME_COOKIE] = "a b"
        fake = FakeApi({("GET", "api/GetPatientByUsername/a%20b"): api_response(404)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            self.client.get(self.url)

        self.assertEqual(fake.paths, [("GET", "api/GetPatientByUsername/a%20b")])

    def test_without_session_redirects_to_login(self):
        self.client.cookies.clear()
        response = self.client.get(self.url)
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)


class PatientDashboardTests(SimpleTestCase):
    def test_requires_session(self):
        response = self.client.get(reverse("patients:dashboard"))
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)
