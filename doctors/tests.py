from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from accounts.services.api_client import ApiClient
from accounts.session import AUTH_TOKEN_COOKIE, USERNAME_COOKIE
from accounts.testing import REQUESTS_TARGET, FakeApi, api_response, make_token
from doctors.forms import DoctorRegistrationForm
from doctors.services import get_all_doctors, get_doctor_by_username

REGISTRATION_DATA = {
    "name": "Dr. Ahmad",
    "username": "ahmad",
    "password": "secret123",
    "confirm_password": "secret123",
    "gender": "Male",
    "specialization": "Cardiology",
    "years_of_experience": "12",
}


class DoctorRegistrationFormTests(SimpleTestCase):
    def test_valid_form_builds_doctor(self):
        form = DoctorRegistrationForm(data=REGISTRATION_DATA)
        self.assertTrue(form.is_valid(), form.errors)

        doctor = form.to_doctor()
        self.assertEqual(doctor.specialization, "Cardiology")
        self.assertEqual(doctor.years_of_experience, 12)

    def test_passwords_must_match(self):
        form = DoctorRegistrationForm(data={**REGISTRATION_DATA, "confirm_password": "other123"})
        self.assertFalse(form.is_valid())
        self.assertIn("Passwords do not match.", form.errors["confirm_password"])

    def test_field_limits(self):
        cases = {
            "password": "abc",
            "years_of_experience": "101",
            "gender": "x" * 11,
            "name": "x" * 101,
        }
        for field, value in cases.items():
            with self.subTest(field=field):
                form = DoctorRegistrationForm(data={**REGISTRATION_DATA, field: value})
                self.assertFalse(form.is_valid())
                self.assertIn(field, form.errors)


@override_settings(API_BASE_URL="https://localhost:7187/")
class DoctorServiceTests(SimpleTestCase):
    def setUp(self):
        self.client_api = ApiClient.from_settings(token="tok")

    def test_null_text_fields_do_not_drop_the_list(self):
        fake = FakeApi(
            {
                ("GET", "api/GetAllDoctors"): api_response(
                    200,
                    [
                        {"doctorID": 3, "doctorName": "Dr. Ahmad", "doctorSpecialization": "Cardiology"},
                        {"doctorID": 4, "doctorName": None, "username": None, "gender": None},
                    ],
                )
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            doctors, error = get_all_doctors(self.client_api)

        self.assertIsNone(error)
        self.assertEqual([doctor.id for doctor in doctors], [3, 4])
        self.assertIsNone(doctors[1].name)

    def test_dot_username_stays_in_the_path(self):
        fake = FakeApi({("GET", "api/GetDoctorByUsername/%2E%2E"): api_response(404)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            doctor, error = get_doctor_by_username(self.client_api, "..")

        self.assertIsNone(doctor)
        self.assertEqual(error, "Failed to retrieve doctor data.")
        self.assertEqual(fake.paths, [("GET", "api/GetDoctorByUsername/%2E%2E")])


@override_settings(API_BASE_URL="https://localhost:7187/")
class DoctorRegisterViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("doctors:register")

    def test_get_shows_form(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "doctors/register.html")

    def test_successful_registration(self):
        fake = FakeApi({("POST", "api/DoctorRegister"): api_response(200)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, REGISTRATION_DATA)

        self.assertContains(response, "Registration successful!")
        body = fake.call_to("POST", "api/DoctorRegister")["json"]
        self.assertEqual(body["doctorName"], "Dr. Ahmad")
        self.assertEqual(body["doctorSpecialization"], "Cardiology")
        self.assertEqual(body["doctorYearsOfExperience"], 12)
        self.assertEqual(body["confirmPassword"], "secret123")

    def test_rejected_registration(self):
        fake = FakeApi({("POST", "api/DoctorRegister"): api_response(409)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, REGISTRATION_DATA)

        self.assertContains(response, "Registration failed.")

    def test_invalid_form_makes_no_api_call(self):
        fake = FakeApi()
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {**REGISTRATION_DATA, "confirm_password": "nope123"})

        self.assertContains(response, "Please correct the errors in the form.")
        self.assertEqual(fake.calls, [])


@override_settings(API_BASE_URL="https://localhost:7187/", API_JWT_SIGNING_KEY="")
class DoctorAppointmentsViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("doctors:appointments")
        self.token = make_token("Doctor")
        self.client.cookies[AUTH_TOKEN_COOKIE] = self.token
        self.client.cookies[USERNAME_COOKIE] = "ahmad"

    def test_lists_own_appointments(self):
        fake = FakeApi(
            {
                ("GET", "api/GetDoctorByUsername/ahmad"): api_response(200, {"doctorID": 3, "username": "ahmad"}),
                ("GET", "api/GetAppointmentsByDoctorId/3"): api_response(
                    200, [{"appointmentID": 5, "doctorID": 3, "appointmentStatus": "Scheduled"}]
                ),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "doctors/appointments.html")
        self.assertEqual(len(response.context["page"].appointments), 1)
        for call in fake.calls:
            self.assertEqual(call["headers"]["Authorization"], f"Bearer {self.token}")

    def test_no_appointments_state(self):
        fake = FakeApi(
            {
                ("GET", "api/GetDoctorByUsername/ahmad"): api_response(200, {"doctorID": 3}),
                ("GET", "api/GetAppointmentsByDoctorId/3"): api_response(200, []),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertContains(response, "No appointments found.")

    def test_unknown_doctor_renders_error_screen(self):
        fake = FakeApi({("GET", "api/GetDoctorByUsername/ahmad"): api_response(404)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateUsed(response, "accounts/error.html")
        self.assertContains(response, "Failed to retrieve doctor data.")

    def test_appointment_failure_renders_error_screen(self):
        fake = FakeApi(
            {
                ("GET", "api/GetDoctorByUsername/ahmad"): api_response(200, {"doctorID": 3}),
                ("GET", "api/GetAppointmentsByDoctorId/3"): api_response(500),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateUsed(response, "accounts/error.html")

    def test_missing_username_redirects_to_login(self):
        del self.client.cookies[USERNAME_COOKIE]
        response = self.client.get(self.url)
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)


class DoctorDashboardTests(SimpleTestCase):
    def test_requires_session(self):
        response = self.client.get(reverse("doctors:dashboard"))
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)

    def test_shows_dashboard(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Doctor")
        response = self.client.get(reverse("doctors:dashboard"))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "doctors/dashboard.html")
