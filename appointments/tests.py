"""
Tests for the appointment flows.

Covers:
- Appointment calls (list, fetch, insert/update dispatch, wire format)
- All-appointments screen (empty state, API failure, unreachable API)
- Manage / edit / save screens
"""

from datetime import date, time
from unittest.mock import patch

import requests
from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from accounts.services.api_client import ApiClient
from accounts.session import AUTH_TOKEN_COOKIE, PATIENT_ID_COOKIE
from accounts.testing import REQUESTS_TARGET, FakeApi, api_response, make_token
from appointments.models import Appointment
from appointments.services import (
    get_all_appointments,
    get_appointment_by_id,
    save_appointment,
)

APPOINTMENT_JSON = {
    "appointmentID": 5,
    "patientID": 7,
    "doctorID": 3,
    "appointmentDate": "2026-11-02T00:00:00",
    "appointmentTime": "09:30:00",
    "appointmentStatus": "Scheduled",
    "purposeDescription": "Annual checkup",
}

DOCTORS_JSON = [
    {"doctorID": 3, "doctorName": "Dr. Ahmad", "doctorSpecialization": "Cardiology"},
    {"doctorID": 4, "doctorName": "Dr. Sara", "doctorSpecialization": "Dermatology"},
]

FORM_DATA = {
    "patient_id": "7",
    "doctor_id": "3",
    "date": "2026-11-02",
    "time": "09:30",
    "status": "Scheduled",
    "purpose_description": "Annual checkup",
}


@override_settings(API_BASE_URL="https://localhost:7187/")
class AppointmentServiceTests(SimpleTestCase):
    def setUp(self):
        self.client_api = ApiClient.from_settings(token="tok")

    def call(self, routes, func, *args):
        fake = FakeApi(routes)
        with patch(REQUESTS_TARGET, side_effect=fake):
            result = func(self.client_api, *args)
        return result, fake

    def test_list_deserializes_appointments(self):
        (appointments, error), _ = self.call(
            {("GET", "api/GetAllAppointments"): api_response(200, [APPOINTMENT_JSON])},
            get_all_appointments,
        )

        self.assertIsNone(error)
        self.assertEqual(len(appointments), 1)
        appointment = appointments[0]
        self.assertEqual(appointment.id, 5)
        self.assertEqual(appointment.patient_id, 7)
        self.assertEqual(appointment.doctor_id, 3)
        self.assertEqual(appointment.date, date(2026, 11, 2))
        self.assertEqual(appointment.time, time(9, 30))
        self.assertEqual(appointment.status, "Scheduled")

    def test_keys_are_matched_case_insensitively(self):
        payload = {"AppointmentId": 9, "PatientId": 1, "DoctorId": 2, "AppointmentStatus": "Done"}
        (appointments, error), _ = self.call(
            {("GET", "api/GetAllAppointments"): api_response(200, [payload])},
            get_all_appointments,
        )

        self.assertIsNone(error)
        self.assertEqual(appointments[0].id, 9)
        self.assertEqual(appointments[0].doctor_id, 2)

    def test_empty_and_null_lists_are_zero_items(self):
        for body in ([], None):
            with self.subTest(body=body):
                (appointments, error), _ = self.call(
                    {("GET", "api/GetAllAppointments"): api_response(200, body)},
                    get_all_appointments,
                )
                self.assertEqual(appointments, [])
                self.assertIsNone(error)

    def test_non_2xx_returns_message(self):
        (appointments, error), _ = self.call(
            {("GET", "api/GetAllAppointments"): api_response(500)},
            get_all_appointments,
        )

        self.assertIsNone(appointments)
        self.assertEqual(error, "Failed to retrieve appointments.")

    def test_unexpected_body_returns_message(self):
        (appointments, error), _ = self.call(
            {("GET", "api/GetAllAppointments"): api_response(200, {"not": "a list"})},
            get_all_appointments,
        )

        self.assertIsNone(appointments)
        self.assertIsNotNone(error)

    def test_fetch_by_id(self):
        (appointment, error), fake = self.call(
            {("GET", "api/GetAppointmentById/5"): api_response(200, APPOINTMENT_JSON)},
            get_appointment_by_id,
            5,
        )

        self.assertIsNone(error)
        self.assertEqual(appointment.purpose_description, "Annual checkup")
        self.assertEqual(fake.calls[0]["headers"]["Authorization"], "Bearer tok")

    def test_new_appointment_is_inserted(self):
        appointment = Appointment(
            id=0, patient_id=7, doctor_id=3, date=date(2026, 11, 2), time=time(9, 30), status="Scheduled"
        )
        (saved, error), fake = self.call(
            {("POST", "api/SaveAppointmentData"): api_response(200)},
            save_appointment,
            appointment,
        )

        self.assertTrue(saved)
        self.assertIsNone(error)
        body = fake.call_to("POST", "api/SaveAppointmentData")["json"]
        self.assertEqual(body["appointmentID"], 0)
        self.assertEqual(body["patientID"], 7)
        self.assertEqual(body["doctorID"], 3)
        self.assertEqual(body["appointmentDate"], "2026-11-02")
        self.assertEqual(body["appointmentTime"], "09:30:00")

    def test_existing_appointment_is_updated(self):
        appointment = Appointment(id=5, patient_id=7, doctor_id=3, status="Completed")
        (saved, _), fake = self.call(
            {("POST", "api/UpdateAppointmentData"): api_response(200)},
            save_appointment,
            appointment,
        )

        self.assertTrue(saved)
        self.assertEqual(fake.paths, [("POST", "api/UpdateAppointmentData")])

    def test_save_failure_returns_message(self):
        (saved, error), _ = self.call(
            {("POST", "api/SaveAppointmentData"): api_response(400)},
            save_appointment,
            Appointment(patient_id=7, doctor_id=3),
        )

        self.assertFalse(saved)
        self.assertEqual(error, "Failed to save the appointment.")


@override_settings(API_BASE_URL="https://localhost:7187/", API_JWT_SIGNING_KEY="")
class AppointmentListViewTests(SimpleTestCase):
    def setUp(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Doctor")
        self.url = reverse("appointments:list")

    def test_lists_appointments(self):
        fake = FakeApi({("GET", "api/GetAllAppointments"): api_response(200, [APPOINTMENT_JSON])})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/appointment_list.html")
        self.assertContains(response, "Annual checkup")
        self.assertEqual(len(response.context["page"].appointments), 1)

    def test_empty_list_shows_no_appointments_state(self):
        fake = FakeApi({("GET", "api/GetAllAppointments"): api_response(200, [])})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/appointment_list.html")
        self.assertTemplateNotUsed(response, "accounts/error.html")
        self.assertContains(response, "No appointments found.")

    def test_non_2xx_renders_error_screen(self):
        fake = FakeApi({("GET", "api/GetAllAppointments"): api_response(500)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertTemplateUsed(response, "accounts/error.html")
        self.assertContains(response, "Failed to retrieve appointments.")

    def test_unreachable_api_renders_error_screen(self):
        fake = FakeApi({("GET", "api/GetAllAppointments"): requests.Timeout("slow")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, 503)
        self.assertTemplateUsed(response, "accounts/error.html")

    def test_request_without_session_proceeds_unauthenticated(self):
        del self.client.cookies[AUTH_TOKEN_COOKIE]
        fake = FakeApi({("GET", "api/GetAllAppointments"): api_response(401)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(self.url)

        self.assertNotIn("Authorization", fake.calls[0]["headers"])
        self.assertTemplateUsed(response, "accounts/error.html")


@override_settings(API_BASE_URL="https://localhost:7187/", API_JWT_SIGNING_KEY="")
class ManageAppointmentViewTests(SimpleTestCase):
    def setUp(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        self.client.cookies[PATIENT_ID_COOKIE] = "7"

    def test_form_offers_doctors_and_prefills_patient(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(200, DOCTORS_JSON)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:manage"))

        self.assertEqual(response.status_code, 200)
        page = response.context["page"]
        self.assertEqual(len(page.doctors), 2)
        self.assertEqual(page.patient_id, "7")
        self.assertEqual(page.form.initial["patient_id"], "7")
        self.assertContains(response, "Cardiology")

    def test_doctor_fetch_failure_degrades_to_empty_list(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(500)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:manage"))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/manage_appointment.html")
        self.assertEqual(response.context["page"].doctors, [])
        self.assertContains(response, "Failed to retrieve doctors.")

    def test_unreachable_doctor_list_degrades_to_empty_list(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): requests.ConnectionError("refused")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:manage"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "An error occurred while retrieving doctors.")

    def test_edit_by_id_loads_appointment(self):
        fake = FakeApi(
            {
                ("GET", "api/GetAllDoctors"): api_response(200, DOCTORS_JSON),
                ("GET", "api/GetAppointmentById/5"): api_response(200, APPOINTMENT_JSON),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:edit_by_id", args=[5]))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/edit_appointment.html")
        self.assertEqual(response.context["page"].form.initial["id"], 5)
        self.assertContains(response, "Annual checkup")

    def test_edit_by_id_failure_degrades_to_blank_form(self):
        fake = FakeApi(
            {
                ("GET", "api/GetAllDoctors"): api_response(200, DOCTORS_JSON),
                ("GET", "api/GetAppointmentById/99"): api_response(404),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:edit_by_id", args=[99]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["page"].form.initial["id"], 0)
        self.assertContains(response, "Failed to retrieve the appointment.")

    def test_blank_edit_form(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(200, [])})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.get(reverse("appointments:edit"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(fake.paths, [("GET", "api/GetAllDoctors")])


@override_settings(API_BASE_URL="https://localhost:7187/", API_JWT_SIGNING_KEY="")
class SaveAppointmentViewTests(SimpleTestCase):
    def setUp(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        self.url = reverse("appointments:save")

    def test_new_appointment_inserts_and_shows_patient_list(self):
        fake = FakeApi({("POST", "api/SaveAppointmentData"): api_response(200)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {**FORM_DATA, "id": "0"})

        self.assertRedirects(response, reverse("patients:appointments"), fetch_redirect_response=False)
        self.assertEqual(fake.paths, [("POST", "api/SaveAppointmentData")])

    def test_missing_id_counts_as_new(self):
        fake = FakeApi({("POST", "api/SaveAppointmentData"): api_response(201)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, FORM_DATA)

        self.assertRedirects(response, reverse("patients:appointments"), fetch_redirect_response=False)

    def test_existing_appointment_updates_and_shows_doctor_list(self):
        fake = FakeApi({("POST", "api/UpdateAppointmentData"): api_response(200)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {**FORM_DATA, "id": "5"})

        self.assertRedirects(response, reverse("doctors:appointments"), fetch_redirect_response=False)
        body = fake.call_to("POST", "api/UpdateAppointmentData")["json"]
        self.assertEqual(body["appointmentID"], 5)
        self.assertEqual(body["appointmentStatus"], "Scheduled")

    def test_invalid_form_makes_no_save_call(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(200, DOCTORS_JSON)})
        data = {**FORM_DATA, "status": "x" * 21}
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, data)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/manage_appointment.html")
        self.assertEqual(fake.paths, [("GET", "api/GetAllDoctors")])
        self.assertContains(response, "Appointment status cannot be longer than 20 characters.")

    def test_rejected_save_redisplays_form(self):
        fake = FakeApi(
            {
                ("POST", "api/SaveAppointmentData"): api_response(400),
                ("GET", "api/GetAllDoctors"): api_response(200, DOCTORS_JSON),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, FORM_DATA)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "appointments/manage_appointment.html")
        self.assertContains(response, "Failed to save the appointment.")

    def test_unreachable_api_renders_error_screen(self):
        fake = FakeApi({("POST", "api/UpdateAppointmentData"): requests.ConnectionError("down")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {**FORM_DATA, "id": "5"})

        self.assertEqual(response.status_code, 503)
        self.assertTemplateUsed(response, "accounts/error.html")

    def test_get_is_not_allowed(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 405)
