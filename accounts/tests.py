from unittest.mock import patch

import requests
from django.apps import apps
from django.db import connections
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, override_settings
from django.urls import reverse

from accounts.routing import route_for_role
from accounts.services.api_client import (
    ApiClient,
    ApiResponse,
    ApiUnavailableError,
    path_segment,
)
from accounts.session import (
    AUTH_TOKEN_COOKIE,
    PATIENT_ID_COOKIE,
    USERNAME_COOKIE,
    clear_session,
    get_session,
    set_session,
)
from accounts.testing import (
    REQUESTS_TARGET,
    TEST_SIGNING_KEY,
    FakeApi,
    api_response,
    make_token,
)
from accounts.tokens import decode_role, read_claims


class RoleRouterTests(SimpleTestCase):
    def test_doctor_goes_to_doctor_dashboard(self):
        self.assertEqual(route_for_role("Doctor"), "doctors:dashboard")

    def test_patient_goes_to_patient_dashboard(self):
        self.assertEqual(route_for_role("Patient"), "patients:dashboard")

    def test_anything_else_goes_to_login(self):
        for role in ["", "Nurse", None, "doctor", "PATIENT", " Doctor"]:
            with self.subTest(role=role):
                self.assertEqual(route_for_role(role), "accounts:login")


@override_settings(API_JWT_SIGNING_KEY="")
class TokenClaimsTests(SimpleTestCase):
    def test_reads_role_claim(self):
        self.assertEqual(decode_role(make_token("Doctor")), "Doctor")
        self.assertEqual(decode_role(make_token("Patient")), "Patient")

    def test_malformed_tokens_do_not_raise(self):
        for token in ["not-a-token", "a.b.c", "", None, 12345]:
            with self.subTest(token=token):
                self.assertIsNone(decode_role(token))

    def test_missing_role_claim(self):
        self.assertIsNone(decode_role(make_token(role=None)))

    def test_non_string_role_claim_is_ignored(self):
        self.assertIsNone(decode_role(make_token(role=["Doctor", "Patient"])))

    def test_unverified_read_ignores_signing_key(self):
        token = make_token("Doctor", key="some-other-key-that-nobody-shares-0000")
        self.assertEqual(decode_role(token), "Doctor")

    def test_read_claims_returns_whole_payload(self):
        claims = read_claims(make_token("Patient", unique_name="alice"))
        self.assertEqual(claims["unique_name"], "alice")
        self.assertEqual(claims["role"], "Patient")

    @override_settings(API_JWT_SIGNING_KEY=TEST_SIGNING_KEY, API_JWT_ALGORITHMS=["HS256"])
    def test_verified_read_accepts_correctly_signed_token(self):
        self.assertEqual(decode_role(make_token("Doctor")), "Doctor")

    @override_settings(API_JWT_SIGNING_KEY=TEST_SIGNING_KEY, API_JWT_ALGORITHMS=["HS256"])
    def test_verified_read_rejects_forged_token(self):
        forged = make_token("Doctor", key="some-other-key-that-nobody-shares-0000")
        self.assertIsNone(decode_role(forged))


class SessionStoreTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_set_session_writes_cookies_with_shared_flags(self):
        response = set_session(HttpResponse(), "tok", "alice", 7)

        for name in (AUTH_TOKEN_COOKIE, USERNAME_COOKIE, PATIENT_ID_COOKIE):
            with self.subTest(cookie=name):
                cookie = response.cookies[name]
                self.assertEqual(cookie["max-age"], 30 * 60)
                self.assertTrue(cookie["httponly"])
                self.assertTrue(cookie["secure"])
                self.assertEqual(cookie["samesite"], "Strict")

        self.assertEqual(response.cookies[AUTH_TOKEN_COOKIE].value, "tok")
        self.assertEqual(response.cookies[USERNAME_COOKIE].value, "alice")
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE].value, "7")

    def test_set_session_without_patient_id(self):
        response = set_session(HttpResponse(), "tok", "dr-who")
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE].value, "")
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE]["max-age"], 0)

    @override_settings(AUTH_COOKIE_MAX_AGE=60, AUTH_COOKIE_SECURE=False)
    def test_cookie_settings_are_configurable(self):
        response = set_session(HttpResponse(), "tok", "alice")
        self.assertEqual(response.cookies[AUTH_TOKEN_COOKIE]["max-age"], 60)
        self.assertFalse(response.cookies[AUTH_TOKEN_COOKIE]["secure"])

    def test_get_session_reads_present_cookies(self):
        request = self.factory.get("/")
        request.COOKIES = {AUTH_TOKEN_COOKIE: "tok", USERNAME_COOKIE: "alice"}

        session = get_session(request)

        self.assertTrue(session.is_authenticated)
        self.assertEqual(session.username, "alice")
        self.assertIsNone(session.patient_id)

    def test_missing_token_means_unauthenticated(self):
        request = self.factory.get("/")
        request.COOKIES = {USERNAME_COOKIE: "alice", AUTH_TOKEN_COOKIE: ""}
        self.assertFalse(get_session(request).is_authenticated)

    def test_clear_session_expires_every_cookie(self):
        response = clear_session(HttpResponse())
        for name in (AUTH_TOKEN_COOKIE, USERNAME_COOKIE, PATIENT_ID_COOKIE):
            with self.subTest(cookie=name):
                self.assertEqual(response.cookies[name].value, "")
                self.assertEqual(response.cookies[name]["max-age"], 0)


@override_settings(API_BASE_URL="https://api.example.test/", API_TIMEOUT=5)
class ApiClientTests(SimpleTestCase):
    def test_attaches_bearer_token(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(200, [])})
        with patch(REQUESTS_TARGET, side_effect=fake) as mock_request:
            ApiClient.from_settings(token="tok").get("api/GetAllDoctors")

        self.assertEqual(fake.calls[0]["headers"]["Authorization"], "Bearer tok")
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 5)

    def test_no_token_calls_unauthenticated(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): api_response(200, [])})
        with patch(REQUESTS_TARGET, side_effect=fake):
            ApiClient.from_settings().get("api/GetAllDoctors")

        self.assertNotIn("Authorization", fake.calls[0]["headers"])

    def test_clients_do_not_share_headers(self):
        first = ApiClient.from_settings(token="first")
        second = first.with_token("second")

        self.assertEqual(first.headers()["Authorization"], "Bearer first")
        self.assertEqual(second.headers()["Authorization"], "Bearer second")

    def test_for_request_takes_token_from_cookie(self):
        request = RequestFactory().get("/")
        request.COOKIES = {AUTH_TOKEN_COOKIE: "cookie-token"}
        self.assertEqual(ApiClient.for_request(request).token, "cookie-token")

    def test_url_joins_base_and_path(self):
        client = ApiClient(base_url="https://api.example.test/v1")
        self.assertEqual(client.url("api/GetAllDoctors"), "https://api.example.test/v1/api/GetAllDoctors")

    def test_url_keeps_escaped_dot_segments(self):
        client = ApiClient(base_url="https://api.example.test/")
        path = "api/GetPatientByUsername/" + path_segment("..")
        self.assertEqual(path, "api/GetPatientByUsername/%2E%2E")
        self.assertEqual(client.url(path), "https://api.example.test/api/GetPatientByUsername/%2E%2E")
        self.assertEqual(path_segment("a.b"), "a.b")

    def test_transport_failure_raises_api_unavailable(self):
        fake = FakeApi({("GET", "api/GetAllDoctors"): requests.ConnectionError("refused")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            with self.assertRaises(ApiUnavailableError):
                ApiClient.from_settings().get("api/GetAllDoctors")

    def test_non_2xx_is_returned_not_raised(self):
        fake = FakeApi({("POST", "login"): api_response(401, text="nope", reason="Unauthorized")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = ApiClient.from_settings().post("login", {"username": "x"})

        self.assertFalse(response.ok)
        self.assertEqual(response.status_code, 401)
        self.assertIsNone(response.json())

    def test_response_json(self):
        self.assertEqual(ApiResponse(200, '{"a": 1}').json(), {"a": 1})
        self.assertIsNone(ApiResponse(204, "").json())


@override_settings(API_JWT_SIGNING_KEY="")
class HomeViewTests(SimpleTestCase):
    def test_anonymous_sees_landing_page(self):
        response = self.client.get(reverse("accounts:home"))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/home.html")

    def test_signed_in_doctor_is_routed_to_dashboard(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Doctor")
        response = self.client.get(reverse("accounts:home"))
        self.assertRedirects(response, reverse("doctors:dashboard"), fetch_redirect_response=False)

    def test_unreadable_token_is_routed_to_login(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = "garbage"
        response = self.client.get(reverse("accounts:home"))
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)

    def test_privacy_page(self):
        response = self.client.get(reverse("accounts:privacy"))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/privacy.html")


@override_settings(API_JWT_SIGNING_KEY="", API_BASE_URL="https://localhost:7187/")
class LoginViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("accounts:login")

    def test_get_shows_form(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/login.html")

    def test_existing_patient_session_skips_form(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        self.client.cookies[USERNAME_COOKIE] = "alice"

        response = self.client.get(self.url)

        self.assertRedirects(response, reverse("patients:dashboard"), fetch_redirect_response=False)

    def test_existing_doctor_session_skips_form(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Doctor")
        self.client.cookies[USERNAME_COOKIE] = "drwho"

        response = self.client.get(self.url)

        self.assertRedirects(response, reverse("doctors:dashboard"), fetch_redirect_response=False)

    def test_token_without_username_shows_form(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/login.html")

    def test_session_without_usable_role_is_cleared(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Nurse")
        self.client.cookies[USERNAME_COOKIE] = "nina"

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/login.html")
        self.assertEqual(response.cookies[AUTH_TOKEN_COOKIE]["max-age"], 0)
        self.assertEqual(response.cookies[USERNAME_COOKIE]["max-age"], 0)

    def test_patient_login_stores_session_and_patient_id(self):
        token = make_token("Patient")
        fake = FakeApi(
            {
                ("POST", "login"): api_response(200, {"token": token}),
                ("GET", "api/GetPatientByUsername/alice"): api_response(
                    200, {"patientID": 7, "patientName": "Alice", "username": "alice"}
                ),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "secret1"})

        self.assertRedirects(response, reverse("patients:dashboard"), fetch_redirect_response=False)
        self.assertEqual(response.cookies[AUTH_TOKEN_COOKIE].value, token)
        self.assertEqual(response.cookies[USERNAME_COOKIE].value, "alice")
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE].value, "7")

        login_call = fake.call_to("POST", "login")
        self.assertEqual(login_call["json"], {"username": "alice", "password": "secret1"})
        self.assertNotIn("Authorization", login_call["headers"])
        lookup = fake.call_to("GET", "api/GetPatientByUsername/alice")
        self.assertEqual(lookup["headers"]["Authorization"], f"Bearer {token}")

    def test_patient_record_with_null_name_still_stores_patient_id(self):
        fake = FakeApi(
            {
                ("POST", "login"): api_response(200, {"token": make_token("Patient")}),
                ("GET", "api/GetPatientByUsername/alice"): api_response(
                    200, {"patientID": 9, "patientName": None, "username": "alice"}
                ),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "secret1"})

        self.assertEqual(response.cookies[PATIENT_ID_COOKIE].value, "9")

    def test_doctor_login_skips_patient_lookup(self):
        token = make_token("Doctor")
        fake = FakeApi({("POST", "login"): api_response(200, {"Token": token})})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "drwho", "password": "secret1"})

        self.assertRedirects(response, reverse("doctors:dashboard"), fetch_redirect_response=False)
        self.assertEqual(fake.paths, [("POST", "login")])
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE]["max-age"], 0)

    def test_doctor_login_expires_previous_patient_id(self):
        self.client.cookies[PATIENT_ID_COOKIE] = "7"
        fake = FakeApi({("POST", "login"): api_response(200, {"token": make_token("Doctor")})})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "drwho", "password": "secret1"})

        self.assertRedirects(response, reverse("doctors:dashboard"), fetch_redirect_response=False)
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE].value, "")
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE]["max-age"], 0)

    def test_failed_patient_lookup_still_logs_in(self):
        fake = FakeApi(
            {
                ("POST", "login"): api_response(200, {"token": make_token("Patient")}),
                ("GET", "api/GetPatientByUsername/alice"): api_response(404),
            }
        )
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "secret1"})

        self.assertRedirects(response, reverse("patients:dashboard"), fetch_redirect_response=False)
        self.assertIn(AUTH_TOKEN_COOKIE, response.cookies)
        self.assertEqual(response.cookies[PATIENT_ID_COOKIE]["max-age"], 0)

    def test_rejected_credentials_redisplay_form(self):
        fake = FakeApi({("POST", "login"): api_response(401)})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "wrong!"})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Login failed: Incorrect credentials.")
        self.assertNotIn(AUTH_TOKEN_COOKIE, response.cookies)

    def test_empty_token_redisplays_form(self):
        fake = FakeApi({("POST", "login"): api_response(200, {"token": ""})})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "secret1"})

        self.assertContains(response, "Login failed: Invalid token.")
        self.assertNotIn(AUTH_TOKEN_COOKIE, response.cookies)

    def test_token_with_unknown_role_is_not_stored(self):
        fake = FakeApi({("POST", "login"): api_response(200, {"token": make_token("Nurse")})})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "nina", "password": "secret1"})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "your account has no portal role")
        self.assertNotIn(AUTH_TOKEN_COOKIE, response.cookies)

    def test_invalid_form_makes_no_api_call(self):
        fake = FakeApi()
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "", "password": ""})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(fake.calls, [])

    def test_unreachable_api_renders_error_screen(self):
        fake = FakeApi({("POST", "login"): requests.ConnectionError("refused")})
        with patch(REQUESTS_TARGET, side_effect=fake):
            response = self.client.post(self.url, {"username": "alice", "password": "secret1"})

        self.assertEqual(response.status_code, 503)
        self.assertTemplateUsed(response, "accounts/error.html")
        self.assertContains(response, "An error occurred", status_code=503)
        self.assertNotContains(response, "refused", status_code=503)


class ProjectSettingsTests(SimpleTestCase):
    def test_no_local_data_apps_or_database(self):
        self.assertFalse(apps.is_installed("django.contrib.auth"))
        self.assertFalse(apps.is_installed("django.contrib.contenttypes"))
        self.assertEqual(connections["default"].settings_dict["ENGINE"], "django.db.backends.dummy")
