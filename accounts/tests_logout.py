from django.test import SimpleTestCase
from django.urls import reverse

from accounts.session import AUTH_TOKEN_COOKIE, PATIENT_ID_COOKIE, USERNAME_COOKIE
from accounts.testing import make_token

SESSION_COOKIES = (AUTH_TOKEN_COOKIE, USERNAME_COOKIE, PATIENT_ID_COOKIE)


class LogoutTests(SimpleTestCase):
    def assertSessionCleared(self, response):
        for name in SESSION_COOKIES:
            with self.subTest(cookie=name):
                self.assertIn(name, response.cookies)
                self.assertEqual(response.cookies[name].value, "")
                self.assertEqual(response.cookies[name]["max-age"], 0)

    def test_logout_with_full_session(self):
        """All three cookies are expired and the user lands on login"""
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Patient")
        self.client.cookies[USERNAME_COOKIE] = "alice"
        self.client.cookies[PATIENT_ID_COOKIE] = "7"

        response = self.client.get(reverse("accounts:logout"))

        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertSessionCleared(response)

    def test_logout_without_session(self):
        """Logging out twice is harmless"""
        response = self.client.get(reverse("accounts:logout"))

        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertSessionCleared(response)

    def test_login_screen_shown_after_logout(self):
        self.client.cookies[AUTH_TOKEN_COOKIE] = make_token("Doctor")
        self.client.cookies[USERNAME_COOKIE] = "drwho"

        response = self.client.get(reverse("accounts:logout"), follow=True)

        self.assertTemplateUsed(response, "accounts/login.html")
        self.assertContains(response, "You have been logged out successfully.")
