"""
Cookie-backed session for the portal.

Authentication state is three browser cookies written after a successful
login: the bearer token issued by the remote API, the username it was issued
for, and (for patients) the patient id. All three share one expiry and the
same transport flags.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from django.conf import settings
from django.shortcuts import redirect

logger = logging.getLogger(__name__)

AUTH_TOKEN_COOKIE = "AuthToken"
USERNAME_COOKIE = "Username"
PATIENT_ID_COOKIE = "PatientId"

SESSION_COOKIES = (AUTH_TOKEN_COOKIE, USERNAME_COOKIE, PATIENT_ID_COOKIE)

SAMESITE_POLICY = "Strict"


@dataclass(frozen=True)
class Session:
    auth_token: Optional[str] = None
    username: Optional[str] = None
    patient_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)


def _cookie_options():
    return {
        "max_age": getattr(settings, "AUTH_COOKIE_MAX_AGE", 30 * 60),
        "httponly": True,
        "secure": getattr(settings, "AUTH_COOKIE_SECURE", True),
        "samesite": SAMESITE_POLICY,
    }


def set_session(response, token: str, username: str, patient_id=None):
    """
    Write the session cookies onto ``response``.

    Without a patient id any ``PatientId`` left over from an earlier login
    is expired, so it cannot leak into the new session.
    """
    options = _cookie_options()
    response.set_cookie(AUTH_TOKEN_COOKIE, token, **options)
    response.set_cookie(USERNAME_COOKIE, username, **options)
    if patient_id not in (None, ""):
        response.set_cookie(PATIENT_ID_COOKIE, str(patient_id), **options)
    else:
        response.delete_cookie(PATIENT_ID_COOKIE, samesite=SAMESITE_POLICY)
    return response


def get_session(request) -> Session:
    cookies = request.COOKIES
    return Session(
        auth_token=cookies.get(AUTH_TOKEN_COOKIE) or None,
        username=cookies.get(USERNAME_COOKIE) or None,
        patient_id=cookies.get(PATIENT_ID_COOKIE) or None,
    )


def clear_session(response):
    """Expire every session cookie, whether or not it was set."""
    for name in SESSION_COOKIES:
        response.delete_cookie(name, samesite=SAMESITE_POLICY)
    return response


def session_required(view_func):
    """Redirect to the login screen when no auth token cookie is present."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not get_session(request).is_authenticated:
            logger.warning(
                "[AUTH] No session for %s, redirecting to login.", request.path
            )
            return redirect("accounts:login")
        return view_func(request, *args, **kwargs)

    return _wrapped
