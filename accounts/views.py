import logging

from django.contrib import messages
from django.shortcuts import redirect, render

from patients.services import get_patient_by_username
from .forms import LoginForm
from .models import Role
from .routing import LOGIN_DESTINATION, redirect_for_token, route_for_role
from .services import auth_api
from .services.api_client import ApiClient
from .session import clear_session, get_session, set_session
from .tokens import decode_role
from .view_models import FormPage

logger = logging.getLogger(__name__)

UNKNOWN_ROLE_MESSAGE = "Login failed: your account has no portal role."


def home(request):
    """Landing page; signed-in users go straight to their dashboard."""
    session = get_session(request)
    if session.is_authenticated:
        return redirect_for_token(session.auth_token)
    return render(request, "accounts/home.html")


def privacy(request):
    return render(request, "accounts/privacy.html")


def login_view(request):
    """Handle login against the remote API"""
    if request.method == "POST":
        return _submit_login(request)

    logger.info("Login GET action called.")
    session = get_session(request)

    if session.auth_token and session.username:
        destination = route_for_role(decode_role(session.auth_token))
        if destination != LOGIN_DESTINATION:
            logger.info("[AUTH] Existing session found, redirecting to %s.", destination)
            return redirect(destination)

        # Cookies whose token routes nowhere would send us back here forever.
        logger.warning("[AUTH] Session token has no usable role; clearing cookies.")
        response = _render_login(request, LoginForm())
        return clear_session(response)

    return _render_login(request, LoginForm())


def _submit_login(request):
    form = LoginForm(request.POST)
    if not form.is_valid():
        return _render_login(request, form, "Please correct the errors below.")

    username = form.cleaned_data["username"]
    client = ApiClient.from_settings()
    token, message = auth_api.login(client, username, form.cleaned_data["password"])
    if token is None:
        return _render_login(request, form, message)

    role = decode_role(token)
    destination = route_for_role(role)
    if destination == LOGIN_DESTINATION:
        logger.warning("[AUTH] Token for %s carries unexpected role %r.", username, role)
        return _render_login(request, form, UNKNOWN_ROLE_MESSAGE)

    patient_id = None
    if role == Role.PATIENT.value:
        patient, error = get_patient_by_username(client.with_token(token), username)
        if patient is not None:
            patient_id = patient.id
            logger.info("[AUTH] Patient ID stored in cookie.")
        else:
            messages.warning(request, "Unable to retrieve patient data.")

    logger.info("[AUTH] Login successful. Setting session cookies for %s.", username)
    response = redirect(destination)
    return set_session(response, token, username, patient_id)


def _render_login(request, form, message=""):
    return render(request, "accounts/login.html", {"page": FormPage(form=form, message=message)})


def logout_view(request):
    """Clear the session cookies and return to the login screen"""
    logger.info("Logout action called. Clearing cookies.")
    messages.info(request, "You have been logged out successfully.")
    return clear_session(redirect("accounts:login"))
