import logging

from django.shortcuts import redirect

from .models import Role
from .tokens import decode_role

logger = logging.getLogger(__name__)

LOGIN_DESTINATION = "accounts:login"

ROLE_DESTINATIONS = {
    Role.DOCTOR.value: "doctors:dashboard",
    Role.PATIENT.value: "patients:dashboard",
}


def route_for_role(role):
    """Map a role to the URL name of its dashboard; unknown roles go to login."""
    if not isinstance(role, str):
        return LOGIN_DESTINATION
    return ROLE_DESTINATIONS.get(role, LOGIN_DESTINATION)


def redirect_for_token(token):
    role = decode_role(token)
    destination = route_for_role(role)
    if destination == LOGIN_DESTINATION:
        logger.warning("[AUTH] Unexpected role %r, redirecting to login.", role)
    else:
        logger.info("[AUTH] Role %s routed to %s.", role, destination)
    return redirect(destination)
