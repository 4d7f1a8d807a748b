import logging
import uuid

from django.shortcuts import render

from .view_models import ErrorPage

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def request_id_for(request) -> str:
    return request.META.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex[:12]


def render_error_page(request, message=GENERIC_ERROR_MESSAGE, status=200):
    """Render the shared error screen. ``message`` must be safe to show users."""
    page = ErrorPage(message=message, request_id=request_id_for(request))
    logger.info("Rendering error page for %s (request_id=%s).", request.path, page.request_id)
    return render(request, "accounts/error.html", {"page": page}, status=status)
