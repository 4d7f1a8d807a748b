import logging

from .errors import GENERIC_ERROR_MESSAGE, render_error_page
from .services.api_client import ApiUnavailableError

logger = logging.getLogger(__name__)


class RemoteApiErrorMiddleware:
    """
    Turns an unreachable remote API into the error screen.

    Views that can degrade gracefully catch ``ApiUnavailableError`` themselves;
    anything that escapes a view ends up here instead of as a server error.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, ApiUnavailableError):
            return None

        logger.error(
            "[API] Remote API unavailable while handling %s %s (path=%s).",
            request.method,
            request.path,
            exception.path,
        )
        return render_error_page(request, GENERIC_ERROR_MESSAGE, status=503)
