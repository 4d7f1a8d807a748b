from .session import get_session


def portal_session(request):
    """Expose the cookie session to templates for the navigation bar."""
    return {"portal_session": get_session(request)}
