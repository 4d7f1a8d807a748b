import logging

from .api_client import LOGIN

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Login failed: Invalid token."
BAD_CREDENTIALS_MESSAGE = "Login failed: Incorrect credentials."


def login(client, username: str, password: str):
    """
    Exchange credentials for a bearer token.

    Returns:
        (token, None) on success, (None, message) otherwise.
    """
    response = client.post(LOGIN, {"username": username, "password": password})

    if not response.ok:
        logger.warning("[AUTH] Login rejected for %s (status=%s).", username, response.status_code)
        return None, BAD_CREDENTIALS_MESSAGE

    body = response.json()
    token = None
    if isinstance(body, dict):
        token = next((v for k, v in body.items() if k.lower() == "token"), None)
    if not token or not isinstance(token, str):
        logger.warning("[AUTH] Login for %s returned no token.", username)
        return None, INVALID_TOKEN_MESSAGE

    logger.info("[AUTH] Login successful for %s.", username)
    return token, None
