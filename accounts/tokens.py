"""
Bearer token claims.

Tokens are issued by the remote API. If ``API_JWT_SIGNING_KEY`` is configured
the signature is verified before any claim is used; otherwise the payload is
read as-is and the API is trusted to be the only token issuer.
"""

import logging

import jwt
from django.conf import settings

logger = logging.getLogger(__name__)

ROLE_CLAIM = "role"


def read_claims(token):
    """Return the token payload as a dict, or None if it cannot be read."""
    if not token or not isinstance(token, str):
        return None

    signing_key = getattr(settings, "API_JWT_SIGNING_KEY", "")
    try:
        if signing_key:
            return jwt.decode(
                token,
                signing_key,
                algorithms=getattr(settings, "API_JWT_ALGORITHMS", ["HS256"]),
                options={"verify_aud": False},
            )
        logger.debug("[AUTH] Reading token claims without signature verification.")
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as exc:
        logger.warning("[AUTH] Unreadable bearer token: %s", exc)
        return None


def decode_role(token):
    """Return the ``role`` claim of ``token``, or None."""
    claims = read_claims(token)
    if claims is None:
        return None

    role = claims.get(ROLE_CLAIM)
    if not isinstance(role, str) or not role:
        logger.warning("[AUTH] No role claim found in token.")
        return None
    return role
