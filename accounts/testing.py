"""
Helpers for tests that stand in for the remote API.

Views call ``requests.request`` through ``ApiClient``; tests patch it with a
``FakeApi`` that answers by (method, path).
"""

import json
from unittest import mock
from urllib.parse import urlsplit

import jwt

TEST_SIGNING_KEY = "portal-test-signing-key-0123456789abcdef"

REQUESTS_TARGET = "accounts.services.api_client.requests.request"


def make_token(role="Patient", key=TEST_SIGNING_KEY, **claims):
    payload = {"sub": "42", "unique_name": "someone"}
    if role is not None:
        payload["role"] = role
    payload.update(claims)
    return jwt.encode(payload, key, algorithm="HS256")


def api_response(status_code=200, payload=None, reason=None, text=None):
    response = mock.Mock(spec=["status_code", "text", "reason"])
    response.status_code = status_code
    if text is None:
        text = "" if payload is None else json.dumps(payload)
    response.text = text
    if reason is None:
        reason = "OK" if status_code < 400 else "Bad Request"
    response.reason = reason
    return response


class FakeApi:
    """Replacement for ``requests.request`` answering from a routing table."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def __call__(self, method, url, headers=None, json=None, timeout=None):
        path = urlsplit(url).path.lstrip("/")
        self.calls.append(
            {"method": method, "path": path, "headers": headers or {}, "json": json}
        )
        if (method, path) not in self.routes:
            raise AssertionError(f"Unexpected API call: {method} {path}")
        result = self.routes[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def paths(self):
        return [(call["method"], call["path"]) for call in self.calls]

    def call_to(self, method, path):
        for call in self.calls:
            if (call["method"], call["path"]) == (method, path):
                return call
        raise AssertionError(f"No call made to {method} {path}")
