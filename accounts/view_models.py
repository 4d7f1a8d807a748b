"""
Per-screen view models handed to templates as ``page``.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class FormPage:
    """A screen built around one form plus an optional status message."""

    form: Any
    message: str = ""
    succeeded: bool = False


@dataclass
class ErrorPage:
    message: str
    request_id: str = ""
