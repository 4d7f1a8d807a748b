"""
Django settings for appointment_portal project.

The portal keeps no local data of its own: patients, doctors and
appointments live behind the remote appointment API configured below.
Most values can be overridden from the environment.
"""

import os
from pathlib import Path


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_list(name, default=""):
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-portal-development-key-change-me"
)

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = env_list("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")


INSTALLED_APPS = [
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "accounts",
    "appointments",
    "doctors",
    "patients",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "accounts.middleware.RemoteApiErrorMiddleware",
]

ROOT_URLCONF = "appointment_portal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "accounts.context_processors.portal_session",
            ],
        },
    },
]

WSGI_APPLICATION = "appointment_portal.wsgi.application"

# No local database: patients, doctors and appointments live behind the API.
DATABASES = {}

# Flash messages travel in a cookie; the portal has no server-side session store.
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# ─── Remote appointment API ──────────────────────────────────────────────

API_BASE_URL = os.environ.get("API_BASE_URL", "https://localhost:7187/")
API_TIMEOUT = float(os.environ.get("API_TIMEOUT", "10"))

# When set, bearer tokens are signature-checked before their role claim is
# trusted. When empty, claims are read without verification and the API is
# assumed to be the only issuer of tokens reaching this portal.
API_JWT_SIGNING_KEY = os.environ.get("API_JWT_SIGNING_KEY", "")
API_JWT_ALGORITHMS = env_list("API_JWT_ALGORITHMS", "HS256")


# ─── Auth cookies ────────────────────────────────────────────────────────

AUTH_COOKIE_MAX_AGE = int(os.environ.get("AUTH_COOKIE_MAX_AGE", str(30 * 60)))
AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)


# ─── Logging ─────────────────────────────────────────────────────────────

PORTAL_LOG_LEVEL = os.environ.get("PORTAL_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "accounts": {
            "handlers": ["console"],
            "level": PORTAL_LOG_LEVEL,
            "propagate": False,
        },
        "appointments": {
            "handlers": ["console"],
            "level": PORTAL_LOG_LEVEL,
            "propagate": False,
        },
        "doctors": {
            "handlers": ["console"],
            "level": PORTAL_LOG_LEVEL,
            "propagate": False,
        },
        "patients": {
            "handlers": ["console"],
            "level": PORTAL_LOG_LEVEL,
            "propagate": False,
        },
    },
}
