"""
Django settings for the USD converter project.
Every value can be overridden through an environment variable.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "drf_spectacular",
    "apps.conversion",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "core.urls"

# No rate is ever stored; the database only satisfies contrib.auth.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

USE_TZ = True
TIME_ZONE = "UTC"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
}

SPECTACULAR_SETTINGS = {
    "TITLE": "USD Converter API",
    "DESCRIPTION": "Convert an amount to US dollars at a historical exchange rate",
    "VERSION": "0.1.0",
}


# Exchange rate providers
# Comma separated, tried left to right until one returns a rate.
RATE_PROVIDER_ORDER = [
    name.strip()
    for name in os.environ.get(
        "RATE_PROVIDER_ORDER",
        "exchange_rate_api,frankfurter,exchangerate_host,exchangerate_host_convert",
    ).split(",")
    if name.strip()
]
CURRENCY_LIST_PROVIDER = os.environ.get("CURRENCY_LIST_PROVIDER", "frankfurter")
RATE_PROVIDER_TIMEOUT = float(os.environ.get("RATE_PROVIDER_TIMEOUT", "10"))

EXCHANGERATE_API_URL = os.environ.get("EXCHANGERATE_API_URL", "https://v6.exchangerate-api.com/v6")
EXCHANGERATE_API_KEY = os.environ.get("EXCHANGERATE_API_KEY", "")

FRANKFURTER_URL = os.environ.get("FRANKFURTER_URL", "https://api.frankfurter.app")

EXCHANGERATE_HOST_URL = os.environ.get("EXCHANGERATE_HOST_URL", "https://api.exchangerate.host")
EXCHANGERATE_HOST_KEY = os.environ.get("EXCHANGERATE_HOST_KEY", "")


LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "apps": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": True,
        },
    },
}
