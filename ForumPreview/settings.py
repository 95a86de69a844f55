"""Django settings for the forum markup preview project."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "forum-preview-insecure-dev-key")

DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "engine",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {},
    },
]

DATABASES = {}

USE_TZ = True

FORUM_MARKUP = {
    "EMOJI_FILE": os.environ.get("FORUM_MARKUP_EMOJI_FILE"),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "loggers": {
        "engine": {
            "handlers": ["console"],
            "level": os.environ.get("FORUM_MARKUP_LOG_LEVEL", "WARNING"),
        },
    },
}
