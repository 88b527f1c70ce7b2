"""
NOTIS — Test Settings

In-memory SQLite, eager Celery, no snapshot file and no Gemini key.
Activated by pytest via pyproject.toml.

@file config/settings/test.py
"""

from decimal import Decimal

from .base import *  # noqa: F401, F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_TASK_EAGER_PROPAGATES = True

DELIVERY_FEE = Decimal('3')
ARCHIVE_DELAY_DAYS = 4
SNAPSHOT_PATH = ''
GEMINI_API_KEY = ''

LOGGING['loggers']['notis']['propagate'] = True  # noqa: F405
