"""
NOTIS — Celery Application

Reads every CELERY_* key from Django settings and discovers tasks.py
in the installed apps.

@file config/celery.py
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('notis')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
