"""
Assistant — URL Configuration

@file assistant/urls.py
"""

from django.urls import path

from .views import batch_description

app_name = 'assistant'

urlpatterns = [
    path('batch-description/', batch_description, name='batch-description'),
]
