"""
Batches — URL Configuration

@file batches/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BatchViewSet

app_name = 'batches'

router = DefaultRouter()
router.register('', BatchViewSet, basename='batch')

urlpatterns = [
    path('', include(router.urls)),
]
