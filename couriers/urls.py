"""
Couriers — URL Configuration

@file couriers/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DeliveryPersonViewSet

app_name = 'couriers'

router = DefaultRouter()
router.register('people', DeliveryPersonViewSet, basename='person')

urlpatterns = [
    path('', include(router.urls)),
]
