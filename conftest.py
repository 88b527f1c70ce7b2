"""
NOTIS — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import DeliveryPersonFactory


@pytest.fixture
def api_client():
    """DRF test client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def person(db):
    return DeliveryPersonFactory(name='Ana Souza', route='Centro')


@pytest.fixture
def snapshot_path(settings, tmp_path):
    """Enable snapshot persistence to a temporary file."""
    path = tmp_path / 'notis-snapshot.json'
    settings.SNAPSHOT_PATH = str(path)
    return path
