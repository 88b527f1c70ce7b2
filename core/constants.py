"""
Core — Constants

Defaults shared by settings, services and tests.

@file core/constants.py
"""

from decimal import Decimal

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200

# Monetary rate per delivered or returned document.
DEFAULT_DELIVERY_FEE = Decimal('3')

# Finalized batches stay on the dashboard for this many days after return.
DEFAULT_ARCHIVE_DELAY_DAYS = 4

DEFAULT_GEMINI_MODEL = 'gemini-2.5-flash'
DEFAULT_GEMINI_TIMEOUT_SECONDS = 30.0

SNAPSHOT_PEOPLE_KEY = 'people'
SNAPSHOT_LEGACY_PEOPLE_KEY = 'deliveryPeople'
SNAPSHOT_BATCHES_KEY = 'batches'
