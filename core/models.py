"""
Core — Base Models

Reusable abstract models: creation/update timestamps and an opaque
string primary key shared by couriers and batches.

@file core/models.py
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def new_identifier() -> str:
    """Opaque, unique record identifier."""
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Abstract base models (mixins)
# ---------------------------------------------------------------------------

class TimestampMixin(models.Model):
    """Adds created_at / updated_at to any model."""

    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    updated_at = models.DateTimeField(
        _('updated at'), auto_now=True,
    )

    class Meta:
        abstract = True


class BaseModel(TimestampMixin):
    """
    Standard base for all NOTIS models.

    Identifiers are opaque strings: generated ids are uuid4 hex, while
    records imported from a browser snapshot keep their original ids.
    """

    id = models.CharField(
        primary_key=True, max_length=64, default=new_identifier, editable=False,
    )

    class Meta:
        abstract = True
