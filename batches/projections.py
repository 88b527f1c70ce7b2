"""
Batches — Projections

Read-side views over a list of batches, recomputed on every call:

* the Active / Archived partition, based on how long ago a batch was
  returned (ARCHIVE_DELAY_DAYS, boundary inclusive on Active);
* the delivery status shown next to a batch (pending, overdue, finalized);
* the dashboard filters (status, courier, free-text search).

Nothing here touches the database or mutates its input.

@file batches/projections.py
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .models import Batch


class DeliveryStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    OVERDUE = 'overdue', _('Overdue')
    FINALIZED = 'finalized', _('Finalized')


@dataclass(frozen=True)
class BatchPartition:
    active: list = field(default_factory=list)
    archived: list = field(default_factory=list)


def default_archive_delay() -> timedelta:
    return timedelta(days=settings.ARCHIVE_DELAY_DAYS)


def _newest_departure_first(batches: list) -> list:
    # sorted() is stable: equal departures keep their input order
    return sorted(batches, key=lambda batch: batch.departure_datetime, reverse=True)


def is_archived(batch: Batch, *, now: datetime, archive_delay: timedelta) -> bool:
    if not batch.is_finalized or batch.return_datetime is None:
        return False
    return now - batch.return_datetime > archive_delay


def partition_batches(
    batches: Iterable[Batch],
    *,
    now: datetime | None = None,
    archive_delay: timedelta | None = None,
) -> BatchPartition:
    """
    Split batches into Active and Archived.

    Active holds every pending batch plus finalized batches returned at most
    ``archive_delay`` ago; Archived holds the rest. Both groups are sorted by
    departure, newest first.
    """
    now = now or timezone.now()
    archive_delay = default_archive_delay() if archive_delay is None else archive_delay

    active, archived = [], []
    for batch in batches:
        if is_archived(batch, now=now, archive_delay=archive_delay):
            archived.append(batch)
        else:
            active.append(batch)

    return BatchPartition(
        active=_newest_departure_first(active),
        archived=_newest_departure_first(archived),
    )


def delivery_status(batch: Batch, *, today: date | None = None) -> DeliveryStatus:
    if batch.is_finalized:
        return DeliveryStatus.FINALIZED
    today = today or timezone.localdate()
    if batch.estimated_return_date < today:
        return DeliveryStatus.OVERDUE
    return DeliveryStatus.PENDING


def filter_batches(
    batches: Iterable[Batch],
    *,
    status: str | None = None,
    person_id: str | None = None,
    search: str | None = None,
) -> list[Batch]:
    """
    Dashboard filters. ``status`` is 'all', 'pending' or 'finalized';
    ``search`` matches the batch id or the courier name, ignoring case.
    Input order is preserved.
    """
    needle = (search or '').strip().lower()
    result = []
    for batch in batches:
        if status and status != 'all' and batch.status != status:
            continue
        if person_id and batch.delivery_person_id != person_id:
            continue
        if needle:
            name = batch.delivery_person.name.lower() if batch.delivery_person_id else ''
            if needle not in batch.pk.lower() and needle not in name:
                continue
        result.append(batch)
    return result
