"""
Batches — Reports

System-wide and per-courier performance figures. Only finalized batches
contribute; pending batches have no reconciliation counts yet.

@file batches/reports.py
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from couriers.models import DeliveryPerson, sort_by_name

from .models import Batch


@dataclass(frozen=True)
class SystemSummary:
    total_value: Decimal = Decimal('0')
    delivered: int = 0
    returned: int = 0
    absent: int = 0


@dataclass(frozen=True)
class CourierPerformance:
    person_id: str
    name: str
    total_value: Decimal = Decimal('0')
    delivered: int = 0
    returned: int = 0


@dataclass(frozen=True)
class CourierProfile:
    """Lifetime figures of one courier, as shown on their profile."""

    person_id: str
    delivered: int = 0
    returned: int = 0
    pending_batches: int = 0


def _finalized(batches: Iterable[Batch]) -> list[Batch]:
    return [batch for batch in batches if batch.is_finalized]


def summarize_batches(batches: Iterable[Batch]) -> SystemSummary:
    total_value = Decimal('0')
    delivered = returned = absent = 0
    for batch in _finalized(batches):
        total_value += batch.total_value or Decimal('0')
        delivered += batch.delivered
        returned += batch.returned
        absent += batch.absent
    return SystemSummary(total_value=total_value, delivered=delivered, returned=returned, absent=absent)


def courier_performance(
    batches: Iterable[Batch],
    people: Sequence[DeliveryPerson],
) -> list[CourierPerformance]:
    """
    One entry per courier, in the order of ``people``. Couriers with no
    finalized batch in ``batches`` get an all-zero entry.
    """
    totals = {person.pk: [Decimal('0'), 0, 0] for person in people}
    for batch in _finalized(batches):
        entry = totals.get(batch.delivery_person_id)
        if entry is None:
            continue
        entry[0] += batch.total_value or Decimal('0')
        entry[1] += batch.delivered
        entry[2] += batch.returned

    return [
        CourierPerformance(
            person_id=person.pk,
            name=person.name,
            total_value=totals[person.pk][0],
            delivered=totals[person.pk][1],
            returned=totals[person.pk][2],
        )
        for person in people
    ]


def courier_profile(person: DeliveryPerson, batches: Iterable[Batch]) -> CourierProfile:
    own = [batch for batch in batches if batch.delivery_person_id == person.pk]
    finalized = _finalized(own)
    return CourierProfile(
        person_id=person.pk,
        delivered=sum(batch.delivered for batch in finalized),
        returned=sum(batch.returned for batch in finalized),
        pending_batches=len(own) - len(finalized),
    )


def load_store_snapshot() -> tuple[list[DeliveryPerson], list[Batch]]:
    """People (by name) and batches (newest first) read in one transaction."""
    with transaction.atomic():
        people = sort_by_name(DeliveryPerson.objects.all())
        batches = list(Batch.objects.select_related('delivery_person').order_by('-sequence'))
    return people, batches
