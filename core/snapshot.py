"""
Core — Snapshot Import / Export

Whole-store snapshots in the JSON layout the NOTIS browser app kept in
local storage:

    {
      "people":  [{"id", "name", "cpf", "address", "phone", "whatsapp", "pix", "route"}, ...],
      "batches": [{"id", "deliveryPersonId", "pgfnInitial", "normalInitial",
                   "departureDatetime", "estimatedReturnDate", "status",
                   "description", "pgfnDelivered", ..., "totalValue",
                   "returnDatetime"}, ...]
    }

Batches are listed in store order (newest first). "deliveryPeople" is
accepted as an alias of "people" when loading.

Loading never fails: a missing or malformed snapshot yields an empty
store, and records that cannot be trusted (unknown courier, broken
counts, unreadable dates) are dropped with a warning.

@file core/snapshot.py
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .constants import SNAPSHOT_BATCHES_KEY, SNAPSHOT_LEGACY_PEOPLE_KEY, SNAPSHOT_PEOPLE_KEY
from .exceptions import ConservationViolation, InvalidBatchError

logger = logging.getLogger('notis')

PERSON_FIELDS = ('name', 'cpf', 'address', 'phone', 'whatsapp', 'pix', 'route')

# snapshot key -> model field
BATCH_COUNT_KEYS = {
    'pgfnDelivered': 'pgfn_delivered',
    'pgfnReturned': 'pgfn_returned',
    'pgfnAbsent': 'pgfn_absent',
    'normalDelivered': 'normal_delivered',
    'normalReturned': 'normal_returned',
    'normalAbsent': 'normal_absent',
}


class SnapshotRecordError(ValueError):
    """A snapshot record that cannot be imported."""


@dataclass(frozen=True)
class SnapshotLoadResult:
    people: int = 0
    batches: int = 0
    skipped_people: int = 0
    skipped_batches: int = 0


# ---------------------------------------------------------------------------
# Record conversion
# ---------------------------------------------------------------------------

def _isoformat(value):
    return value.isoformat() if value is not None else None


def person_to_record(person) -> dict:
    record = {'id': person.pk}
    record.update({name: getattr(person, name) for name in PERSON_FIELDS})
    return record


def batch_to_record(batch) -> dict:
    record = {
        'id': batch.pk,
        'deliveryPersonId': batch.delivery_person_id,
        'pgfnInitial': batch.pgfn_initial,
        'normalInitial': batch.normal_initial,
        'departureDatetime': _isoformat(batch.departure_datetime),
        'estimatedReturnDate': _isoformat(batch.estimated_return_date),
        'status': batch.status,
        'description': batch.description,
    }
    if batch.is_finalized:
        record.update({key: getattr(batch, name) for key, name in BATCH_COUNT_KEYS.items()})
        record['totalValue'] = float(batch.total_value) if batch.total_value is not None else None
        record['returnDatetime'] = _isoformat(batch.return_datetime)
    return record


def _parse_moment(value, key):
    try:
        moment = parse_datetime(value) if isinstance(value, str) else None
    except ValueError as exc:
        raise SnapshotRecordError(f'{key} is not a valid datetime: {value!r}') from exc
    if moment is None:
        raise SnapshotRecordError(f'{key} is not a datetime: {value!r}')
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _parse_day(value, key):
    day = None
    if isinstance(value, str):
        # Some records carry a full timestamp where a date is expected.
        try:
            day = parse_date(value[:10])
        except ValueError as exc:
            raise SnapshotRecordError(f'{key} is not a valid date: {value!r}') from exc
    if day is None:
        raise SnapshotRecordError(f'{key} is not a date: {value!r}')
    return day


def person_from_record(record):
    from couriers.models import DeliveryPerson

    if not isinstance(record, dict) or not record.get('id') or not record.get('name'):
        raise SnapshotRecordError('person record needs an id and a name')
    fields = {name: record.get(name) or '' for name in PERSON_FIELDS}
    return DeliveryPerson(id=str(record['id']), **fields)


def batch_from_record(record, *, known_people):
    from batches.models import Batch
    from batches.reconciliation import (
        FinalCounts,
        compute_total_value,
        ensure_reconciled,
        validate_initial_counts,
    )

    if not isinstance(record, dict) or not record.get('id'):
        raise SnapshotRecordError('batch record needs an id')
    person_id = str(record.get('deliveryPersonId') or '')
    if person_id not in known_people:
        raise SnapshotRecordError(f'unknown delivery person {person_id!r}')

    pgfn_initial = record.get('pgfnInitial', 0)
    normal_initial = record.get('normalInitial', 0)
    try:
        validate_initial_counts(pgfn_initial, normal_initial)
    except InvalidBatchError as exc:
        raise SnapshotRecordError(f'invalid initial counts: {exc.detail}') from exc

    batch = Batch(
        id=str(record['id']),
        delivery_person_id=person_id,
        pgfn_initial=pgfn_initial,
        normal_initial=normal_initial,
        departure_datetime=_parse_moment(record.get('departureDatetime'), 'departureDatetime'),
        estimated_return_date=_parse_day(record.get('estimatedReturnDate'), 'estimatedReturnDate'),
        description=record.get('description') or '',
    )

    status = record.get('status', Batch.StatusChoices.PENDING)
    if status == Batch.StatusChoices.FINALIZED:
        counts = FinalCounts.from_mapping(
            {name: record.get(key, 0) for key, name in BATCH_COUNT_KEYS.items()},
        )
        try:
            ensure_reconciled(counts, pgfn_initial=pgfn_initial, normal_initial=normal_initial)
        except ConservationViolation as exc:
            raise SnapshotRecordError(f'counts do not reconcile: {exc.detail}') from exc
        for name, value in counts.as_dict().items():
            setattr(batch, name, value)
        batch.total_value = compute_total_value(counts)
        batch.return_datetime = _parse_moment(record.get('returnDatetime'), 'returnDatetime')
        batch.status = Batch.StatusChoices.FINALIZED
    elif status != Batch.StatusChoices.PENDING:
        raise SnapshotRecordError(f'unknown status {status!r}')
    return batch


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class SnapshotService:
    """Export, load and persist whole-store snapshots."""

    @staticmethod
    def export() -> dict:
        from batches.reports import load_store_snapshot

        people, batches = load_store_snapshot()
        return {
            SNAPSHOT_PEOPLE_KEY: [person_to_record(person) for person in people],
            SNAPSHOT_BATCHES_KEY: [batch_to_record(batch) for batch in batches],
        }

    @staticmethod
    @transaction.atomic
    def load(data) -> SnapshotLoadResult:
        """
        Replace the whole store with the content of ``data``.

        Anything that is not a snapshot mapping of lists leaves the store
        empty.
        """
        from batches.models import Batch
        from couriers.models import DeliveryPerson

        people_records, batch_records = [], []
        if isinstance(data, dict):
            people_records = data.get(SNAPSHOT_PEOPLE_KEY, data.get(SNAPSHOT_LEGACY_PEOPLE_KEY, []))
            batch_records = data.get(SNAPSHOT_BATCHES_KEY, [])
        if not isinstance(data, dict) or not isinstance(people_records, list) \
                or not isinstance(batch_records, list):
            logger.warning('Malformed snapshot ignored; starting with an empty store.')
            people_records, batch_records = [], []

        Batch.objects.all().delete()
        DeliveryPerson.objects.all().delete()

        people, skipped_people = {}, 0
        for record in people_records:
            try:
                person = person_from_record(record)
            except SnapshotRecordError as exc:
                skipped_people += 1
                logger.warning('Snapshot person skipped: %s', exc)
                continue
            people[person.pk] = person

        batches, seen, skipped_batches = [], set(), 0
        for record in batch_records:
            try:
                batch = batch_from_record(record, known_people=people)
                if batch.pk in seen:
                    raise SnapshotRecordError(f'duplicate batch id {batch.pk!r}')
            except SnapshotRecordError as exc:
                skipped_batches += 1
                logger.warning('Snapshot batch skipped: %s', exc)
                continue
            seen.add(batch.pk)
            batches.append(batch)

        # Records are newest first; the first one gets the highest sequence.
        for position, batch in enumerate(batches):
            batch.sequence = len(batches) - position

        DeliveryPerson.objects.bulk_create(people.values())
        Batch.objects.bulk_create(batches)

        result = SnapshotLoadResult(
            people=len(people),
            batches=len(batches),
            skipped_people=skipped_people,
            skipped_batches=skipped_batches,
        )
        logger.info(
            'Snapshot loaded: %d people, %d batches (%d and %d skipped).',
            result.people, result.batches, result.skipped_people, result.skipped_batches,
        )
        return result

    @staticmethod
    def load_file(path) -> SnapshotLoadResult:
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            logger.warning('No snapshot at %s; starting with an empty store.', path)
            data = {}
        except (OSError, ValueError) as exc:
            logger.warning('Snapshot %s unreadable (%s); starting with an empty store.', path, exc)
            data = None
        return SnapshotService.load(data)

    @staticmethod
    def save(path) -> dict:
        """Write the current snapshot to ``path`` atomically and return it."""
        path = Path(path)
        snapshot = SnapshotService.export()
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(snapshot, handle, cls=DjangoJSONEncoder, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return snapshot
