"""
Tests — BatchService.

@file batches/tests/test_services.py
"""

import json
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from batches.models import Batch
from batches.services import BatchService
from core.exceptions import (
    AlreadyFinalizedError,
    ConservationViolation,
    InvalidBatchError,
    ResourceNotFoundError,
    UnknownPersonError,
)
from tests.factories import BatchFactory, DeliveryPersonFactory, FinalizedBatchFactory


pytestmark = pytest.mark.django_db


def _create(person, **overrides):
    fields = {
        'delivery_person_id': person.pk,
        'pgfn_initial': 7,
        'normal_initial': 4,
        'departure_datetime': timezone.now(),
        'estimated_return_date': timezone.localdate() + timedelta(days=3),
        'description': 'Lote centro',
    }
    fields.update(overrides)
    return BatchService.create_batch(**fields)


BALANCED = {
    'pgfn_delivered': 7, 'pgfn_returned': 0, 'pgfn_absent': 0,
    'normal_delivered': 0, 'normal_returned': 2, 'normal_absent': 2,
}


class TestCreateBatch:

    def test_create_batch_is_pending(self, person):
        batch = _create(person)
        assert batch.status == Batch.StatusChoices.PENDING
        assert batch.pgfn_delivered is None
        assert batch.total_value is None
        assert batch.return_datetime is None

    def test_new_batch_comes_first(self, person):
        first = _create(person)
        second = _create(person)
        assert [b.pk for b in BatchService.list_batches()] == [second.pk, first.pk]
        assert second.sequence > first.sequence

    def test_zero_notifications_rejected(self, person):
        with pytest.raises(InvalidBatchError):
            _create(person, pgfn_initial=0, normal_initial=0)
        assert Batch.objects.count() == 0

    def test_negative_initial_count_rejected(self, person):
        with pytest.raises(InvalidBatchError) as exc_info:
            _create(person, pgfn_initial=-2, normal_initial=5)
        assert 'pgfn_initial' in exc_info.value.detail

    def test_unknown_person_rejected(self):
        with pytest.raises(UnknownPersonError):
            BatchService.create_batch(
                delivery_person_id='missing',
                pgfn_initial=1,
                normal_initial=0,
                departure_datetime=timezone.now(),
                estimated_return_date=timezone.localdate(),
            )
        assert Batch.objects.count() == 0

    def test_count_check_runs_before_person_check(self):
        with pytest.raises(InvalidBatchError):
            BatchService.create_batch(
                delivery_person_id='missing',
                pgfn_initial=0,
                normal_initial=0,
                departure_datetime=timezone.now(),
                estimated_return_date=timezone.localdate(),
            )


class TestFinalizeBatch:

    def test_finalize_stores_counts_and_value(self, person):
        batch = _create(person)
        returned_at = timezone.now()
        finalized = BatchService.finalize_batch(
            batch_id=batch.pk, return_datetime=returned_at, counts=BALANCED,
        )
        finalized.refresh_from_db()
        assert finalized.status == Batch.StatusChoices.FINALIZED
        assert finalized.return_datetime == returned_at
        assert finalized.pgfn_delivered == 7
        assert finalized.normal_absent == 2
        assert finalized.total_value == Decimal('27.00')

    def test_unbalanced_counts_leave_batch_unchanged(self, person):
        batch = _create(person)
        counts = dict(BALANCED, normal_absent=1)
        with pytest.raises(ConservationViolation) as exc_info:
            BatchService.finalize_batch(batch_id=batch.pk, return_datetime=timezone.now(), counts=counts)
        assert exc_info.value.categories == ('normal',)

        batch.refresh_from_db()
        assert batch.status == Batch.StatusChoices.PENDING
        assert batch.normal_delivered is None
        assert batch.return_datetime is None

    def test_negative_count_rejected(self, person):
        batch = _create(person, pgfn_initial=2, normal_initial=0)
        with pytest.raises(ConservationViolation) as exc_info:
            BatchService.finalize_batch(
                batch_id=batch.pk,
                return_datetime=timezone.now(),
                counts={'pgfn_delivered': 3, 'pgfn_absent': -1},
            )
        assert 'pgfn_absent' in exc_info.value.detail

    def test_second_finalize_rejected(self):
        batch = FinalizedBatchFactory()
        original_return = batch.return_datetime
        with pytest.raises(AlreadyFinalizedError):
            BatchService.finalize_batch(
                batch_id=batch.pk,
                return_datetime=timezone.now(),
                counts={'pgfn_delivered': 5, 'normal_delivered': 3},
            )
        batch.refresh_from_db()
        assert batch.return_datetime == original_return
        assert batch.pgfn_delivered == 4
        assert batch.total_value == Decimal('21.00')

    def test_finalize_requires_return_time(self, person):
        batch = _create(person)
        with pytest.raises(InvalidBatchError) as exc_info:
            BatchService.finalize_batch(batch_id=batch.pk, return_datetime=None, counts=BALANCED)
        assert 'return_datetime' in exc_info.value.detail

        batch.refresh_from_db()
        assert batch.status == Batch.StatusChoices.PENDING
        assert batch.pgfn_delivered is None

    def test_finalize_missing_batch(self):
        with pytest.raises(ResourceNotFoundError):
            BatchService.finalize_batch(batch_id='nope', return_datetime=timezone.now(), counts={})


class TestUpdateBatch:

    def test_pending_batch_schedule_update(self):
        batch = BatchFactory(description='old')
        new_date = timezone.localdate() + timedelta(days=10)
        updated = BatchService.update_batch(
            batch_id=batch.pk,
            description='new',
            estimated_return_date=new_date,
            pgfn_delivered=5,
        )
        updated.refresh_from_db()
        assert updated.description == 'new'
        assert updated.estimated_return_date == new_date
        assert updated.pgfn_delivered is None
        assert updated.status == Batch.StatusChoices.PENDING

    def test_initial_counts_are_immutable(self):
        batch = BatchFactory(pgfn_initial=5)
        BatchService.update_batch(batch_id=batch.pk, pgfn_initial=50, status='finalized')
        batch.refresh_from_db()
        assert batch.pgfn_initial == 5
        assert batch.status == Batch.StatusChoices.PENDING

    def test_finalized_counts_edit_recomputes_value(self):
        batch = FinalizedBatchFactory()
        updated = BatchService.update_batch(
            batch_id=batch.pk,
            pgfn_delivered=5,
            pgfn_returned=0,
            description='ignored',
        )
        updated.refresh_from_db()
        assert updated.pgfn_delivered == 5
        assert updated.normal_absent == 1
        assert updated.total_value == Decimal('21.00')
        assert updated.description == ''

    def test_finalized_counts_edit_moves_value(self):
        batch = FinalizedBatchFactory()
        updated = BatchService.update_batch(batch_id=batch.pk, pgfn_delivered=0, pgfn_absent=4)
        assert updated.total_value == Decimal('9')

    def test_finalized_unbalanced_edit_rejected(self):
        batch = FinalizedBatchFactory()
        with pytest.raises(ConservationViolation):
            BatchService.update_batch(batch_id=batch.pk, pgfn_delivered=10)
        batch.refresh_from_db()
        assert batch.pgfn_delivered == 4
        assert batch.total_value == Decimal('21.00')

    def test_update_missing_batch(self):
        with pytest.raises(ResourceNotFoundError):
            BatchService.update_batch(batch_id='nope', description='x')


class TestDeleteBatch:

    def test_delete_batch(self):
        keep = BatchFactory()
        gone = BatchFactory(delivery_person=keep.delivery_person)
        BatchService.delete_batch(batch_id=gone.pk)
        assert list(Batch.objects.values_list('pk', flat=True)) == [keep.pk]

    def test_delete_missing_batch(self):
        with pytest.raises(ResourceNotFoundError):
            BatchService.delete_batch(batch_id='nope')


class TestSnapshotPersistence:

    def test_mutation_writes_snapshot_on_commit(self, snapshot_path, django_capture_on_commit_callbacks):
        person = DeliveryPersonFactory()
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            batch = _create(person)
        assert len(callbacks) == 1

        data = json.loads(snapshot_path.read_text(encoding='utf-8'))
        assert [record['id'] for record in data['batches']] == [batch.pk]
        assert data['batches'][0]['deliveryPersonId'] == person.pk

    def test_failed_mutation_schedules_nothing(self, snapshot_path, django_capture_on_commit_callbacks):
        person = DeliveryPersonFactory()
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(InvalidBatchError):
                _create(person, pgfn_initial=0, normal_initial=0)
        assert callbacks == []
        assert not snapshot_path.exists()

    def test_no_snapshot_without_path(self, person, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            _create(person)
        assert callbacks == []
