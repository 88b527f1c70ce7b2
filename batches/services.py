"""
Batches — Service Layer

Batch lifecycle: create (PENDING), update, finalize (reconcile and close),
delete. Every operation is one transaction; a failed operation leaves the
batch exactly as it was.

@file batches/services.py
"""

import logging
from collections.abc import Mapping

from django.db import transaction

from core.exceptions import (
    AlreadyFinalizedError,
    InvalidBatchError,
    ResourceNotFoundError,
    UnknownPersonError,
)
from core.tasks import schedule_snapshot_save
from couriers.models import DeliveryPerson

from .models import Batch
from .reconciliation import (
    COUNT_FIELDS,
    FinalCounts,
    compute_total_value,
    ensure_reconciled,
    validate_initial_counts,
)

logger = logging.getLogger('notis')

# Fields a pending batch may change after creation. Courier and initial
# counts are fixed at creation; status only moves through finalize_batch.
PENDING_EDITABLE_FIELDS = ('departure_datetime', 'estimated_return_date', 'description')


def _get_for_update(batch_id) -> Batch:
    try:
        return Batch.objects.select_for_update().get(pk=batch_id)
    except Batch.DoesNotExist:
        raise ResourceNotFoundError(detail=f'Batch {batch_id} not found.')


class BatchService:
    """Batch lifecycle and reconciliation."""

    @staticmethod
    def list_batches() -> list[Batch]:
        """All batches in store order (most recently created first)."""
        return list(Batch.objects.select_related('delivery_person').order_by('-sequence'))

    @staticmethod
    @transaction.atomic
    def create_batch(
        *,
        delivery_person_id,
        pgfn_initial: int,
        normal_initial: int,
        departure_datetime,
        estimated_return_date,
        description: str = '',
    ) -> Batch:
        validate_initial_counts(pgfn_initial, normal_initial)

        person = DeliveryPerson.objects.filter(pk=delivery_person_id).first()
        if person is None:
            raise UnknownPersonError()

        batch = Batch(
            delivery_person=person,
            pgfn_initial=pgfn_initial,
            normal_initial=normal_initial,
            departure_datetime=departure_datetime,
            estimated_return_date=estimated_return_date,
            description=description or '',
            status=Batch.StatusChoices.PENDING,
        )
        batch.full_clean(exclude=['sequence'])
        batch.save()
        logger.info(
            'Batch %s created for %s: pgfn=%s normal=%s.',
            batch.pk, person.pk, pgfn_initial, normal_initial,
        )
        schedule_snapshot_save()
        return batch

    @staticmethod
    @transaction.atomic
    def update_batch(*, batch_id, **fields) -> Batch:
        """
        Replace the editable fields of a batch.

        Pending batches accept schedule and description changes. Finalized
        batches accept only the six reconciliation counts: they are merged
        over the stored values, re-reconciled and the total value is
        recomputed. Anything else is ignored.
        """
        batch = _get_for_update(batch_id)

        if not batch.is_finalized:
            for name in PENDING_EDITABLE_FIELDS:
                if name in fields:
                    setattr(batch, name, fields[name])
            batch.description = batch.description or ''
            batch.full_clean()
            batch.save()
            logger.info('Pending batch %s updated.', batch.pk)
            schedule_snapshot_save()
            return batch

        current = FinalCounts.from_batch(batch).as_dict()
        current.update({name: fields[name] for name in COUNT_FIELDS if name in fields})
        counts = ensure_reconciled(
            FinalCounts.from_mapping(current),
            pgfn_initial=batch.pgfn_initial,
            normal_initial=batch.normal_initial,
        )
        for name, value in counts.as_dict().items():
            setattr(batch, name, value)
        batch.total_value = compute_total_value(counts)
        batch.save(update_fields=[*COUNT_FIELDS, 'total_value', 'updated_at'])
        logger.info('Finalized batch %s counts edited, total=%s.', batch.pk, batch.total_value)
        schedule_snapshot_save()
        return batch

    @staticmethod
    @transaction.atomic
    def finalize_batch(*, batch_id, return_datetime, counts: Mapping | FinalCounts) -> Batch:
        """
        Close a pending batch: reconcile the returned counts, stamp the
        return time and compute the payable value.
        """
        batch = _get_for_update(batch_id)
        if batch.is_finalized:
            raise AlreadyFinalizedError(detail=f'Batch {batch.pk} is already finalized.')
        if return_datetime is None:
            raise InvalidBatchError(
                detail={'return_datetime': ['A return time is required to finalize a batch.']},
            )

        if not isinstance(counts, FinalCounts):
            counts = FinalCounts.from_mapping(counts)
        ensure_reconciled(
            counts,
            pgfn_initial=batch.pgfn_initial,
            normal_initial=batch.normal_initial,
        )

        for name, value in counts.as_dict().items():
            setattr(batch, name, value)
        batch.total_value = compute_total_value(counts)
        batch.return_datetime = return_datetime
        batch.status = Batch.StatusChoices.FINALIZED
        batch.save()
        logger.info(
            'Batch %s finalized at %s: delivered=%d returned=%d absent=%d total=%s.',
            batch.pk, return_datetime, batch.delivered, batch.returned, batch.absent, batch.total_value,
        )
        schedule_snapshot_save()
        return batch

    @staticmethod
    @transaction.atomic
    def delete_batch(*, batch_id) -> None:
        batch = _get_for_update(batch_id)
        batch.delete()
        logger.info('Batch %s deleted.', batch_id)
        schedule_snapshot_save()
