"""
Couriers — Service Layer

Lifecycle of delivery people: create, update and the cascading delete
that removes every batch assigned to the courier in the same transaction.

@file couriers/services.py
"""

import logging

from django.db import transaction

from core.exceptions import ResourceNotFoundError
from core.tasks import schedule_snapshot_save

from .models import DeliveryPerson, sort_by_name

logger = logging.getLogger('notis')

OPTIONAL_FIELDS = ('cpf', 'address', 'phone', 'whatsapp', 'pix', 'route')
EDITABLE_FIELDS = ('name', *OPTIONAL_FIELDS)


def _get_for_update(person_id) -> DeliveryPerson:
    try:
        return DeliveryPerson.objects.select_for_update().get(pk=person_id)
    except DeliveryPerson.DoesNotExist:
        raise ResourceNotFoundError(detail=f'Delivery person {person_id} not found.')


class DeliveryPersonService:
    """Courier roster management."""

    @staticmethod
    def list_people() -> list[DeliveryPerson]:
        """The full roster in canonical (name) order."""
        return sort_by_name(DeliveryPerson.objects.all())

    @staticmethod
    @transaction.atomic
    def create_person(**fields) -> DeliveryPerson:
        fields = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
        person = DeliveryPerson(**fields)
        person.full_clean()
        person.save()
        logger.info('Delivery person %s created (%s).', person.pk, person.name)
        schedule_snapshot_save()
        return person

    @staticmethod
    @transaction.atomic
    def update_person(*, person_id, **fields) -> DeliveryPerson:
        """Replace the given fields; the id never changes."""
        person = _get_for_update(person_id)

        for field, value in fields.items():
            if field in EDITABLE_FIELDS:
                setattr(person, field, value)

        person.full_clean()
        person.save()
        logger.info('Delivery person %s updated.', person.pk)
        schedule_snapshot_save()
        return person

    @staticmethod
    @transaction.atomic
    def delete_person(*, person_id) -> int:
        """
        Delete a courier together with all of their batches.

        Both deletions run in one transaction so no batch can be left
        pointing at a missing courier. Returns the number of batches removed.
        """
        from batches.models import Batch

        person = _get_for_update(person_id)
        removed_batches, _ = Batch.objects.filter(delivery_person_id=person.pk).delete()
        person.delete()
        logger.info(
            'Delivery person %s deleted. %d batches cascade-deleted.',
            person_id, removed_batches,
        )
        schedule_snapshot_save()
        return removed_batches
