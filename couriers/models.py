"""
Couriers — Models

DeliveryPerson: the courier a batch of notifications is entrusted to.
Only the name is required; the remaining contact and payment fields are
free text with no cross-field rules.

@file couriers/models.py
"""

import unicodedata

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class DeliveryPerson(BaseModel):
    """
    A courier registered in the office.

    The roster is always presented ordered by name. Deleting a person
    removes every batch assigned to them (see DeliveryPersonService).
    """

    name = models.CharField(_('full name'), max_length=255)
    cpf = models.CharField(_('CPF'), max_length=32, blank=True, default='')
    address = models.CharField(_('address'), max_length=255, blank=True, default='')
    phone = models.CharField(_('phone'), max_length=32, blank=True, default='')
    whatsapp = models.CharField(_('WhatsApp'), max_length=32, blank=True, default='')
    pix = models.CharField(
        _('PIX key'), max_length=140, blank=True, default='',
        help_text=_('Payment key used to pay the courier'),
    )
    route = models.CharField(
        _('route'), max_length=255, blank=True, default='',
        help_text=_('Preferred delivery route'),
    )

    class Meta:
        verbose_name = _('delivery person')
        verbose_name_plural = _('delivery people')
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='couriers_de_name_5c1a2e_idx'),
        ]

    def __str__(self):
        return self.name


def name_sort_key(name: str) -> tuple:
    """
    Collation key for courier names: letters first compared without accents
    or case, then by accents, then lowercase before uppercase.
    """
    decomposed = unicodedata.normalize('NFD', name)
    base = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), tuple(ch.isupper() for ch in base))


def sort_by_name(people) -> list:
    """The roster in name order, ties kept in creation order."""
    return sorted(people, key=lambda person: (name_sort_key(person.name), person.created_at))
