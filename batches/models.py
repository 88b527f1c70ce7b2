"""
Batches — Models

A Batch is a group of PGFN and normal notifications handed to one courier
at departure and reconciled on return. Reconciliation fields stay NULL
while the batch is pending and are all set once it is finalized.

Conservation (delivered + returned + absent == initial, per category) is
checked by batches.reconciliation and mirrored here as DB constraints.

@file batches/models.py
"""

from django.db import models
from django.db.models import F, Max, Q
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Batch(BaseModel):
    """
    Notification batch entrusted to a courier.

    Lifecycle: PENDING → FINALIZED, once, through BatchService.finalize_batch.
    """

    class StatusChoices(models.TextChoices):
        PENDING = 'pending', _('Pending')
        FINALIZED = 'finalized', _('Finalized')

    delivery_person = models.ForeignKey(
        'couriers.DeliveryPerson',
        on_delete=models.CASCADE,
        related_name='batches',
        verbose_name=_('delivery person'),
    )
    sequence = models.PositiveBigIntegerField(
        _('sequence'), editable=False, db_index=True,
        help_text=_('Insertion order; newest batches come first'),
    )
    pgfn_initial = models.PositiveIntegerField(_('PGFN notifications'), default=0)
    normal_initial = models.PositiveIntegerField(_('normal notifications'), default=0)
    departure_datetime = models.DateTimeField(_('departure'))
    estimated_return_date = models.DateField(
        _('estimated return date'),
        help_text=_('Only used to flag overdue batches'),
    )
    description = models.TextField(_('description'), blank=True, default='')
    status = models.CharField(
        _('status'), max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.PENDING,
        db_index=True,
    )

    # Reconciliation — set by finalize, NULL while pending
    pgfn_delivered = models.PositiveIntegerField(_('PGFN delivered'), null=True, blank=True)
    pgfn_returned = models.PositiveIntegerField(_('PGFN returned'), null=True, blank=True)
    pgfn_absent = models.PositiveIntegerField(_('PGFN absent'), null=True, blank=True)
    normal_delivered = models.PositiveIntegerField(_('normal delivered'), null=True, blank=True)
    normal_returned = models.PositiveIntegerField(_('normal returned'), null=True, blank=True)
    normal_absent = models.PositiveIntegerField(_('normal absent'), null=True, blank=True)
    total_value = models.DecimalField(
        _('total value'), max_digits=12, decimal_places=2, null=True, blank=True,
    )
    return_datetime = models.DateTimeField(_('returned at'), null=True, blank=True)

    class Meta:
        verbose_name = _('batch')
        verbose_name_plural = _('batches')
        ordering = ['-sequence']
        indexes = [
            models.Index(fields=['delivery_person', 'status'], name='batches_bat_deliver_7d3f1a_idx'),
            models.Index(fields=['status', 'return_datetime'], name='batches_bat_status_2b8e4c_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(pgfn_initial__gt=0) | Q(normal_initial__gt=0),
                name='batch_has_notifications',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status='pending')
                    | Q(pgfn_initial=F('pgfn_delivered') + F('pgfn_returned') + F('pgfn_absent'))
                ),
                name='batch_pgfn_conserved',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status='pending')
                    | Q(normal_initial=F('normal_delivered') + F('normal_returned') + F('normal_absent'))
                ),
                name='batch_normal_conserved',
            ),
            models.CheckConstraint(
                condition=Q(status='pending') | Q(return_datetime__isnull=False),
                name='batch_finalized_has_return',
            ),
        ]

    def __str__(self):
        return f'Batch {self.pk[:8]} — {self.delivery_person} ({self.status})'

    def save(self, *args, **kwargs):
        if self.sequence is None:
            latest = Batch.objects.aggregate(latest=Max('sequence'))['latest'] or 0
            self.sequence = latest + 1
        super().save(*args, **kwargs)

    @property
    def is_finalized(self) -> bool:
        return self.status == self.StatusChoices.FINALIZED

    @property
    def initial_total(self) -> int:
        return self.pgfn_initial + self.normal_initial

    @property
    def delivered(self) -> int:
        return (self.pgfn_delivered or 0) + (self.normal_delivered or 0)

    @property
    def returned(self) -> int:
        return (self.pgfn_returned or 0) + (self.normal_returned or 0)

    @property
    def absent(self) -> int:
        return (self.pgfn_absent or 0) + (self.normal_absent or 0)
