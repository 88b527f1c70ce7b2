"""
Batches — Reconciliation

Rules that gate a batch's closure:

* at creation, at least one document must be entrusted
  (pgfn_initial + normal_initial > 0, neither negative);
* at finalization, and on every later edit of the counts, each category
  must balance: delivered + returned + absent == initial.

The payable value of a finalized batch is the number of documents handled
to conclusion (delivered or returned) times DELIVERY_FEE. Absent documents
are never paid.

Everything here is pure: no database access, no mutation.

@file batches/reconciliation.py
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings

from core.exceptions import ConservationViolation, InvalidBatchError

CATEGORIES = ('pgfn', 'normal')
OUTCOMES = ('delivered', 'returned', 'absent')
COUNT_FIELDS = tuple(f'{category}_{outcome}' for category in CATEGORIES for outcome in OUTCOMES)

CATEGORY_LABELS = {'pgfn': 'PGFN', 'normal': 'normal'}


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass(frozen=True)
class FinalCounts:
    """The six reconciliation counts of a returned batch."""

    pgfn_delivered: int = 0
    pgfn_returned: int = 0
    pgfn_absent: int = 0
    normal_delivered: int = 0
    normal_returned: int = 0
    normal_absent: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping) -> FinalCounts:
        """Missing fields count as zero; values are kept as given."""
        return cls(**{name: data.get(name, 0) for name in COUNT_FIELDS})

    @classmethod
    def from_batch(cls, batch) -> FinalCounts:
        return cls(**{name: getattr(batch, name) or 0 for name in COUNT_FIELDS})

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in COUNT_FIELDS}

    def category_total(self, category: str) -> int:
        return sum(getattr(self, f'{category}_{outcome}') for outcome in OUTCOMES)

    @property
    def payable_items(self) -> int:
        return self.pgfn_delivered + self.pgfn_returned + self.normal_delivered + self.normal_returned


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Outcome of checking a count tuple against a batch's initial counts.

    ``invalid_fields`` lists counts that are negative or not integers;
    ``unbalanced`` lists the categories whose sum differs from the
    initial count. ``errors`` holds one message per offending key.
    """

    invalid_fields: tuple[str, ...] = ()
    unbalanced: tuple[str, ...] = ()
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_fields and not self.unbalanced


def validate_initial_counts(pgfn_initial, normal_initial) -> None:
    """Creation rule: non-negative counts with at least one document."""
    errors = {}
    for name, value in (('pgfn_initial', pgfn_initial), ('normal_initial', normal_initial)):
        if not _is_count(value):
            errors[name] = ['The value must be zero or greater.']
    if errors:
        raise InvalidBatchError(detail=errors)
    if pgfn_initial + normal_initial <= 0:
        raise InvalidBatchError(
            detail={'pgfn_initial': ['Add at least one notification (PGFN or normal).']},
        )


def reconcile(counts: FinalCounts, *, pgfn_initial: int, normal_initial: int) -> ReconciliationResult:
    invalid = tuple(name for name, value in counts.as_dict().items() if not _is_count(value))
    errors = {name: 'The value must be zero or greater.' for name in invalid}
    if invalid:
        return ReconciliationResult(invalid_fields=invalid, errors=errors)

    expected = {'pgfn': pgfn_initial, 'normal': normal_initial}
    unbalanced = []
    for category in CATEGORIES:
        if counts.category_total(category) != expected[category]:
            unbalanced.append(category)
            errors[category] = (
                f'The {CATEGORY_LABELS[category]} total must be {expected[category]}.'
            )
    return ReconciliationResult(unbalanced=tuple(unbalanced), errors=errors)


def ensure_reconciled(counts: FinalCounts, *, pgfn_initial: int, normal_initial: int) -> FinalCounts:
    """Return ``counts`` unchanged, or raise ConservationViolation."""
    result = reconcile(counts, pgfn_initial=pgfn_initial, normal_initial=normal_initial)
    if not result.is_valid:
        raise ConservationViolation(errors=result.errors, categories=result.unbalanced)
    return counts


def compute_total_value(counts: FinalCounts, fee: Decimal | None = None) -> Decimal:
    if fee is None:
        fee = settings.DELIVERY_FEE
    return Decimal(counts.payable_items) * Decimal(fee)
