"""
Batches — Serializers

Read serializers expose the derived delivery status; write serializers
only shape input. Count rules (at least one notification, conservation)
are enforced by the service layer so they keep their own error codes.

@file batches/serializers.py
"""

from rest_framework import serializers

from couriers.serializers import DeliveryPersonMinimalSerializer

from .models import Batch
from .projections import delivery_status

__all__ = [
    'BatchReadSerializer',
    'BatchCreateSerializer',
    'BatchUpdateSerializer',
    'BatchFinalizeSerializer',
    'DashboardQuerySerializer',
    'ArchiveQuerySerializer',
    'SystemSummarySerializer',
    'CourierPerformanceSerializer',
]


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------

class BatchReadSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    delivery_person_detail = DeliveryPersonMinimalSerializer(source='delivery_person', read_only=True)
    delivery_status = serializers.SerializerMethodField()
    delivered = serializers.IntegerField(read_only=True)
    returned = serializers.IntegerField(read_only=True)
    absent = serializers.IntegerField(read_only=True)

    class Meta:
        model = Batch
        fields = [
            'id', 'delivery_person', 'delivery_person_detail',
            'pgfn_initial', 'normal_initial',
            'departure_datetime', 'estimated_return_date', 'description',
            'status', 'status_display', 'delivery_status',
            'pgfn_delivered', 'pgfn_returned', 'pgfn_absent',
            'normal_delivered', 'normal_returned', 'normal_absent',
            'delivered', 'returned', 'absent',
            'total_value', 'return_datetime',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_delivery_status(self, obj) -> str:
        return delivery_status(obj, today=self.context.get('today')).value


class BatchCreateSerializer(serializers.Serializer):
    delivery_person_id = serializers.CharField(max_length=64)
    pgfn_initial = serializers.IntegerField(required=False, default=0)
    normal_initial = serializers.IntegerField(required=False, default=0)
    departure_datetime = serializers.DateTimeField()
    estimated_return_date = serializers.DateField()
    description = serializers.CharField(required=False, default='', allow_blank=True)


class BatchUpdateSerializer(serializers.Serializer):
    """
    Schedule fields apply to pending batches, count fields to finalized
    ones. Unknown keys (status, initial counts, total value) are dropped.
    """

    departure_datetime = serializers.DateTimeField(required=False)
    estimated_return_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    pgfn_delivered = serializers.IntegerField(required=False)
    pgfn_returned = serializers.IntegerField(required=False)
    pgfn_absent = serializers.IntegerField(required=False)
    normal_delivered = serializers.IntegerField(required=False)
    normal_returned = serializers.IntegerField(required=False)
    normal_absent = serializers.IntegerField(required=False)


class BatchFinalizeSerializer(serializers.Serializer):
    return_datetime = serializers.DateTimeField()
    pgfn_delivered = serializers.IntegerField(required=False, default=0)
    pgfn_returned = serializers.IntegerField(required=False, default=0)
    pgfn_absent = serializers.IntegerField(required=False, default=0)
    normal_delivered = serializers.IntegerField(required=False, default=0)
    normal_returned = serializers.IntegerField(required=False, default=0)
    normal_absent = serializers.IntegerField(required=False, default=0)


# ---------------------------------------------------------------------------
# Dashboard / archive
# ---------------------------------------------------------------------------

class DashboardQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=['all', Batch.StatusChoices.PENDING, Batch.StatusChoices.FINALIZED],
        required=False, default='all',
    )
    person = serializers.CharField(required=False, default='', allow_blank=True)
    search = serializers.CharField(required=False, default='', allow_blank=True)


class ArchiveQuerySerializer(serializers.Serializer):
    person = serializers.CharField(required=False, default='', allow_blank=True)


class SystemSummarySerializer(serializers.Serializer):
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    delivered = serializers.IntegerField()
    returned = serializers.IntegerField()
    absent = serializers.IntegerField()


class CourierPerformanceSerializer(serializers.Serializer):
    person_id = serializers.CharField()
    name = serializers.CharField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    delivered = serializers.IntegerField()
    returned = serializers.IntegerField()

