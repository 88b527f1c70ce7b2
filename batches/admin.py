"""
Batches — Django Admin Configuration

Batch list with delivery status badges (pending, overdue, finalized).
Reconciliation fields are read-only: counts only change through the
finalize and edit operations of BatchService.

@file batches/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Batch
from .projections import DeliveryStatus, delivery_status
from .reconciliation import COUNT_FIELDS

STATUS_COLORS = {
    DeliveryStatus.PENDING: '#f59e0b',
    DeliveryStatus.OVERDUE: '#dc2626',
    DeliveryStatus.FINALIZED: '#22c55e',
}


def render_status_badge(batch):
    current = delivery_status(batch)
    return format_html(
        '<span style="background:{};color:#fff;padding:2px 8px;'
        'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
        STATUS_COLORS[current], current.label,
    )


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = (
        'short_id', 'delivery_person', 'status_badge',
        'pgfn_initial', 'normal_initial',
        'departure_datetime', 'estimated_return_date', 'return_datetime', 'total_value',
    )
    list_filter = ('status', 'delivery_person')
    search_fields = ('id', 'delivery_person__name', 'description')
    readonly_fields = (
        'id', 'sequence', 'status', *COUNT_FIELDS, 'total_value', 'return_datetime',
        'created_at', 'updated_at',
    )
    list_select_related = ('delivery_person',)
    list_per_page = 30
    date_hierarchy = 'departure_datetime'
    ordering = ('-sequence',)

    fieldsets = (
        (_('Batch'), {
            'fields': ('id', 'sequence', 'delivery_person', 'status', 'description'),
        }),
        (_('Departure'), {
            'fields': ('pgfn_initial', 'normal_initial', 'departure_datetime', 'estimated_return_date'),
        }),
        (_('Reconciliation'), {
            'fields': (*COUNT_FIELDS, 'total_value', 'return_datetime'),
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields += ['delivery_person', 'pgfn_initial', 'normal_initial']
        return fields

    @admin.display(description=_('ID'))
    def short_id(self, obj):
        return obj.pk[:8]

    @admin.display(description=_('Status'))
    def status_badge(self, obj):
        return render_status_badge(obj)
