"""
Couriers — Django Admin Configuration

@file couriers/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from batches.admin import render_status_badge
from batches.models import Batch

from .models import DeliveryPerson


class BatchInline(admin.TabularInline):
    model = Batch
    extra = 0
    fields = ('departure_datetime', 'estimated_return_date', 'status_badge', 'total_value')
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    @admin.display(description=_('Status'))
    def status_badge(self, obj):
        if not obj.pk:
            return '—'
        return render_status_badge(obj)

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(DeliveryPerson)
class DeliveryPersonAdmin(admin.ModelAdmin):
    list_display = ('name', 'route', 'phone', 'whatsapp', 'pix', 'batch_count')
    search_fields = ('name', 'cpf', 'route', 'phone')
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('name',)
    inlines = [BatchInline]

    fieldsets = (
        (None, {
            'fields': ('id', 'name', 'cpf', 'route'),
        }),
        (_('Contact'), {
            'fields': ('address', 'phone', 'whatsapp', 'pix'),
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(description=_('Batches'))
    def batch_count(self, obj):
        return obj.batches.count()
