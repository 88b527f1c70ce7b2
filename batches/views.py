"""
Batches — Views

Batch CRUD, the finalize transition, and the two read-side screens:
the dashboard (Active batches with summary and courier performance) and
the archive (batches returned more than ARCHIVE_DELAY_DAYS ago).

@file batches/views.py
"""

from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Batch
from .projections import filter_batches, partition_batches
from .reports import courier_performance, load_store_snapshot, summarize_batches
from .serializers import (
    ArchiveQuerySerializer,
    BatchCreateSerializer,
    BatchFinalizeSerializer,
    BatchReadSerializer,
    BatchUpdateSerializer,
    CourierPerformanceSerializer,
    DashboardQuerySerializer,
    SystemSummarySerializer,
)
from .services import BatchService


class BatchViewSet(viewsets.ModelViewSet):
    """
    CRUD and lifecycle actions for notification batches.

    Finalize: POST return datetime and the six reconciliation counts.
    Dashboard and archive are recomputed from the whole store on each call.
    """

    filterset_fields = ['status', 'delivery_person']
    search_fields = ['id', 'delivery_person__name', 'description']
    ordering_fields = ['sequence', 'departure_datetime', 'return_datetime']
    ordering = ['-sequence']

    def get_queryset(self):
        return Batch.objects.select_related('delivery_person')

    def get_serializer_class(self):
        if self.action == 'create':
            return BatchCreateSerializer
        if self.action in ('update', 'partial_update'):
            return BatchUpdateSerializer
        if self.action == 'finalize':
            return BatchFinalizeSerializer
        return BatchReadSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['today'] = timezone.localdate()
        return context

    def _read(self, batch_or_batches, many=False):
        return BatchReadSerializer(batch_or_batches, many=many, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        batch = BatchService.create_batch(**serializer.validated_data)
        return Response(self._read(batch), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        batch = BatchService.update_batch(batch_id=kwargs['pk'], **serializer.validated_data)
        return Response(self._read(batch))

    def destroy(self, request, *args, **kwargs):
        BatchService.delete_batch(batch_id=kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='finalize')
    def finalize(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        counts = dict(serializer.validated_data)
        return_datetime = counts.pop('return_datetime')
        batch = BatchService.finalize_batch(
            batch_id=pk,
            return_datetime=return_datetime,
            counts=counts,
        )
        return Response(self._read(batch))

    @action(detail=False, methods=['get'], url_path='dashboard')
    def dashboard(self, request):
        """
        Active batches after the status/person/search filters. Summary and
        performance always cover the whole Active set.
        """
        query = DashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        people, batches = load_store_snapshot()
        active = partition_batches(batches).active
        shown = filter_batches(
            active,
            status=query.validated_data['status'],
            person_id=query.validated_data['person'] or None,
            search=query.validated_data['search'] or None,
        )
        return Response({
            'batches': self._read(shown, many=True),
            'summary': SystemSummarySerializer(summarize_batches(active)).data,
            'performance': CourierPerformanceSerializer(
                courier_performance(active, people), many=True,
            ).data,
        })

    @action(detail=False, methods=['get'], url_path='archive')
    def archive(self, request):
        query = ArchiveQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        _, batches = load_store_snapshot()
        archived = filter_batches(
            partition_batches(batches).archived,
            person_id=query.validated_data['person'] or None,
        )
        return Response(self._read(archived, many=True))
