"""
Couriers — Views

Roster CRUD and the courier profile. Deleting a courier also deletes
every batch assigned to them.

@file couriers/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from batches.models import Batch
from batches.reports import courier_profile

from .models import DeliveryPerson, sort_by_name
from .serializers import (
    CourierProfileSerializer,
    DeliveryPersonReadSerializer,
    DeliveryPersonWriteSerializer,
)
from .services import OPTIONAL_FIELDS, DeliveryPersonService


class DeliveryPersonViewSet(viewsets.ModelViewSet):
    """
    CRUD for delivery people.

    Profile: lifetime delivered/returned totals and pending batch count.
    """

    search_fields = ['name', 'route', 'cpf']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return DeliveryPerson.objects.all()

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve', 'profile'):
            return DeliveryPersonReadSerializer
        return DeliveryPersonWriteSerializer

    def list(self, request, *args, **kwargs):
        people = self.filter_queryset(self.get_queryset())
        if not request.query_params.get('ordering'):
            people = sort_by_name(people)
        page = self.paginate_queryset(people)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(people, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        person = DeliveryPersonService.create_person(**serializer.validated_data)
        return Response(
            DeliveryPersonReadSerializer(person, context={'request': request}).data,
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        if not partial:
            # PUT replaces the record: omitted optional fields are cleared.
            fields = {**{name: '' for name in OPTIONAL_FIELDS}, **fields}
        person = DeliveryPersonService.update_person(person_id=instance.pk, **fields)
        return Response(DeliveryPersonReadSerializer(person, context={'request': request}).data)

    def perform_destroy(self, instance):
        DeliveryPersonService.delete_person(person_id=instance.pk)

    @action(detail=True, methods=['get'], url_path='profile')
    def profile(self, request, pk=None):
        person = self.get_object()
        stats = courier_profile(person, Batch.objects.filter(delivery_person=person))
        data = {
            'person': person,
            'delivered': stats.delivered,
            'returned': stats.returned,
            'pending_batches': stats.pending_batches,
        }
        return Response(CourierProfileSerializer(data, context={'request': request}).data)
