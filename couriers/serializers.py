"""
Couriers — Serializers

Explicit field lists; no __all__.

@file couriers/serializers.py
"""

from rest_framework import serializers

from .models import DeliveryPerson

__all__ = [
    'DeliveryPersonReadSerializer',
    'DeliveryPersonWriteSerializer',
    'DeliveryPersonMinimalSerializer',
    'CourierProfileSerializer',
]


class DeliveryPersonReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPerson
        fields = [
            'id', 'name', 'cpf', 'address', 'phone', 'whatsapp', 'pix', 'route',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class DeliveryPersonMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPerson
        fields = ['id', 'name', 'route']
        read_only_fields = fields


class DeliveryPersonWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPerson
        fields = ['name', 'cpf', 'address', 'phone', 'whatsapp', 'pix', 'route']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value


class CourierProfileSerializer(serializers.Serializer):
    person = DeliveryPersonReadSerializer(read_only=True)
    delivered = serializers.IntegerField(read_only=True)
    returned = serializers.IntegerField(read_only=True)
    pending_batches = serializers.IntegerField(read_only=True)
