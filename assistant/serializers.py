"""
Assistant — Serializers

@file assistant/serializers.py
"""

from rest_framework import serializers


class BatchDescriptionRequestSerializer(serializers.Serializer):
    delivery_person_id = serializers.CharField(max_length=64)
    pgfn_initial = serializers.IntegerField(required=False, default=0, min_value=0)
    normal_initial = serializers.IntegerField(required=False, default=0, min_value=0)


class BatchDescriptionSerializer(serializers.Serializer):
    description = serializers.CharField(read_only=True)
