"""
Assistant — Views

@file assistant/views.py
"""

from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import UnknownPersonError
from couriers.models import DeliveryPerson

from .serializers import BatchDescriptionRequestSerializer, BatchDescriptionSerializer
from .services import DescriptionAssistant, build_batch_prompt


@api_view(['POST'])
def batch_description(request):
    """Suggest a description for a batch about to be dispatched."""
    ser = BatchDescriptionRequestSerializer(data=request.data)
    ser.is_valid(raise_exception=True)

    person = DeliveryPerson.objects.filter(pk=ser.validated_data['delivery_person_id']).first()
    if person is None:
        raise UnknownPersonError()

    prompt = build_batch_prompt(
        person, ser.validated_data['pgfn_initial'], ser.validated_data['normal_initial'],
    )
    description = DescriptionAssistant().generate(prompt)
    return Response(BatchDescriptionSerializer({'description': description}).data)
