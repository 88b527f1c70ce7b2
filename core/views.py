"""
Core — Views

@file core/views.py
"""

from rest_framework.decorators import api_view
from rest_framework.response import Response

from .snapshot import SnapshotService


@api_view(['GET'])
def snapshot_export(request):
    """Current people and batches in snapshot layout."""
    return Response(SnapshotService.export())
