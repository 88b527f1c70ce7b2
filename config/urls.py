"""
NOTIS — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.reverse import reverse

from core.views import snapshot_export

admin.site.site_header = 'NOTIS PRO Administração'
admin.site.site_title = 'NOTIS PRO'
admin.site.index_title = 'Controle de lotes de intimações'


@api_view(['GET'])
def api_root(request, format=None):
    """NOTIS API v1 — endpoint directory."""
    return Response({
        'couriers': reverse('api-v1:couriers:person-list', request=request, format=format),
        'batches': {
            'list': reverse('api-v1:batches:batch-list', request=request, format=format),
            'dashboard': reverse('api-v1:batches:batch-dashboard', request=request, format=format),
            'archive': reverse('api-v1:batches:batch-archive', request=request, format=format),
        },
        'assistant': {
            'batch_description': reverse(
                'api-v1:assistant:batch-description', request=request, format=format,
            ),
        },
        'snapshot': reverse('api-v1:snapshot', request=request, format=format),
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('couriers/', include('couriers.urls', namespace='couriers')),
    path('batches/', include('batches.urls', namespace='batches')),
    path('assistant/', include('assistant.urls', namespace='assistant')),
    path('snapshot/', snapshot_export, name='snapshot'),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
