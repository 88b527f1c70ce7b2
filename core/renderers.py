"""
Core — Response Renderer

Wraps successful responses in the standard envelope:
  { "success": true, "data": ..., "meta": ... }
Error responses are already enveloped by standard_exception_handler.

@file core/renderers.py
"""

from rest_framework.renderers import JSONRenderer


class StandardJSONRenderer(JSONRenderer):
    """Wraps successful API responses in a consistent envelope."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get('response')
        already_wrapped = isinstance(data, dict) and 'success' in data

        if data is None or already_wrapped or (response is not None and response.status_code >= 400):
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'results' in data:
            envelope = {
                'success': True,
                'data': data['results'],
                'meta': {key: data.get(key) for key in ('count', 'next', 'previous')},
            }
        else:
            envelope = {'success': True, 'data': data}

        return super().render(envelope, accepted_media_type, renderer_context)
