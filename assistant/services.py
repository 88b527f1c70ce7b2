"""
Assistant — Batch Description Generator

Drafts the free-text description of a batch through the Gemini REST API.
The assistant never raises to its caller: a missing API key or any
failure of the call yields a fixed Portuguese message instead, and the
store is never touched.

@file assistant/services.py
"""

import logging

import httpx
from django.conf import settings

logger = logging.getLogger('notis')

BASE_URL = 'https://generativelanguage.googleapis.com/v1beta/models'

SYSTEM_INSTRUCTION = (
    'You are a helpful assistant for generating concise and professional descriptions '
    "for subpoena batches for a notary's office. The generated text must be in Portuguese, "
    'objective, and professionally describe the contents of the batch.'
)

MISSING_KEY_MESSAGE = (
    'A chave de API não está configurada. Para que a funcionalidade de IA funcione, '
    'defina GEMINI_API_KEY no ambiente do servidor. Entre em contato com o suporte.'
)
FAILURE_MESSAGE = 'Erro ao gerar descrição. Por favor, tente novamente.'


def build_batch_prompt(person, pgfn_initial, normal_initial) -> str:
    return (
        'Gere uma descrição profissional para um lote de intimações para o entregador '
        f'{person.name} (rota: {person.route or "N/A"}). '
        f'O lote contém {pgfn_initial or 0} intimações PGFN e {normal_initial or 0} normais.'
    )


class DescriptionAssistant:
    """
    Thin synchronous client for ``models/{model}:generateContent``.

    ``client`` may be any ``httpx.Client``; tests pass one built on
    ``httpx.MockTransport``.
    """

    def __init__(self, api_key=None, model=None, timeout=None, client=None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.GEMINI_TIMEOUT_SECONDS
        self._client = client

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_payload(self, prompt: str) -> dict:
        return {
            'contents': [
                {'role': 'user', 'parts': [{'text': prompt}]},
            ],
            'systemInstruction': {
                'parts': [{'text': SYSTEM_INSTRUCTION}],
            },
            'generationConfig': {'temperature': 0.3},
        }

    def _extract_content(self, data) -> str:
        if not isinstance(data, dict):
            raise ValueError(f'Unexpected Gemini reply: {type(data).__name__}')
        candidates = data.get('candidates') or []
        if not candidates:
            feedback = data.get('promptFeedback')
            block_reason = feedback.get('blockReason') if isinstance(feedback, dict) else None
            logger.warning('Gemini returned no candidates (blockReason=%s).', block_reason)
            return ''
        candidate = candidates[0] if isinstance(candidates, list) else None
        content = candidate.get('content') if isinstance(candidate, dict) else None
        parts = content.get('parts') if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise ValueError('Gemini reply has no content parts')
        texts = [part.get('text') for part in parts if isinstance(part, dict)]
        return ''.join(text for text in texts if isinstance(text, str)).strip()

    def _post(self, url: str, payload: dict) -> httpx.Response:
        params = {'key': self.api_key}
        if self._client is not None:
            return self._client.post(url, params=params, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, params=params, json=payload)

    def generate(self, prompt: str) -> str:
        if not self.is_configured():
            logger.error('GEMINI_API_KEY is not configured; description not generated.')
            return MISSING_KEY_MESSAGE

        url = f'{BASE_URL}/{self.model}:generateContent'
        try:
            response = self._post(url, self._build_payload(prompt))
            response.raise_for_status()
            text = self._extract_content(response.json())
        except (httpx.HTTPError, ValueError):
            logger.exception('Gemini call failed (model=%s).', self.model)
            return FAILURE_MESSAGE

        if not text:
            return FAILURE_MESSAGE
        logger.info('Gemini description generated (model=%s, %d chars).', self.model, len(text))
        return text
