"""
Core — Exception Handling

Domain exceptions raised by the service layer and the DRF exception
handler that turns them into consistent API error envelopes.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('notis')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InvalidStateTransition(BusinessRuleViolation):
    """Raised when a lifecycle transition is not allowed."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid state transition.'
    default_code = 'INVALID_STATE_TRANSITION'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


class InvalidBatchError(BusinessRuleViolation):
    """A new batch must entrust at least one document, with no negative count."""
    default_detail = 'Add at least one notification (PGFN or normal).'
    default_code = 'INVALID_BATCH'


class UnknownPersonError(BusinessRuleViolation):
    """A batch references a delivery person that does not exist."""
    default_detail = {'delivery_person_id': ['Select an existing delivery person.']}
    default_code = 'UNKNOWN_PERSON'


class AlreadyFinalizedError(InvalidStateTransition):
    default_detail = 'Batch is already finalized.'
    default_code = 'ALREADY_FINALIZED'


class ConservationViolation(BusinessRuleViolation):
    """
    Reconciled counts do not add up to the entrusted counts, or contain
    an invalid value.

    ``categories`` names the unbalanced document categories ('pgfn',
    'normal'); ``detail`` maps each category or count field to its message.
    """
    default_detail = 'Delivered, returned and absent counts must add up to the initial counts.'
    default_code = 'CONSERVATION_VIOLATION'

    def __init__(self, errors=None, categories=()):
        super().__init__(detail=errors or self.default_detail, code=self.default_code)
        self.categories = tuple(categories)


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, ValidationError):
        data = {
            'success': False,
            'errors': exc.message_dict if hasattr(exc, 'error_dict') else {'detail': exc.messages},
            'code': 'VALIDATION_ERROR',
        }
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DRFValidationError):
        code = 'VALIDATION_ERROR'
    else:
        code = getattr(exc, 'default_code', 'ERROR')
    if isinstance(response.data, dict):
        errors = response.data
    elif isinstance(response.data, list):
        errors = {'detail': response.data}
    else:
        errors = {'detail': [str(response.data)]}

    response.data = {
        'success': False,
        'errors': errors,
        'code': code,
    }
    return response
