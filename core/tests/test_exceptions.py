"""
Core — Exception Handler Tests

@file core/tests/test_exceptions.py
"""

from django.core.exceptions import ValidationError
from django.http import Http404
from rest_framework.exceptions import ValidationError as DRFValidationError

from core.exceptions import (
    AlreadyFinalizedError,
    ConservationViolation,
    InvalidBatchError,
    UnknownPersonError,
    standard_exception_handler,
)


class TestStandardExceptionHandler:
    def test_domain_error_envelope(self):
        resp = standard_exception_handler(InvalidBatchError(), {})
        assert resp.status_code == 400
        assert resp.data['success'] is False
        assert resp.data['code'] == 'INVALID_BATCH'
        assert 'detail' in resp.data['errors']

    def test_conservation_violation_keeps_field_errors(self):
        exc = ConservationViolation(errors={'pgfn': 'The PGFN total must be 5.'}, categories=['pgfn'])
        resp = standard_exception_handler(exc, {})
        assert resp.status_code == 400
        assert resp.data['code'] == 'CONSERVATION_VIOLATION'
        assert str(resp.data['errors']['pgfn']) == 'The PGFN total must be 5.'
        assert exc.categories == ('pgfn',)

    def test_unknown_person_points_at_field(self):
        resp = standard_exception_handler(UnknownPersonError(), {})
        assert resp.data['code'] == 'UNKNOWN_PERSON'
        assert 'delivery_person_id' in resp.data['errors']

    def test_already_finalized_is_conflict(self):
        resp = standard_exception_handler(AlreadyFinalizedError(), {})
        assert resp.status_code == 409
        assert resp.data['code'] == 'ALREADY_FINALIZED'

    def test_http404_becomes_not_found(self):
        resp = standard_exception_handler(Http404(), {})
        assert resp.status_code == 404
        assert resp.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_django_validation_error(self):
        resp = standard_exception_handler(ValidationError({'name': ['This field cannot be blank.']}), {})
        assert resp.status_code == 400
        assert resp.data['code'] == 'VALIDATION_ERROR'
        assert resp.data['errors'] == {'name': ['This field cannot be blank.']}

    def test_drf_validation_error(self):
        resp = standard_exception_handler(DRFValidationError({'name': ['Required.']}), {})
        assert resp.data['code'] == 'VALIDATION_ERROR'
        assert 'name' in resp.data['errors']

    def test_unhandled_error_is_500(self, caplog):
        resp = standard_exception_handler(RuntimeError('boom'), {})
        assert resp.status_code == 500
        assert resp.data['code'] == 'INTERNAL_ERROR'
        assert 'boom' in caplog.text
