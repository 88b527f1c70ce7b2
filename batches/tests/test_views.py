"""
Tests — Batches API endpoints.

@file batches/tests/test_views.py
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from batches.models import Batch
from tests.factories import BatchFactory, DeliveryPersonFactory, FinalizedBatchFactory


pytestmark = pytest.mark.django_db


class TestBatchListCreate:

    def test_list_batches_newest_first(self, api_client):
        first = BatchFactory()
        second = BatchFactory()
        resp = api_client.get(reverse('api-v1:batches:batch-list'))
        assert resp.status_code == 200
        assert [row['id'] for row in resp.data['results']] == [second.pk, first.pk]

    def test_list_envelope(self, api_client):
        BatchFactory()
        resp = api_client.get(reverse('api-v1:batches:batch-list'))
        body = resp.json()
        assert body['success'] is True
        assert body['meta']['count'] == 1
        assert len(body['data']) == 1

    def test_create_batch(self, api_client, person):
        data = {
            'delivery_person_id': person.pk,
            'pgfn_initial': 5,
            'normal_initial': 2,
            'departure_datetime': timezone.now().isoformat(),
            'estimated_return_date': str(timezone.localdate() + timedelta(days=2)),
            'description': 'Rota centro',
        }
        resp = api_client.post(reverse('api-v1:batches:batch-list'), data, format='json')
        assert resp.status_code == 201
        assert resp.data['status'] == 'pending'
        assert resp.data['delivery_status'] == 'pending'
        assert resp.data['delivery_person_detail']['name'] == 'Ana Souza'
        assert resp.data['total_value'] is None

    def test_create_empty_batch_rejected(self, api_client, person):
        data = {
            'delivery_person_id': person.pk,
            'departure_datetime': timezone.now().isoformat(),
            'estimated_return_date': str(timezone.localdate()),
        }
        resp = api_client.post(reverse('api-v1:batches:batch-list'), data, format='json')
        assert resp.status_code == 400
        assert resp.data['success'] is False
        assert resp.data['code'] == 'INVALID_BATCH'
        assert 'pgfn_initial' in resp.data['errors']
        assert Batch.objects.count() == 0

    def test_create_with_unknown_person(self, api_client):
        data = {
            'delivery_person_id': 'ghost',
            'pgfn_initial': 1,
            'departure_datetime': timezone.now().isoformat(),
            'estimated_return_date': str(timezone.localdate()),
        }
        resp = api_client.post(reverse('api-v1:batches:batch-list'), data, format='json')
        assert resp.status_code == 400
        assert resp.data['code'] == 'UNKNOWN_PERSON'
        assert 'delivery_person_id' in resp.data['errors']

    def test_create_missing_fields(self, api_client):
        resp = api_client.post(reverse('api-v1:batches:batch-list'), {}, format='json')
        assert resp.status_code == 400
        assert resp.data['code'] == 'VALIDATION_ERROR'
        assert 'departure_datetime' in resp.data['errors']

    def test_overdue_batch_flagged(self, api_client):
        batch = BatchFactory(estimated_return_date=timezone.localdate() - timedelta(days=1))
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': batch.pk})
        resp = api_client.get(url)
        assert resp.status_code == 200
        assert resp.data['delivery_status'] == 'overdue'

    def test_retrieve_missing_batch(self, api_client):
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': 'missing'})
        resp = api_client.get(url)
        assert resp.status_code == 404
        assert resp.data['code'] == 'RESOURCE_NOT_FOUND'


class TestBatchFinalize:

    def _url(self, batch):
        return reverse('api-v1:batches:batch-finalize', kwargs={'pk': batch.pk})

    def test_finalize_batch(self, api_client):
        batch = BatchFactory(pgfn_initial=7, normal_initial=4)
        data = {
            'return_datetime': timezone.now().isoformat(),
            'pgfn_delivered': 7,
            'normal_returned': 2,
            'normal_absent': 2,
        }
        resp = api_client.post(self._url(batch), data, format='json')
        assert resp.status_code == 200
        assert resp.data['status'] == 'finalized'
        assert resp.data['delivery_status'] == 'finalized'
        assert Decimal(str(resp.data['total_value'])) == Decimal('27')

    def test_finalize_unbalanced(self, api_client):
        batch = BatchFactory(pgfn_initial=7, normal_initial=4)
        data = {'return_datetime': timezone.now().isoformat(), 'pgfn_delivered': 6}
        resp = api_client.post(self._url(batch), data, format='json')
        assert resp.status_code == 400
        assert resp.data['code'] == 'CONSERVATION_VIOLATION'
        assert set(resp.data['errors']) == {'pgfn', 'normal'}
        batch.refresh_from_db()
        assert batch.status == Batch.StatusChoices.PENDING

    def test_finalize_twice(self, api_client):
        batch = FinalizedBatchFactory()
        data = {'return_datetime': timezone.now().isoformat(), 'pgfn_delivered': 5, 'normal_delivered': 3}
        resp = api_client.post(self._url(batch), data, format='json')
        assert resp.status_code == 409
        assert resp.data['code'] == 'ALREADY_FINALIZED'

    def test_finalize_requires_return_datetime(self, api_client):
        batch = BatchFactory()
        resp = api_client.post(self._url(batch), {'pgfn_delivered': 5}, format='json')
        assert resp.status_code == 400
        assert 'return_datetime' in resp.data['errors']


class TestBatchUpdateDelete:

    def test_patch_pending_description(self, api_client):
        batch = BatchFactory()
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': batch.pk})
        resp = api_client.patch(url, {'description': 'Nova rota'}, format='json')
        assert resp.status_code == 200
        assert resp.data['description'] == 'Nova rota'

    def test_patch_finalized_counts(self, api_client):
        batch = FinalizedBatchFactory()
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': batch.pk})
        resp = api_client.patch(url, {'normal_absent': 0, 'normal_delivered': 2}, format='json')
        assert resp.status_code == 200
        assert Decimal(str(resp.data['total_value'])) == Decimal('24')

    def test_patch_finalized_unbalanced(self, api_client):
        batch = FinalizedBatchFactory()
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': batch.pk})
        resp = api_client.patch(url, {'normal_absent': 5}, format='json')
        assert resp.status_code == 400
        assert resp.data['code'] == 'CONSERVATION_VIOLATION'

    def test_delete_batch(self, api_client):
        batch = BatchFactory()
        url = reverse('api-v1:batches:batch-detail', kwargs={'pk': batch.pk})
        resp = api_client.delete(url)
        assert resp.status_code == 204
        assert not Batch.objects.filter(pk=batch.pk).exists()


class TestDashboardArchive:

    def test_dashboard_splits_active_and_archived(self, api_client):
        pending = BatchFactory()
        recent = FinalizedBatchFactory()
        old = FinalizedBatchFactory(return_datetime=timezone.now() - timedelta(days=5))

        resp = api_client.get(reverse('api-v1:batches:batch-dashboard'))
        assert resp.status_code == 200
        ids = {row['id'] for row in resp.data['batches']}
        assert ids == {pending.pk, recent.pk}
        assert old.pk not in ids

        archive = api_client.get(reverse('api-v1:batches:batch-archive'))
        assert [row['id'] for row in archive.data] == [old.pk]

    def test_dashboard_summary_ignores_filters(self, api_client):
        ana = DeliveryPersonFactory(name='Ana')
        bruno = DeliveryPersonFactory(name='Bruno')
        FinalizedBatchFactory(delivery_person=ana)
        BatchFactory(delivery_person=bruno)

        url = reverse('api-v1:batches:batch-dashboard')
        resp = api_client.get(url, {'status': 'pending'})
        assert resp.status_code == 200
        assert len(resp.data['batches']) == 1
        assert resp.data['batches'][0]['delivery_person'] == bruno.pk
        assert Decimal(str(resp.data['summary']['total_value'])) == Decimal('21')
        assert [row['name'] for row in resp.data['performance']] == ['Ana', 'Bruno']
        assert resp.data['performance'][1]['delivered'] == 0

    def test_dashboard_search(self, api_client):
        BatchFactory(delivery_person=DeliveryPersonFactory(name='Carla Dias'))
        BatchFactory(delivery_person=DeliveryPersonFactory(name='Bruno Lima'))
        resp = api_client.get(reverse('api-v1:batches:batch-dashboard'), {'search': 'carla'})
        assert [row['delivery_person_detail']['name'] for row in resp.data['batches']] == ['Carla Dias']

    def test_dashboard_rejects_unknown_status(self, api_client):
        resp = api_client.get(reverse('api-v1:batches:batch-dashboard'), {'status': 'lost'})
        assert resp.status_code == 400

    def test_archive_person_filter(self, api_client):
        long_ago = timezone.now() - timedelta(days=30)
        mine = FinalizedBatchFactory(return_datetime=long_ago)
        FinalizedBatchFactory(return_datetime=long_ago)
        resp = api_client.get(
            reverse('api-v1:batches:batch-archive'), {'person': mine.delivery_person_id},
        )
        assert [row['id'] for row in resp.data] == [mine.pk]
