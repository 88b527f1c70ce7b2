"""
Tests — DeliveryPerson model.

@file couriers/tests/test_models.py
"""

import pytest

from couriers.models import DeliveryPerson
from tests.factories import DeliveryPersonFactory


pytestmark = pytest.mark.django_db


class TestDeliveryPersonModel:

    def test_str_is_name(self):
        assert str(DeliveryPersonFactory(name='Ana')) == 'Ana'

    def test_optional_fields_default_blank(self):
        person = DeliveryPerson.objects.create(name='Só Nome')
        assert person.cpf == person.pix == person.route == ''

    def test_ids_are_unique(self):
        first, second = DeliveryPersonFactory.create_batch(2)
        assert first.pk != second.pk

    def test_explicit_id_is_kept(self):
        person = DeliveryPerson.objects.create(id='1718000000000', name='Importado')
        assert DeliveryPerson.objects.get(pk='1718000000000') == person
