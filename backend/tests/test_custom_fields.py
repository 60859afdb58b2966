"""
Custom field values of categories.
"""

import uuid
from datetime import date

import pytest

from domain.shared.exceptions import EntityNotFoundException, ValidationException
from infrastructure.persistence.models import CategoryCustomField

pytestmark = pytest.mark.django_db


def test_replace_and_read(service, make_category, user):
    category = make_category('Resistors')
    stored = service.update_category_custom_fields(
        category.id,
        {'package': '0402', 'pins': 2, 'rohs': True, 'introduced': date(2023, 5, 1)},
        user.id,
    )
    expected = {'package': '0402', 'pins': 2, 'rohs': True, 'introduced': '2023-05-01'}
    assert stored == expected
    assert service.get_category_custom_fields(category.id) == expected
    assert service.get_category(category.id, with_details=True).custom_fields == expected


def test_data_types_are_stored(service, make_category):
    category = make_category('Resistors')
    service.update_category_custom_fields(category.id, {'rohs': False, 'pins': 8})
    stored = dict(CategoryCustomField.objects.filter(category_id=category.id).values_list('field_name', 'data_type'))
    assert stored == {'rohs': 'boolean', 'pins': 'number'}


def test_replace_drops_previous_fields(service, make_category):
    category = make_category('Resistors', custom_fields={'package': '0402', 'pins': 2})
    service.update_category_custom_fields(category.id, {'tolerance': 0.01})
    assert service.get_category_custom_fields(category.id) == {'tolerance': 0.01}


def test_none_values_are_skipped(service, make_category):
    category = make_category('Resistors')
    assert service.update_category_custom_fields(category.id, {'package': None, 'pins': 2}) == {'pins': 2}


def test_replace_stamps_category(service, make_category, user):
    category = make_category('Resistors')
    service.update_category_custom_fields(category.id, {'pins': 2}, user.id)
    reloaded = service.get_category(category.id)
    assert reloaded.updated_by == user.id
    assert reloaded.version == category.version + 1


def test_invalid_value_leaves_fields_untouched(service, make_category):
    category = make_category('Resistors', custom_fields={'package': '0402'})
    with pytest.raises(ValidationException):
        service.update_category_custom_fields(category.id, {'package': '0603', 'dimensions': {'w': 1}})
    assert service.get_category_custom_fields(category.id) == {'package': '0402'}


def test_non_mapping_is_rejected(service, make_category):
    category = make_category('Resistors')
    with pytest.raises(ValidationException):
        service.update_category_custom_fields(category.id, ['package'])


def test_unknown_category(service):
    with pytest.raises(EntityNotFoundException):
        service.get_category_custom_fields(uuid.uuid4())
    with pytest.raises(EntityNotFoundException):
        service.update_category_custom_fields(uuid.uuid4(), {'pins': 2})
