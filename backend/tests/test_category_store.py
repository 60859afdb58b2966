"""
Create, update and delete of categories.
"""

import uuid

import pytest

from domain.shared.exceptions import (
    DuplicateNameException,
    EntityNotFoundException,
    HasChildrenException,
    InvalidParentException,
    ReferencedByPartsException,
    ValidationException,
)
from infrastructure.persistence.models import Category as CategoryModel, CategoryCustomField

pytestmark = pytest.mark.django_db


class TestCreate:

    def test_root_path_is_sanitized_name(self, make_category, user):
        category = make_category('Passive Components', description='R, C, L')
        assert category.path == 'passive_components'
        assert category.label == 'passive_components'
        assert category.parent_id is None
        assert category.description == 'R, C, L'
        assert category.is_public is True
        assert category.created_by == user.id
        assert category.version == 1

    def test_child_path_extends_parent_path(self, make_category):
        resistors = make_category('Resistors')
        smd = make_category('SMD', resistors)
        r0402 = make_category('0402', smd)
        assert smd.path == 'resistors.smd'
        assert r0402.path == 'resistors.smd.0402'
        assert r0402.parent_id == smd.id

    def test_name_is_stripped(self, make_category):
        assert make_category('  Resistors  ').name == 'Resistors'

    def test_blank_name_is_rejected(self, make_category):
        with pytest.raises(ValidationException):
            make_category('   ')

    def test_missing_parent(self, service):
        with pytest.raises(InvalidParentException):
            service.create_category('SMD', parent_id=uuid.uuid4())

    def test_deleted_parent_is_invalid(self, service, make_category):
        resistors = make_category('Resistors')
        service.delete_category(resistors.id)
        with pytest.raises(InvalidParentException):
            make_category('SMD', resistors)

    def test_sibling_labels_are_unique(self, make_category):
        resistors = make_category('Resistors')
        make_category('SMD', resistors)
        with pytest.raises(DuplicateNameException):
            make_category('smd', resistors)

    def test_names_that_sanitize_alike_collide(self, make_category):
        make_category('Passive Components')
        with pytest.raises(DuplicateNameException):
            make_category('Passive-Components')

    def test_same_label_under_different_parents(self, make_category):
        resistors = make_category('Resistors')
        capacitors = make_category('Capacitors')
        assert make_category('SMD', resistors).path == 'resistors.smd'
        assert make_category('SMD', capacitors).path == 'capacitors.smd'

    def test_deleted_category_frees_its_label(self, service, make_category):
        first = make_category('Obsolete')
        service.delete_category(first.id)
        second = make_category('Obsolete')
        assert second.path == 'obsolete'
        assert second.id != first.id

    def test_constraint_backs_up_proactive_check(self, service, repository, monkeypatch):
        service.create_category('Resistors')
        monkeypatch.setattr(repository, 'label_exists', lambda *args, **kwargs: False)
        with pytest.raises(DuplicateNameException):
            service.create_category('Resistors')
        assert CategoryModel.objects.filter(label='resistors').count() == 1

    def test_depth_limit(self, repository, user):
        from application.catalog import build_category_service

        shallow = build_category_service(repository, max_depth=2)
        top = shallow.create_category('Top')
        middle = shallow.create_category('Middle', parent_id=top.id)
        with pytest.raises(ValidationException):
            shallow.create_category('Bottom', parent_id=middle.id)

    def test_path_length_limit(self, make_category):
        parent = None
        for _ in range(8):
            parent = make_category('x' * 255, parent)
        assert len(parent.path) == 2047

        with pytest.raises(ValidationException) as excinfo:
            make_category('y', parent)
        assert excinfo.value.details['field'] == 'name'
        assert not CategoryModel.objects.filter(name='y').exists()

    def test_parent_name_is_returned(self, make_category, passive_tree):
        category = make_category('0603', passive_tree['smd'])
        assert category.parent_name == 'SMD'
        assert make_category('Capacitors').parent_name is None

    def test_custom_fields_are_written_with_the_category(self, service, make_category):
        category = make_category('Resistors', custom_fields={'package': '0402', 'pins': 2, 'note': None})
        assert category.custom_fields == {'package': '0402', 'pins': 2}
        assert service.get_category_custom_fields(category.id) == {'package': '0402', 'pins': 2}

    def test_invalid_custom_fields_abort_creation(self, make_category):
        with pytest.raises(ValidationException):
            make_category('Resistors', custom_fields={'values': [1, 2, 3]})
        assert not CategoryModel.objects.exists()

    def test_failed_custom_field_write_rolls_back_category(self, make_category, repository, monkeypatch):
        from domain.shared.exceptions import StoreException

        def fail(*args, **kwargs):
            raise StoreException('replace_custom_fields', 'disk full')

        monkeypatch.setattr(repository, 'replace_custom_fields', fail)
        with pytest.raises(StoreException):
            make_category('Resistors', custom_fields={'package': '0402'})
        assert not CategoryModel.all_objects.exists()
        assert not CategoryCustomField.objects.exists()


class TestUpdate:

    def test_plain_attributes(self, service, make_category, user):
        category = make_category('Resistors')
        updated = service.update_category(
            category.id, {'description': 'Fixed resistors', 'is_public': False}, user.id
        )
        assert updated.description == 'Fixed resistors'
        assert updated.is_public is False
        assert updated.path == 'resistors'
        assert updated.version == 2

    def test_rename_rewrites_subtree(self, service, passive_tree, repository):
        service.update_category(passive_tree['resistors'].id, {'name': 'Fixed Resistors'})

        assert repository.get_by_id(passive_tree['resistors'].id).path == 'fixed_resistors'
        assert repository.get_by_id(passive_tree['smd'].id).path == 'fixed_resistors.smd'
        assert repository.get_by_id(passive_tree['0402'].id).path == 'fixed_resistors.smd.0402'
        assert repository.get_by_id(passive_tree['passive'].id).path == 'passive_components'

    def test_rename_keeping_label_only_changes_name(self, service, passive_tree, repository):
        updated = service.update_category(passive_tree['smd'].id, {'name': 'smd'})
        assert updated.name == 'smd'
        assert updated.path == 'resistors.smd'
        assert repository.get_by_id(passive_tree['0402'].id).path == 'resistors.smd.0402'

    def test_rename_to_sibling_label(self, service, make_category, snapshot_paths):
        resistors = make_category('Resistors')
        make_category('SMD', resistors)
        tht = make_category('THT', resistors)
        before = snapshot_paths()
        with pytest.raises(DuplicateNameException):
            service.update_category(tht.id, {'name': 'Smd'})
        assert snapshot_paths() == before

    def test_unknown_field(self, service, make_category):
        category = make_category('Resistors')
        with pytest.raises(ValidationException):
            service.update_category(category.id, {'path': 'hacked'})

    def test_missing_category(self, service):
        with pytest.raises(EntityNotFoundException):
            service.update_category(uuid.uuid4(), {'description': 'x'})

    def test_invalid_identifier(self, service):
        with pytest.raises(ValidationException):
            service.update_category('42', {'description': 'x'})


class TestDelete:

    def test_leaf_is_soft_deleted(self, service, make_category, user):
        category = make_category('Obsolete')
        service.delete_category(category.id, user.id)

        row = CategoryModel.all_objects.get(pk=category.id)
        assert row.deleted_at is not None
        assert row.deleted_by_id == user.id
        with pytest.raises(EntityNotFoundException):
            service.get_category(category.id)

    def test_category_with_children(self, service, passive_tree):
        with pytest.raises(HasChildrenException) as exc_info:
            service.delete_category(passive_tree['smd'].id)
        assert exc_info.value.details['child_count'] == 1

    def test_category_referenced_by_parts(self, service, make_category, reference_part):
        category = make_category('Resistors')
        reference_part(category)
        with pytest.raises(ReferencedByPartsException):
            service.delete_category(category.id)
        assert service.get_category(category.id).id == category.id

    def test_parent_can_be_deleted_after_its_children(self, service, passive_tree):
        service.delete_category(passive_tree['0402'].id)
        service.delete_category(passive_tree['smd'].id)
        service.delete_category(passive_tree['resistors'].id)
        assert [c.name for c in service.list_categories()] == ['Passive Components']

    def test_missing_category(self, service):
        with pytest.raises(EntityNotFoundException):
            service.delete_category(uuid.uuid4())
