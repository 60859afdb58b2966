"""
Shared fixtures for the category engine tests.
"""

import uuid

import pytest
from rest_framework.test import APIClient

from application.catalog import build_category_service
from infrastructure.persistence.models import PartVersionCategory
from infrastructure.persistence.repositories import DjangoCategoryRepository


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='engineer', password='secret')


@pytest.fixture
def repository():
    return DjangoCategoryRepository()


@pytest.fixture
def service(repository):
    return build_category_service(repository, max_depth=32)


@pytest.fixture
def make_category(service, user):
    """Create a category under `parent` (a Category record or None)."""

    def make(name, parent=None, **kwargs):
        return service.create_category(
            name,
            created_by=user.id,
            parent_id=parent.id if parent else None,
            **kwargs
        )

    return make


@pytest.fixture
def passive_tree(make_category):
    """Resistors > SMD > 0402 plus an empty Passive Components root."""
    resistors = make_category('Resistors')
    smd = make_category('SMD', resistors)
    r0402 = make_category('0402', smd)
    passive = make_category('Passive Components')
    return {'resistors': resistors, 'smd': smd, '0402': r0402, 'passive': passive}


@pytest.fixture
def reference_part():
    """Attach a part version to a category."""

    def reference(category, part_version_id=None):
        return PartVersionCategory.objects.create(
            part_version_id=part_version_id or uuid.uuid4(),
            category_id=category.id,
        )

    return reference


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def snapshot_paths(repository):
    """Callable returning {id: path} of every live category."""

    def snapshot():
        return {category.id: category.path for category in repository.list_all()}

    return snapshot
