"""
REST API for categories.
"""

import uuid

import pytest
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db

URL = '/api/v1/categories/'


def detail_url(category_id, action=None):
    url = f'{URL}{category_id}/'
    return f'{url}{action}/' if action else url


@pytest.fixture
def tree(api_client):
    """Resistors > SMD > 0402 and Passive Components, created over HTTP."""

    def create(name, parent=None):
        response = api_client.post(URL, {'name': name, 'parent_id': parent}, format='json')
        assert response.status_code == 201, response.data
        return response.data['id']

    resistors = create('Resistors')
    smd = create('SMD', resistors)
    r0402 = create('0402', smd)
    passive = create('Passive Components')
    return {'resistors': resistors, 'smd': smd, '0402': r0402, 'passive': passive}


class TestAuthentication:

    def test_anonymous_requests_are_rejected(self):
        response = APIClient().get(URL)
        assert response.status_code == 401


class TestCrud:

    def test_create(self, api_client, user):
        response = api_client.post(
            URL,
            {'name': 'Passive Components', 'description': 'R, C, L', 'custom_fields': {'rohs': True}},
            format='json',
        )
        assert response.status_code == 201
        data = response.data
        assert data['path'] == 'passive_components'
        assert data['depth'] == 1
        assert data['parent_id'] is None
        assert data['created_by'] == str(user.id)
        assert data['custom_fields'] == {'rohs': True}
        assert data['child_count'] == 0
        assert data['parts_count'] == 0

    def test_create_requires_name(self, api_client):
        response = api_client.post(URL, {'description': 'nameless'}, format='json')
        assert response.status_code == 400

    def test_create_duplicate(self, api_client, tree):
        response = api_client.post(URL, {'name': 'smd', 'parent_id': tree['resistors']}, format='json')
        assert response.status_code == 409
        assert response.data['error'] == 'duplicate_name'

    def test_create_under_missing_parent(self, api_client):
        response = api_client.post(URL, {'name': 'SMD', 'parent_id': str(uuid.uuid4())}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'invalid_parent'

    def test_retrieve_with_counts(self, api_client, tree):
        response = api_client.get(detail_url(tree['smd']))
        assert response.status_code == 200
        assert response.data['path'] == 'resistors.smd'
        assert response.data['child_count'] == 1

    def test_retrieve_missing(self, api_client):
        response = api_client.get(detail_url(uuid.uuid4()))
        assert response.status_code == 404
        assert response.data['error'] == 'entity_not_found'

    def test_retrieve_malformed_id(self, api_client):
        assert api_client.get(detail_url('abc')).status_code == 400

    def test_list_is_paginated_and_filtered(self, api_client, tree):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.data['count'] == 4
        assert [c['path'] for c in response.data['results']][:2] == ['passive_components', 'resistors']

        roots = api_client.get(URL, {'parent': 'root'})
        assert [c['name'] for c in roots.data['results']] == ['Passive Components', 'Resistors']

    def test_rename(self, api_client, tree):
        response = api_client.patch(detail_url(tree['smd']), {'name': 'Surface Mount'}, format='json')
        assert response.status_code == 200
        assert response.data['path'] == 'resistors.surface_mount'
        assert api_client.get(detail_url(tree['0402'])).data['path'] == 'resistors.surface_mount.0402'

    def test_delete(self, api_client, tree):
        assert api_client.delete(detail_url(tree['smd'])).status_code == 409
        assert api_client.delete(detail_url(tree['0402'])).status_code == 204
        assert api_client.get(detail_url(tree['0402'])).status_code == 404


class TestHierarchy:

    def test_move(self, api_client, tree):
        response = api_client.post(detail_url(tree['smd'], 'move'), {'parent_id': tree['passive']}, format='json')
        assert response.status_code == 200
        assert response.data['path'] == 'passive_components.smd'

        crumbs = api_client.get(detail_url(tree['0402'], 'breadcrumbs'))
        assert [c['name'] for c in crumbs.data] == ['Passive Components', 'SMD', '0402']

    def test_move_to_root(self, api_client, tree):
        response = api_client.post(detail_url(tree['smd'], 'move'), {'parent_id': None}, format='json')
        assert response.status_code == 200
        assert response.data['path'] == 'smd'

    def test_move_under_descendant(self, api_client, tree):
        response = api_client.post(detail_url(tree['smd'], 'move'), {'parent_id': tree['0402']}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'circular_reference'
        assert api_client.get(detail_url(tree['0402'])).data['path'] == 'resistors.smd.0402'

    def test_children_and_descendants(self, api_client, tree):
        children = api_client.get(detail_url(tree['resistors'], 'children'))
        assert [c['name'] for c in children.data] == ['SMD']

        descendants = api_client.get(detail_url(tree['resistors'], 'descendants'))
        assert [c['path'] for c in descendants.data] == ['resistors.smd', 'resistors.smd.0402']

        assert api_client.get(detail_url(uuid.uuid4(), 'children')).status_code == 404

    def test_tree(self, api_client, tree):
        response = api_client.get(f'{URL}tree/')
        assert response.status_code == 200
        resistors = response.data[1]
        assert resistors['name'] == 'Resistors'
        assert resistors['children'][0]['name'] == 'SMD'
        assert resistors['children'][0]['children'][0]['path'] == 'resistors.smd.0402'


class TestSearch:

    def test_search(self, api_client, tree):
        response = api_client.get(f'{URL}search/', {'q': 'res'})
        assert response.status_code == 200
        assert response.data['limit'] == 20
        assert response.data['offset'] == 0
        assert [c['name'] for c in response.data['results']] == ['Resistors']

    def test_search_window(self, api_client, tree):
        response = api_client.get(f'{URL}search/', {'limit': 2, 'offset': 1})
        assert [c['name'] for c in response.data['results']] == ['Passive Components', 'Resistors']

    def test_results_carry_parent_name(self, api_client, tree):
        response = api_client.get(f'{URL}search/', {'q': '0402'})
        assert [(c['name'], c['parent_name']) for c in response.data['results']] == [('0402', 'SMD')]

        listed = api_client.get(URL, {'parent': 'root'})
        assert {c['parent_name'] for c in listed.data['results']} == {None}


class TestCustomFieldsAndHistory:

    def test_custom_fields(self, api_client, tree):
        url = detail_url(tree['0402'], 'custom-fields')
        response = api_client.put(url, {'custom_fields': {'package': '0402', 'pins': 2}}, format='json')
        assert response.status_code == 200
        assert api_client.get(url).data == {'custom_fields': {'package': '0402', 'pins': 2}}

    def test_invalid_custom_fields(self, api_client, tree):
        url = detail_url(tree['0402'], 'custom-fields')
        response = api_client.put(url, {'custom_fields': {'pins': [1, 2]}}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'validation_error'

    def test_history(self, api_client, tree):
        api_client.patch(detail_url(tree['passive']), {'description': 'R, C, L'}, format='json')
        response = api_client.get(detail_url(tree['passive'], 'history'))
        assert response.status_code == 200
        assert [record['type'] for record in response.data] == ['~', '+']
