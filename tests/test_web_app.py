"""
Tests for the Flask web interface.
"""

import pytest

from web_interface.app import app


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def print_workspace(message='hi'):
    return {'blocks': [{
        'kind': 'text_print',
        'inputs': {'TEXT': {'kind': 'text', 'fields': {'TEXT': message}}},
    }]}


class TestGenerate:
    """Test cases for POST /api/generate."""

    def test_generate(self, client):
        response = client.post('/api/generate', json={'workspace': print_workspace()})
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert 'debug("{s}", .{ "hi" });' in data['code']

    def test_config_overrides(self, client):
        response = client.post('/api/generate', json={
            'workspace': print_workspace(),
            'config': {'indent_unit': '  '},
        })
        assert response.status_code == 200
        assert '\n  debug(' in response.get_json()['code']

    def test_missing_workspace(self, client):
        response = client.post('/api/generate', json={'blocks': []})
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_not_json(self, client):
        response = client.post('/api/generate', data='hello', content_type='text/plain')
        assert response.status_code == 400

    def test_unknown_kind(self, client):
        response = client.post('/api/generate', json={
            'workspace': {'blocks': [{'kind': 'robot_dance', 'id': 'b1'}]}})
        assert response.status_code == 422
        data = response.get_json()
        assert data['kind'] == 'robot_dance'
        assert data['node_id'] == 'b1'

    def test_unknown_config_key(self, client):
        response = client.post('/api/generate', json={
            'workspace': print_workspace(), 'config': {'colour': 'red'}})
        assert response.status_code == 422
        assert 'colour' in response.get_json()['error']

    def test_non_text_prefix(self, client):
        response = client.post('/api/generate', json={
            'workspace': print_workspace(), 'config': {'statement_prefix': 5}})
        assert response.status_code == 422
        assert 'statement_prefix' in response.get_json()['error']

    def test_bad_repeat_count(self, client):
        workspace = {'blocks': [{'kind': 'controls_repeat_ext', 'id': 'r1',
                                 'fields': {'TIMES': 'abc'}}]}
        response = client.post('/api/generate', json={'workspace': workspace})
        assert response.status_code == 422
        assert response.get_json()['node_id'] == 'r1'

    def test_requests_are_independent(self, client):
        first = client.post('/api/generate', json={'workspace': print_workspace('a')})
        second = client.post('/api/generate', json={'workspace': print_workspace('a')})
        assert first.get_json()['code'] == second.get_json()['code']


class TestInfo:
    """Test cases for the informational endpoints."""

    def test_kinds(self, client):
        response = client.get('/api/kinds')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['language'] == 'zig'
        assert 'math_arithmetic' in data['kinds']
        assert 'every' in data['categories']['iot']

    def test_api_test(self, client):
        data = client.get('/api/test').get_json()
        assert data['success'] is True
        assert data['version'] == '0.1.0'
