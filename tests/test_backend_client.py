from unittest import mock

import pytest
import requests

from landycakes.backend import GENERIC_ERROR, UNREACHABLE_ERROR, BackendClient, BackendError


def fake_response(status, body=None):
    resp = mock.Mock()
    resp.status_code = status
    resp.ok = status < 400
    if body is None:
        resp.json.side_effect = ValueError('no json')
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def http():
    return mock.Mock(spec=requests.Session)


class TestBackendClient:
    def test_get_returns_json(self, http):
        http.request.return_value = fake_response(200, {'products': []})
        client = BackendClient(base_url='https://api.example.com/api/', session=http)

        assert client.get('/products', params={'page': 1}) == {'products': []}

        args, kwargs = http.request.call_args
        assert args == ('GET', 'https://api.example.com/api/products')
        assert kwargs['params'] == {'page': 1}
        assert 'Authorization' not in kwargs['headers']

    def test_token_is_sent(self, http):
        http.request.return_value = fake_response(200, {})
        client = BackendClient(base_url='https://api.example.com', token='abc', session=http)

        client.post('/checkout', json={'phone': '0712345678'})

        _, kwargs = http.request.call_args
        assert kwargs['headers']['Authorization'] == 'Bearer abc'
        assert kwargs['json'] == {'phone': '0712345678'}
        assert client.signed_in is True

    def test_error_message_from_server(self, http):
        http.request.return_value = fake_response(400, {'error': 'Insufficient stock'})
        client = BackendClient(base_url='https://api.example.com', session=http)

        with pytest.raises(BackendError) as excinfo:
            client.post('/checkout', json={})

        assert excinfo.value.message == 'Insufficient stock'
        assert excinfo.value.status_code == 400

    def test_error_without_body(self, http):
        http.request.return_value = fake_response(500)
        client = BackendClient(base_url='https://api.example.com', session=http)

        with pytest.raises(BackendError) as excinfo:
            client.get('/orders')

        assert excinfo.value.message == GENERIC_ERROR
        assert excinfo.value.status_code == 500

    def test_unreachable(self, http):
        http.request.side_effect = requests.ConnectionError('refused')
        client = BackendClient(base_url='https://api.example.com', session=http)

        with pytest.raises(BackendError) as excinfo:
            client.get('/orders')

        assert excinfo.value.message == UNREACHABLE_ERROR
        assert excinfo.value.status_code is None

    def test_for_request_reads_session_token(self, rf, settings):
        request = rf.get('/')
        request.session = {settings.AUTH_TOKEN_SESSION_KEY: 'tok'}

        client = BackendClient.for_request(request)

        assert client.token == 'tok'
        assert client.base_url == settings.STOREFRONT_API['BASE_URL'].rstrip('/')
