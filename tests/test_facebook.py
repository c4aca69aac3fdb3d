"""Graph API client tests."""

from unittest import mock

import pytest
import requests

from meetup_booking.exceptions import FacebookAuthError
from meetup_booking.facebook import FacebookGraphClient, PROFILE_FIELDS


def make_response(status_code, payload=None):
    response = mock.Mock(status_code=status_code, text='')
    response.json.return_value = payload or {}
    return response


@pytest.fixture
def client():
    return FacebookGraphClient(base_url='https://graph.test/v1/', timeout=3)


def test_fetch_profile(client):
    payload = {
        'id': 1234,
        'email': 'dave@example.com',
        'first_name': 'Dave',
        'last_name': 'Lopez',
        'link': 'https://facebook.com/dave',
    }

    with mock.patch.object(client.session, 'get', return_value=make_response(200, payload)) as get:
        profile = client.fetch_profile('token-123')

    get.assert_called_once_with(
        'https://graph.test/v1/me',
        params={'fields': PROFILE_FIELDS, 'access_token': 'token-123'},
        timeout=3,
    )
    assert profile.id == '1234'
    assert profile.email == 'dave@example.com'
    assert profile.first_name == 'Dave'
    assert profile.link == 'https://facebook.com/dave'


def test_fetch_profile_default_settings(settings):
    settings.MEETUP_FACEBOOK_GRAPH_URL = 'https://graph.example/v2'
    settings.MEETUP_FACEBOOK_TIMEOUT = 9

    client = FacebookGraphClient()

    assert client.base_url == 'https://graph.example/v2'
    assert client.timeout == 9


def test_fetch_profile_without_token(client):
    with mock.patch.object(client.session, 'get') as get:
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('')

    get.assert_not_called()
    assert exc.value.code == 'missing_token'


@pytest.mark.parametrize('status_code', [400, 401, 403])
def test_fetch_profile_rejected_token(client, status_code):
    with mock.patch.object(client.session, 'get', return_value=make_response(status_code)):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('bad')

    assert exc.value.code == 'invalid_token'


def test_fetch_profile_server_error(client):
    with mock.patch.object(client.session, 'get', return_value=make_response(502)):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('token')

    assert exc.value.code == 'api_error'


def test_fetch_profile_timeout(client):
    with mock.patch.object(client.session, 'get', side_effect=requests.exceptions.Timeout):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('token')

    assert exc.value.code == 'timeout'


def test_fetch_profile_connection_error(client):
    with mock.patch.object(client.session, 'get', side_effect=requests.exceptions.ConnectionError):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('token')

    assert exc.value.code == 'connection'


def test_fetch_profile_invalid_json(client):
    response = make_response(200)
    response.json.side_effect = ValueError('no json')

    with mock.patch.object(client.session, 'get', return_value=response):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('token')

    assert exc.value.code == 'api_error'


def test_fetch_profile_without_email(client):
    with mock.patch.object(client.session, 'get', return_value=make_response(200, {'id': '1'})):
        with pytest.raises(FacebookAuthError) as exc:
            client.fetch_profile('token')

    assert exc.value.code == 'no_email'
