"""Registration helper tests."""

from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.test import RequestFactory
from django.contrib.sessions.backends.db import SessionStore

from meetup_booking.exceptions import RegistrationError
from meetup_booking.registration import guess_username, register_user, sanitize_username, update_user_meta
from meetup_booking.signals import user_meta_updated, user_registered

pytestmark = pytest.mark.django_db


@pytest.fixture
def request_with_session():
    request = RequestFactory().post('/')
    request.session = SessionStore()
    return request


def test_sanitize_username():
    assert sanitize_username('jean.dupont') == 'jean.dupont'
    assert sanitize_username('élodie') == 'elodie'
    assert sanitize_username('a b<i>c</i>!') == 'abc'


def test_guess_username_from_email():
    assert guess_username('alice@example.com') == 'alice'


def test_guess_username_adds_random_number():
    get_user_model().objects.create_user('alice', 'a1@example.com', 'secret')

    with mock.patch('meetup_booking.registration.random.randint', return_value=7):
        assert guess_username('Alice@example.org') == 'alice7'


def test_guess_username_gives_up():
    get_user_model().objects.create_user('alice', 'a1@example.com', 'secret')
    get_user_model().objects.create_user('alice7', 'a2@example.com', 'secret')

    with mock.patch('meetup_booking.registration.random.randint', return_value=7):
        assert guess_username('alice@example.com') is None


def test_guess_username_empty_local_part():
    assert guess_username('!!!@example.com') is None


def test_register_user(request_with_session, mailoutbox):
    received = []

    def on_registered(sender, user, username, email, password, **kwargs):
        received.append((username, email, password))

    user_registered.connect(on_registered)
    try:
        user = register_user(request_with_session, 'alice@example.com', 'Alice', 'Durand')
    finally:
        user_registered.disconnect(on_registered)

    assert user.username == 'alice'
    assert user.get_full_name() == 'Alice Durand'
    assert user.meetup_profile.display_name == 'Alice Durand'

    username, email, password = received[0]
    assert username == 'alice'
    assert len(password) == 12
    assert password.isalnum()
    assert user.check_password(password)
    assert password in mailoutbox[0].body

    assert request_with_session.session['_auth_user_id'] == str(user.pk)


def test_register_user_password_length(request_with_session, settings):
    settings.MEETUP_PASSWORD_LENGTH = 20

    with mock.patch('meetup_booking.registration.get_random_string', return_value='x' * 20) as generate:
        register_user(request_with_session, 'alice@example.com', 'Alice', 'Durand')

    generate.assert_called_once_with(20)


def test_register_user_without_username(request_with_session):
    get_user_model().objects.create_user('alice', 'a1@example.com', 'secret')
    get_user_model().objects.create_user('alice1', 'a2@example.com', 'secret')

    with mock.patch('meetup_booking.registration.random.randint', return_value=1):
        with pytest.raises(RegistrationError):
            register_user(request_with_session, 'alice@example.com', 'Alice', 'Durand')


def test_update_user_meta(user):
    received = []

    def on_update(sender, user, posted, **kwargs):
        received.append(posted)

    posted = {
        'meetup_fname': '<em>Robert</em>',
        'meetup_lname': 'Martin',
        'meetup_phone': '+33 6 00 00 00 00',
    }

    user_meta_updated.connect(on_update)
    try:
        update_user_meta(user, posted)
    finally:
        user_meta_updated.disconnect(on_update)

    user.refresh_from_db()
    assert user.first_name == 'Robert'

    profile = user.meetup_profile
    assert profile.display_name == 'Robert Martin'
    assert profile.phone == '+33 6 00 00 00 00'
    assert profile.twitter == ''
    assert profile.career == ''
    assert profile.site_url == ''
    assert received == [posted]


def test_update_user_meta_truncates_long_values(user):
    update_user_meta(user, {
        'meetup_fname': 'A' * 300,
        'meetup_lname': 'B' * 300,
        'meetup_phone': '0612',
        'meetup_twitter': 'x' * 500,
        'meetup_career': 'c' * 500,
        'meetup_site_url': 'https://example.com/' + 'p' * 500,
    })

    user.refresh_from_db()
    assert user.first_name == 'A' * 150
    assert user.last_name == 'B' * 150

    profile = user.meetup_profile
    assert len(profile.twitter) == 100
    assert len(profile.career) == 200
    assert len(profile.site_url) == 200
    assert profile.display_name == ('A' * 150 + ' ' + 'B' * 150)[:250]


def test_register_user_truncates_names(request_with_session):
    user = register_user(request_with_session, 'alice@example.com', 'A' * 300, 'Durand')

    assert user.first_name == 'A' * 150
    assert len(user.meetup_profile.display_name) <= 250


def test_guess_username_long_local_part():
    username = guess_username('a' * 200 + '@example.com')

    assert username == 'a' * 147
