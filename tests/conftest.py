import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.urls import reverse

from meetup_booking.models import Meetup


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def ajax_url():
    return reverse('meetup_booking:ajax')


@pytest.fixture
def meetup(db):
    return Meetup.objects.create(
        title='Django Paris',
        url='https://example.com/meetups/django-paris/',
        book_limit=3,
        capacity=10,
    )


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        'bob', 'bob@example.com', 'secret', first_name='Bob', last_name='Martin'
    )


@pytest.fixture
def logged_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def join_data(meetup):
    return {
        'action': 'meetup_user_join',
        'meetup_fname': 'Alice',
        'meetup_lname': 'Durand',
        'meetup_email': 'alice@example.com',
        'meetup_phone': '06 12 34 56 78',
        'meetup-fb-join-seat': '2',
        'meetup_id': str(meetup.pk),
        'meetup_twitter': '@alice',
        'meetup_career': 'Developer',
        'meetup_site_url': 'https://alice.example.com',
    }
