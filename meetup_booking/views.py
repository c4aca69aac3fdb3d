"""
Handlers AJAX du formulaire d'inscription aux meetups

Toutes les actions passent par une seule URL ; le champ `action` choisit le
handler, selon que le visiteur est connecté ou non. Les réponses suivent le
format {"success": bool, "data": ...} attendu par le JavaScript du site.
"""

import logging
import re
from functools import wraps

from django.conf import settings
from django.contrib.auth import login
from django.contrib.auth.views import redirect_to_login
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.http import JsonResponse
from django.shortcuts import resolve_url
from django.utils.decorators import method_decorator
from django.utils.html import strip_tags
from django.utils.translation import gettext_lazy as _
from django.views import View
from django.views.decorators.csrf import csrf_exempt, csrf_protect

from . import conf
from .booking import book_seat, cancel_seat, get_book_limit
from .exceptions import AjaxError, BookingError, FacebookAuthError, RegistrationError
from .facebook import FacebookGraphClient, FacebookProfile
from .logging_filters import install
from .models import AttendeeProfile, Meetup, fit_to_field
from .registration import email_exists, get_user_by_email, register_user, update_user_meta

logger = install(logging.getLogger('meetup_booking'))

# (action, connecté) -> handler
ACTIONS = {}

INT_PREFIX = re.compile(r'^\s*([+-]?\d+)')


def send_json_success(data=None, status=200):
    return JsonResponse({'success': True, 'data': data}, status=status)


def send_json_error(data=None, status=200):
    return JsonResponse({'success': False, 'data': data}, status=status)


def error(message, error_type='error', status=200, **extra):
    """Construit l'AjaxError {type, message} levée par les handlers."""
    data = {'type': error_type, 'message': message}
    data.update(extra)
    return AjaxError(data, status=status)


def ajax_action(action, logged_in, csrf=True):
    """
    Enregistre un handler pour `action`.

    `logged_in` indique si le handler sert les visiteurs connectés ou
    anonymes. Les handlers protégés par `csrf` exigent le jeton CSRF du
    formulaire.
    """
    def decorator(func):
        @wraps(func)
        def handler(request):
            try:
                return func(request)
            except AjaxError as e:
                return send_json_error(e.data, status=e.status)

        if csrf:
            handler = csrf_protect(handler)

        ACTIONS[(action, logged_in)] = handler
        return func
    return decorator


def to_int(value):
    """Conversion tolérante : '3 seats' -> 3, '' ou 'abc' -> 0."""
    match = INT_PREFIX.match(str(value or ''))
    return int(match.group(1)) if match else 0


def clean_posted(data):
    """Retire les balises HTML et les espaces autour de chaque champ posté."""
    return {key: strip_tags(value).strip() for key, value in data.items()}


def get_client_ip(request):
    """
    Adresse IP du client.

    X-Forwarded-For n'est lu que derrière MEETUP_TRUSTED_PROXY_COUNT proxies
    de confiance : l'entrée retenue est celle ajoutée par le proxy le plus
    éloigné, les précédentes étant fournies par le client.
    """
    remote_addr = request.META.get('REMOTE_ADDR')
    proxy_count = conf.get('MEETUP_TRUSTED_PROXY_COUNT')
    if not proxy_count:
        return remote_addr

    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    entries = [entry.strip() for entry in x_forwarded_for.split(',') if entry.strip()]
    if len(entries) < proxy_count:
        return remote_addr
    return entries[-proxy_count]


def meetup_login_url(meetup_id):
    """URL de connexion qui ramène sur la page du meetup."""
    meetup = Meetup.objects.filter(pk=meetup_id).first()
    if meetup and meetup.get_absolute_url():
        return redirect_to_login(meetup.get_absolute_url()).url
    return resolve_url(settings.LOGIN_URL)


def check_rate_limit(request):
    """Limite les inscriptions anonymes par IP (compteur en cache)."""
    limit = conf.get('MEETUP_REGISTRATION_RATE_LIMIT')
    window = conf.get('MEETUP_REGISTRATION_RATE_WINDOW')

    ip_address = get_client_ip(request)
    rate_limit_key = f'meetup_rate_limit_{ip_address}'
    attempts = cache.get(rate_limit_key, 0)

    if attempts >= limit:
        logger.warning("[Meetup] Rate limit dépassé pour IP %s", ip_address)
        raise error(_('Too many attempts, please try again later'), status=429)

    cache.set(rate_limit_key, attempts + 1, window)


def check_required_fields(first_name, last_name, phone):
    if not phone or not first_name or not last_name:
        raise error(_('Please complete the required fields'))


def check_booking_limit(meetup_id, seat):
    """Refuse une demande de plus de places que le meetup n'en autorise."""
    if seat < 1 or seat > get_book_limit(meetup_id):
        raise error(_('Please enter a valid seat number'))


def do_booking(user, meetup_id, seat):
    try:
        book_seat(user, meetup_id, seat)
    except BookingError as e:
        raise error(e.message, error_type='registered')

    return send_json_success({
        'type': 'registered',
        'message': _('You have successfully booked the seat!'),
    })


@ajax_action('meetup_user_join', logged_in=False)
def guest_site_registration(request):
    """Inscrit un visiteur anonyme puis réserve ses places."""
    check_rate_limit(request)

    posted = clean_posted(request.POST)

    first_name = posted.get('meetup_fname', '')
    last_name = posted.get('meetup_lname', '')
    email = posted.get('meetup_email', '')
    phone = posted.get('meetup_phone', '')
    seat = to_int(posted.get('meetup-fb-join-seat'))
    meetup_id = to_int(posted.get('meetup_id'))

    check_required_fields(first_name, last_name, phone)

    try:
        validate_email(email)
    except ValidationError:
        raise error(_('Please enter a valid email address'))

    if email_exists(email):
        raise error(
            _('You are already registered to our site, please login'),
            error_type='login',
            url=meetup_login_url(meetup_id),
        )

    check_booking_limit(meetup_id, seat)

    try:
        user = register_user(request, email, first_name, last_name)
    except RegistrationError as e:
        raise error(e.message)

    update_user_meta(user, posted)
    return do_booking(user, meetup_id, seat)


@ajax_action('meetup_user_join', logged_in=True)
def user_booking(request):
    """Réservation pour un utilisateur déjà connecté."""
    posted = clean_posted(request.POST)

    first_name = posted.get('meetup_fname', '')
    last_name = posted.get('meetup_lname', '')
    phone = posted.get('meetup_phone', '')
    seat = to_int(posted.get('meetup-fb-join-seat'))
    meetup_id = to_int(posted.get('meetup_id'))

    check_required_fields(first_name, last_name, phone)

    update_user_meta(request.user, posted)

    check_booking_limit(meetup_id, seat)

    return do_booking(request.user, meetup_id, seat)


@ajax_action('meetup_booking_cancel', logged_in=True)
def cancel_booking(request):
    meetup_id = to_int(request.POST.get('meetup_id'))
    booking_id = to_int(request.POST.get('booking_id'))

    try:
        cancel_seat(request.user, meetup_id, booking_id)
    except BookingError as e:
        raise error(e.message)

    return send_json_success(_('Your booking has been cancelled!'))


def get_facebook_profile(request):
    """
    Profil Facebook du visiteur.

    Vérifié auprès de la Graph API par défaut ; sinon construit à partir
    des champs postés.
    """
    if conf.get('MEETUP_FACEBOOK_VERIFY_TOKEN'):
        try:
            return FacebookGraphClient().fetch_profile(request.POST.get('access_token', ''))
        except FacebookAuthError as e:
            raise error(e.message)

    profile = FacebookProfile.from_dict(clean_posted(request.POST))
    try:
        validate_email(profile.email)
    except ValidationError:
        raise error(_('Please enter a valid email address'))
    return profile


@ajax_action('meetup_fb_register', logged_in=False, csrf=False)
def facebook_register(request):
    """Connexion ou inscription via le bouton Facebook."""
    profile = get_facebook_profile(request)

    user = get_user_by_email(profile.email)
    if user:
        if not user.is_active:
            logger.warning("[Meetup] Connexion Facebook refusée pour le user %s (compte désactivé)", user.pk)
            raise error(_('This account is disabled'))

        login(request, user, backend=settings.AUTHENTICATION_BACKENDS[0])
        logger.info("[Meetup] Connexion Facebook du user %s", user.pk)
        return send_json_success({
            'type': 'login',
            'message': _('You are now logged in'),
        })

    try:
        user = register_user(request, profile.email, profile.first_name, profile.last_name)
    except RegistrationError as e:
        raise error(e.message)

    fb_profile = AttendeeProfile.for_user(user)
    fb_profile.fb_id = fit_to_field(AttendeeProfile, 'fb_id', profile.id)
    fb_profile.fb_link = fit_to_field(AttendeeProfile, 'fb_link', profile.link)
    fb_profile.save(update_fields=['fb_id', 'fb_link'])

    return send_json_success({
        'type': 'registered',
        'message': _('Your account has been created'),
    })


@method_decorator(csrf_exempt, name='dispatch')
class AjaxView(View):
    """
    Point d'entrée unique des actions AJAX.

    La protection CSRF est appliquée action par action, d'où le
    csrf_exempt au niveau de la vue.
    """

    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        action = request.POST.get('action') or request.GET.get('action', '')
        handler = ACTIONS.get((action, request.user.is_authenticated))

        if handler is None:
            logger.debug("[Meetup] Action AJAX inconnue ou non autorisée: %s", action)
            return send_json_error('0', status=400)

        return handler(request)
