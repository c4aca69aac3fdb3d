"""
Création des comptes visiteurs et mise à jour de leur profil
"""

import logging
import random
import re
import unicodedata
from smtplib import SMTPException

from django.conf import settings
from django.contrib.auth import get_user_model, login
from django.core.mail import send_mail
from django.db import IntegrityError
from django.utils.crypto import get_random_string
from django.utils.html import strip_tags
from django.utils.translation import gettext_lazy as _

from . import conf
from .exceptions import RegistrationError
from .models import AttendeeProfile, fit_to_field
from .signals import new_user_notification, register_post, user_meta_updated, user_registered

logger = logging.getLogger('meetup_booking')

# Caractères acceptés par le validateur de username Django
USERNAME_UNSAFE = re.compile(r'[^\w.@+-]', re.ASCII)


def sanitize_username(value):
    value = unicodedata.normalize('NFKD', strip_tags(value)).encode('ascii', 'ignore').decode('ascii')
    return USERNAME_UNSAFE.sub('', value)


def username_exists(username):
    User = get_user_model()
    lookup = {f'{User.USERNAME_FIELD}__iexact': username}
    return User._default_manager.filter(**lookup).exists()


def email_exists(email):
    User = get_user_model()
    return User._default_manager.filter(email__iexact=email).exists()


def get_user_by_email(email):
    User = get_user_model()
    return User._default_manager.filter(email__iexact=email).first()


def guess_username(email):
    """
    Devine un username libre à partir de l'adresse e-mail.

    Essaie la partie locale de l'adresse, puis la même suivie d'un nombre
    aléatoire entre 1 et 199. Retourne None si les deux sont pris.
    """
    User = get_user_model()
    # Place réservée au suffixe numérique
    max_length = (User._meta.get_field(User.USERNAME_FIELD).max_length or 150) - 3
    username = sanitize_username(email.split('@', 1)[0])[:max_length]
    if not username:
        return None

    if not username_exists(username):
        return username

    username = f'{username}{random.randint(1, 199)}'
    if not username_exists(username):
        return username

    return None


def set_names(user, first_name, last_name):
    """
    Enregistre prénom et nom sur le user et retourne son profil, nom
    d'affichage renseigné mais non sauvegardé.

    Les valeurs sont tronquées à la taille des colonnes.
    """
    User = type(user)
    user.first_name = fit_to_field(User, 'first_name', first_name)
    user.last_name = fit_to_field(User, 'last_name', last_name)
    user.save(update_fields=['first_name', 'last_name'])

    profile = AttendeeProfile.for_user(user)
    profile.display_name = fit_to_field(AttendeeProfile, 'display_name', f'{user.first_name} {user.last_name}')
    return profile


def send_new_user_notification(user, password):
    subject = _('Your account on %(site)s') % {'site': getattr(settings, 'SITE_NAME', 'our site')}
    body = _(
        'Welcome!\n\n'
        'Username: %(username)s\n'
        'Password: %(password)s\n'
    ) % {'username': user.get_username(), 'password': password}

    try:
        send_mail(str(subject), str(body), None, [user.email])
    except (SMTPException, OSError) as e:
        logger.error("[Meetup] Échec de l'envoi du mail de bienvenue au user %s: %s", user.pk, e)


def register_user(request, email, first_name, last_name):
    """
    Crée un compte pour un visiteur puis le connecte.

    Un mot de passe aléatoire est généré et envoyé par mail (sauf si la
    notification est désactivée par setting ou par un receiver de
    `new_user_notification`).

    Raises:
        RegistrationError: aucun username disponible, inscription refusée
            par un receiver de `register_post` ou création impossible
    """
    username = guess_username(email)
    if not username:
        raise RegistrationError(_('Could not find an available username, please contact us'), code='username')

    password = get_random_string(conf.get('MEETUP_PASSWORD_LENGTH'))

    errors = []
    register_post.send(sender=None, username=username, email=email, errors=errors)
    if errors:
        raise RegistrationError(errors[0], code='refused')

    User = get_user_model()
    try:
        user = User._default_manager.create_user(username, email, password)
    except (IntegrityError, ValueError) as e:
        logger.warning("[Meetup] Création du compte %s impossible: %s", username, e)
        raise RegistrationError(_('Could not create your account'), code='create')

    send_notification = conf.get('MEETUP_NEW_USER_NOTIFICATION')
    if send_notification:
        responses = new_user_notification.send(
            sender=User, user=user, username=username, email=email, password=password
        )
        send_notification = all(response is not False for receiver, response in responses)

    if send_notification:
        send_new_user_notification(user, password)

    profile = set_names(user, first_name, last_name)
    profile.save(update_fields=['display_name'])

    user_registered.send(sender=User, user=user, username=username, email=email, password=password)

    login(request, user, backend=settings.AUTHENTICATION_BACKENDS[0])

    logger.info("[Meetup] Nouveau compte %s (user %s) créé et connecté", username, user.pk)
    return user


def update_user_meta(user, posted):
    """Enregistre les informations du formulaire d'inscription sur le profil."""
    first_name = strip_tags(posted.get('meetup_fname', ''))
    last_name = strip_tags(posted.get('meetup_lname', ''))

    profile = set_names(user, first_name, last_name)
    profile.site_url = fit_to_field(AttendeeProfile, 'site_url', posted.get('meetup_site_url', ''))
    profile.phone = posted.get('meetup_phone', '')
    profile.twitter = fit_to_field(AttendeeProfile, 'twitter', posted.get('meetup_twitter', ''))
    profile.career = fit_to_field(AttendeeProfile, 'career', posted.get('meetup_career', ''))
    profile.save()

    user_meta_updated.send(sender=AttendeeProfile, user=user, posted=posted)
