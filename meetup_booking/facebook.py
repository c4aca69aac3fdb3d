"""
Client Graph API Facebook

Utilisé par l'inscription via le bouton Facebook pour récupérer le profil
associé au jeton d'accès fourni par le SDK JavaScript, au lieu de faire
confiance aux champs envoyés par le navigateur.
"""

import logging
from dataclasses import dataclass

import requests
from django.utils.translation import gettext_lazy as _
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import conf
from .exceptions import FacebookAuthError

logger = logging.getLogger('meetup_booking')

PROFILE_FIELDS = 'id,email,first_name,last_name,link'


@dataclass
class FacebookProfile:
    """Profil Facebook minimal nécessaire à l'inscription."""
    id: str
    email: str
    first_name: str = ''
    last_name: str = ''
    link: str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get('id', '')),
            email=data.get('email', '') or '',
            first_name=data.get('first_name', '') or '',
            last_name=data.get('last_name', '') or '',
            link=data.get('link', '') or '',
        )


class FacebookGraphClient:
    """
    Client pour la Graph API.

    Gère les appels avec retry automatique sur les erreurs serveur et un
    timeout configurable.
    """

    def __init__(self, base_url=None, timeout=None):
        self.base_url = (base_url or conf.get('MEETUP_FACEBOOK_GRAPH_URL')).rstrip('/')
        self.timeout = timeout or conf.get('MEETUP_FACEBOOK_TIMEOUT')

        self.session = requests.Session()
        retry_strategy = Retry(
            total=2,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({'Accept': 'application/json'})

    def fetch_profile(self, access_token):
        """
        Récupère le profil de l'utilisateur propriétaire du jeton.

        Raises:
            FacebookAuthError: jeton absent ou refusé, API indisponible,
                profil sans adresse e-mail
        """
        if not access_token:
            raise FacebookAuthError(_('Facebook login failed, please try again'), code='missing_token')

        url = f"{self.base_url}/me"
        try:
            response = self.session.get(
                url,
                params={'fields': PROFILE_FIELDS, 'access_token': access_token},
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error("[Meetup] Timeout lors de l'appel à la Graph API Facebook")
            raise FacebookAuthError(_('Facebook is not reachable right now, please try again later'), code='timeout')
        except requests.exceptions.RequestException as e:
            logger.error("[Meetup] Erreur de connexion à la Graph API Facebook: %s", e)
            raise FacebookAuthError(_('Facebook is not reachable right now, please try again later'), code='connection')

        if response.status_code in (400, 401, 403):
            logger.warning("[Meetup] Jeton Facebook refusé (HTTP %s)", response.status_code)
            raise FacebookAuthError(_('Facebook login failed, please try again'), code='invalid_token')

        if response.status_code != 200:
            logger.error("[Meetup] Erreur Graph API: %s - %s", response.status_code, response.text[:200])
            raise FacebookAuthError(_('Facebook is not reachable right now, please try again later'), code='api_error')

        try:
            profile = FacebookProfile.from_dict(response.json())
        except ValueError:
            logger.error("[Meetup] Réponse Graph API illisible")
            raise FacebookAuthError(_('Facebook is not reachable right now, please try again later'), code='api_error')

        if not profile.email:
            raise FacebookAuthError(
                _('Your Facebook account has no e-mail address, please register with the form'),
                code='no_email'
            )

        return profile
