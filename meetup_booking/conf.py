"""
Paramètres de l'application, surchargeables dans les settings Django.
"""

from django.conf import settings


DEFAULTS = {
    # Envoi du mail de bienvenue avec le mot de passe généré
    'MEETUP_NEW_USER_NOTIFICATION': True,

    # Vérifie le profil Facebook auprès de la Graph API au lieu de faire
    # confiance aux champs postés
    'MEETUP_FACEBOOK_VERIFY_TOKEN': True,
    'MEETUP_FACEBOOK_GRAPH_URL': 'https://graph.facebook.com/v19.0',
    'MEETUP_FACEBOOK_TIMEOUT': 5,

    # Inscriptions anonymes : tentatives par IP et fenêtre en secondes
    'MEETUP_REGISTRATION_RATE_LIMIT': 10,
    'MEETUP_REGISTRATION_RATE_WINDOW': 300,

    # Nombre de reverse proxies de confiance devant le site ; 0 ignore
    # X-Forwarded-For et utilise REMOTE_ADDR
    'MEETUP_TRUSTED_PROXY_COUNT': 0,

    # Longueur du mot de passe généré à l'inscription
    'MEETUP_PASSWORD_LENGTH': 12,

    # Durée de conservation des réservations annulées (jours)
    'MEETUP_CANCELLED_RETENTION_DAYS': 90,

    'MEETUP_ENCRYPTION_KEY': None,
}


def get(name):
    """Retourne la valeur du setting `name` ou sa valeur par défaut."""
    return getattr(settings, name, DEFAULTS[name])
