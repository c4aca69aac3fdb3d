"""
Champs de base de données chiffrés (coordonnées des participants)
"""

import os
import logging
from pathlib import Path
from django.db import models
from django.conf import settings
from cryptography.fernet import Fernet, InvalidToken

from . import conf

logger = logging.getLogger('meetup_booking')

# Préfixe de tout token Fernet encodé en base64
FERNET_PREFIX = 'gAAAAA'


def get_encryption_key():
    """
    Récupère ou génère la clé de chiffrement.

    Ordre de recherche : variable d'environnement, settings Django, puis
    fichier de clé dans DATA_DIR (créé au premier appel).
    """
    key = os.environ.get('MEETUP_ENCRYPTION_KEY') or conf.get('MEETUP_ENCRYPTION_KEY')

    if key:
        return key.encode() if isinstance(key, str) else key

    data_dir = getattr(settings, 'DATA_DIR', '/data')
    key_file = Path(data_dir) / '.meetup_encryption_key'

    try:
        if key_file.exists():
            key = key_file.read_text().strip()
            logger.debug("[Meetup] Clé de chiffrement chargée depuis %s", key_file)
            return key.encode()

        new_key = Fernet.generate_key()
        key_file.parent.mkdir(parents=True, exist_ok=True)
        key_file.write_bytes(new_key)
        try:
            os.chmod(key_file, 0o600)
        except OSError:
            logger.debug("[Meetup] Impossible de restreindre les droits de %s", key_file)

        logger.info("[Meetup] Nouvelle clé de chiffrement générée dans %s", key_file)
        logger.warning("[Meetup] IMPORTANT: Sauvegardez cette clé pour les migrations/restaurations!")
        return new_key

    except OSError as e:
        logger.error("[Meetup] Erreur lors de la gestion du fichier de clé: %s", e)
        logger.warning("[Meetup] Utilisation d'une clé temporaire - Les données chiffrées ne seront pas persistantes!")
        return Fernet.generate_key()


class EncryptedTextField(models.TextField):
    """
    TextField chiffré au repos avec Fernet (AES-128 CBC + HMAC SHA-256).

    Les valeurs en clair déjà présentes en base sont relues telles quelles
    et chiffrées à la prochaine sauvegarde.
    """

    description = "TextField chiffré avec Fernet"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._fernet = None

    @property
    def fernet(self):
        if self._fernet is None:
            self._fernet = Fernet(get_encryption_key())
        return self._fernet

    def _decrypt(self, value):
        """Valeur en clair, None si `value` n'est pas un token de cette clé."""
        if not value.startswith(FERNET_PREFIX):
            return None
        try:
            return self.fernet.decrypt(value.encode()).decode('utf-8')
        except InvalidToken:
            return None

    def from_db_value(self, value, expression, connection):
        if not value or not value.startswith(FERNET_PREFIX):
            return value

        decrypted = self._decrypt(value)
        if decrypted is None:
            logger.warning("[Meetup] Valeur impossible à déchiffrer (clé incorrecte), valeur vide retournée")
            return ''
        return decrypted

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if value is None or value == '':
            return value

        # Déjà chiffré avec notre clé : ne pas rechiffrer. Une saisie qui
        # ressemble seulement à un token est chiffrée comme les autres.
        if self._decrypt(value) is not None:
            return value

        return self.fernet.encrypt(value.encode()).decode('utf-8')
