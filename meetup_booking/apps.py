"""
Configuration de l'application Django meetup_booking
"""

import logging

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _

from .logging_filters import install


class MeetupBookingConfig(AppConfig):
    """Configuration principale de l'application."""

    name = 'meetup_booking'
    verbose_name = _('Meetup booking')
    default_auto_field = 'django.db.models.AutoField'

    def ready(self):
        # Les logs du module ne doivent jamais contenir de coordonnées en clair
        install(logging.getLogger('meetup_booking'))
