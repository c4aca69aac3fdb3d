"""
Commande de maintenance pour purger les réservations annulées

Usage:
    python manage.py meetup_cleanup [--dry-run] [--days=90]
"""

import logging
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from meetup_booking import conf
from meetup_booking.models import Booking

logger = logging.getLogger('meetup_booking')


class Command(BaseCommand):
    help = 'Purge les réservations annulées plus anciennes que la durée de conservation'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Affiche ce qui serait supprimé sans supprimer réellement',
        )
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Durée de conservation en jours (défaut: MEETUP_CANCELLED_RETENTION_DAYS)',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        retention_days = options['days']
        if retention_days is None:
            retention_days = conf.get('MEETUP_CANCELLED_RETENTION_DAYS')

        if dry_run:
            self.stdout.write(self.style.WARNING('MODE DRY-RUN : Aucune suppression réelle'))

        cutoff_date = timezone.now() - timedelta(days=retention_days)
        old_bookings = Booking.objects.filter(
            status=Booking.STATUS_CANCELLED,
            cancelled_at__lt=cutoff_date,
        )

        count = old_bookings.count()
        if count == 0:
            self.stdout.write('Aucune réservation annulée à purger')
            return

        if not dry_run:
            old_bookings.delete()
            logger.info("[Meetup] %s réservation(s) annulée(s) purgée(s) (> %s jours)", count, retention_days)

        self.stdout.write(self.style.SUCCESS(f'{count} réservation(s) annulée(s) supprimée(s)'))
