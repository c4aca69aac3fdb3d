"""
Réservation et annulation de places

book_seat / cancel_seat sont appelés par les handlers AJAX et peuvent être
utilisés directement par d'autres parties du site.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .exceptions import BookingError
from .models import Booking, Meetup
from .signals import booking_cancelled, seat_booked

logger = logging.getLogger('meetup_booking')


def get_book_limit(meetup_id):
    """Nombre maximum de places par réservation, 0 si le meetup n'existe pas."""
    book_limit = Meetup.objects.filter(pk=meetup_id).values_list('book_limit', flat=True).first()
    return book_limit or 0


def book_seat(user, meetup_id, seats):
    """
    Réserve `seats` places pour `user`.

    Verrouille la ligne du meetup le temps de vérifier la capacité restante.

    Raises:
        BookingError: meetup inconnu ou fermé, réservation déjà existante,
            plus assez de places
    """
    if seats < 1:
        raise BookingError(_('Please enter a valid seat number'), code='invalid_seats')

    with transaction.atomic():
        try:
            meetup = Meetup.objects.select_for_update().get(pk=meetup_id)
        except Meetup.DoesNotExist:
            raise BookingError(_('This meetup does not exist'), code='not_found')

        if not meetup.booking_open:
            raise BookingError(_('Booking is closed for this meetup'), code='closed')

        if Booking.objects.filter(meetup=meetup, user=user, status=Booking.STATUS_BOOKED).exists():
            raise BookingError(_('You have already booked a seat for this meetup'), code='already_booked')

        seats_left = meetup.seats_left
        if seats_left is not None and seats > seats_left:
            logger.info(
                "[Meetup] Plus assez de places pour le meetup %s (%s demandées, %s restantes)",
                meetup.pk, seats, seats_left
            )
            raise BookingError(_('Sorry, there are not enough seats left'), code='full')

        try:
            with transaction.atomic():
                booking = Booking.objects.create(meetup=meetup, user=user, seats=seats)
        except IntegrityError:
            raise BookingError(_('You have already booked a seat for this meetup'), code='already_booked')

    logger.info("[Meetup] Réservation %s : %s place(s) pour le meetup %s (user %s)",
                booking.pk, seats, meetup.pk, user.pk)
    seat_booked.send(sender=Booking, booking=booking)
    return booking


def cancel_seat(user, meetup_id, booking_id):
    """
    Annule la réservation `booking_id` de `user` pour le meetup `meetup_id`.

    Raises:
        BookingError: réservation introuvable, d'un autre utilisateur ou
            déjà annulée
    """
    with transaction.atomic():
        try:
            booking = Booking.objects.select_for_update().get(
                pk=booking_id,
                meetup_id=meetup_id,
                user=user,
            )
        except Booking.DoesNotExist:
            raise BookingError(_('Booking not found'), code='not_found')

        if not booking.is_active:
            raise BookingError(_('This booking is already cancelled'), code='already_cancelled')

        booking.status = Booking.STATUS_CANCELLED
        booking.cancelled_at = timezone.now()
        booking.save(update_fields=['status', 'cancelled_at', 'modified'])

    logger.info("[Meetup] Réservation %s annulée (meetup %s, user %s)", booking.pk, meetup_id, user.pk)
    booking_cancelled.send(sender=Booking, booking=booking)
    return booking
